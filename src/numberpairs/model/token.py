"""
Tokens (beads) and their group membership.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


INACTIVE_POSITION: float = -1.0


class AddendType(StrEnum):
    LEFT = "left"
    RIGHT = "right"
    INACTIVE = "inactive"

    @property
    def opposite(self) -> AddendType:
        if self is AddendType.LEFT:
            return AddendType.RIGHT
        if self is AddendType.RIGHT:
            return AddendType.LEFT
        raise ValueError("INACTIVE has no opposite side.")


@dataclass(eq=False)
class Token:
    """
    A single bead. Identity based equality: two tokens are never equal unless
    they are the same object, so tokens can live in sets and dict keys.
    """
    id: int
    addend_type: AddendType = AddendType.INACTIVE
    position: float = INACTIVE_POSITION

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id}, {self.addend_type.value}, x={self.position:.2f})"

    @property
    def is_active(self) -> bool:
        return self.addend_type is not AddendType.INACTIVE
