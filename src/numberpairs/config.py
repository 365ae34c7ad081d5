"""
Configuration & Constants
=========================
This module serves as the central registry for the bead-line constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (bead width, divider offset, ...)
   scattered throughout the model and the view.
2. Validation: It checks once, at construction, that every possible split of
   the token pool fits on the track, so the layout code never has to.

Exports:
    BEAD_WIDTH_PX (float): Width of one bead in view pixels.
    COUNTING_AREA_WIDTH_PX (float): Width of the wire in view pixels.
    BeadLineConfig: Frozen bundle of all constants used by the model.
"""
from __future__ import annotations

from dataclasses import dataclass
import math

from numberpairs.model.primitives import TrackRange


# Global Constants
BEAD_WIDTH_PX: float = 21.5
BEAD_HEIGHT_PX: float = 80.0
COUNTING_AREA_WIDTH_PX: float = 864.0

LEFTMOST_SLOT: float = 1.0
SLOT_WIDTH: float = 1.0
DIVIDER_BUFFER: float = 1.5

# divider(left) = left / DIVIDER_DIVISOR + DIVIDER_OFFSET, empirically tuned
DIVIDER_DIVISOR: float = 2.5
DIVIDER_OFFSET: float = 15.0

CLUSTER_SIZE: int = 5
POOL_SIZE: int = 20


@dataclass(frozen=True)
class BeadLineConfig:
    """
    Constants of one bead line. Fixed at construction, never mutated.
    Positions are expressed in slots, so `slot_width` is normally 1.
    """
    slot_width: float = SLOT_WIDTH
    min_x: float = LEFTMOST_SLOT
    max_x: float = math.floor(COUNTING_AREA_WIDTH_PX / BEAD_WIDTH_PX) - 1.0
    divider_buffer: float = DIVIDER_BUFFER
    divider_divisor: float = DIVIDER_DIVISOR
    divider_offset: float = DIVIDER_OFFSET
    cluster_size: int = CLUSTER_SIZE
    pool_size: int = POOL_SIZE

    def __post_init__(self) -> None:
        if self.slot_width <= 0.0:
            raise ValueError(f"slot_width must be positive, got {self.slot_width}")
        if self.max_x <= self.min_x:
            raise ValueError(f"Empty track [{self.min_x}, {self.max_x}]")
        if self.cluster_size < 1:
            raise ValueError(f"cluster_size must be at least 1, got {self.cluster_size}")
        if self.pool_size < 1:
            raise ValueError(f"pool_size must be at least 1, got {self.pool_size}")

        # Every split of the pool must fit between the track edge and the divider.
        for left in range(self.pool_size + 1):
            right = self.pool_size - left
            divider = self.divider_for(left)
            left_room = divider - self.divider_buffer - self.min_x
            right_room = self.max_x - divider - self.divider_buffer
            if left and left_room < (left - 1) * self.slot_width:
                raise ValueError(f"{left} left tokens do not fit left of the divider at {divider:.2f}")
            if right and right_room < (right - 1) * self.slot_width:
                raise ValueError(f"{right} right tokens do not fit right of the divider at {divider:.2f}")

    @classmethod
    def from_physical_width(cls, width: float, token_width: float, **kwargs) -> BeadLineConfig:
        """
        Derive the track bounds from a wire width and a bead width (same units).
        `max_x` is always derived, so passing it raises ValueError.
        """
        if "max_x" in kwargs:
            raise ValueError("max_x is derived from the physical width and cannot be passed")
        slots = math.floor(width / token_width)
        return cls(min_x=kwargs.pop("min_x", LEFTMOST_SLOT), max_x=slots - 1.0, **kwargs)

    @property
    def track(self) -> TrackRange:
        return TrackRange(self.min_x, self.max_x)

    def divider_for(self, left_count: int) -> float:
        return left_count / self.divider_divisor + self.divider_offset
