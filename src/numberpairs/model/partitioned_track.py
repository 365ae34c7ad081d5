"""
Partitioned Track (Data Model)
==============================
This module owns the token pool and its split into left, right and inactive
groups.

Why is this file needed?
------------------------
1. State Management: It holds every token and the three group collections in
   one place. Views read from this object; controllers write to it.
2. Synchronisation: When the addend values change it moves tokens between
   groups and asks the BeadPositionEngine for matching positions, so that
   membership and positions never drift apart.
3. Invariants: It can check (and report) the ordering, spacing, side and
   bounds invariants of a settled track.

Classes:
    TokenState: Immutable copy of one token for renderers.
    TrackSnapshot: Immutable copy of the whole track.
    PartitionedTrack: The invariant holder.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

import numpy as np

from numberpairs.config import BeadLineConfig
from numberpairs.model.bead_engine import BeadPositionEngine
from numberpairs.model.errors import InvariantError, PreconditionError
from numberpairs.model.primitives import TOLERANCE
from numberpairs.model.token import AddendType, INACTIVE_POSITION, Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenState:
    id: int
    addend_type: AddendType
    position: float


@dataclass(frozen=True)
class TrackSnapshot:
    """What the rendering layer reads on every frame."""
    tokens: tuple[TokenState, ...]
    divider: float
    left_count: int
    right_count: int

    def positions(self, addend_type: AddendType) -> list[float]:
        return sorted(t.position for t in self.tokens if t.addend_type is addend_type)


class PartitionedTrack:
    """
    Token pool split into LEFT, RIGHT and INACTIVE collections.

    LEFT and RIGHT are kept sorted by position (ascending). INACTIVE is an
    ordered pool: the left group draws from and returns to its front, the
    right group its back, so the same ids tend to land in the same group.
    """
    def __init__(
        self,
        config: Optional[BeadLineConfig] = None,
        left_count: int = 0,
        right_count: int = 0,
        engine: Optional[BeadPositionEngine] = None,
    ) -> None:
        self.config: BeadLineConfig = config or BeadLineConfig()
        self.engine: BeadPositionEngine = engine or BeadPositionEngine(self.config)
        self._check_counts(left_count, right_count)

        self.tokens: list[Token] = [Token(id=i + 1) for i in range(self.config.pool_size)]
        self._tokens_by_id: dict[int, Token] = {token.id: token for token in self.tokens}

        pool = self.config.pool_size
        self.left_tokens: list[Token] = self.tokens[:left_count]
        self.right_tokens: list[Token] = self.tokens[pool - right_count:]
        self.inactive_tokens: list[Token] = self.tokens[left_count:pool - right_count]

        for token in self.left_tokens:
            token.addend_type = AddendType.LEFT
        for token in self.right_tokens:
            token.addend_type = AddendType.RIGHT

        # True between a count-change notification and the end of reconciliation.
        self.reconciling: bool = False

        self.reset_layout()

    # ------------------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------------------

    @property
    def left_count(self) -> int:
        return len(self.left_tokens)

    @property
    def right_count(self) -> int:
        return len(self.right_tokens)

    @property
    def total(self) -> int:
        return self.left_count + self.right_count

    @property
    def divider_position(self) -> float:
        return self.engine.divider_position(self.left_count)

    def token_by_id(self, token_id: int) -> Token:
        try:
            return self._tokens_by_id[token_id]
        except KeyError:
            raise PreconditionError(f"Unknown token id {token_id}") from None

    def active_tokens(self) -> list[Token]:
        """LEFT and RIGHT tokens sorted by position."""
        return sorted(self.left_tokens + self.right_tokens, key=lambda t: t.position)

    def group(self, side: AddendType) -> list[Token]:
        if side is AddendType.LEFT:
            return self.left_tokens
        if side is AddendType.RIGHT:
            return self.right_tokens
        return self.inactive_tokens

    def snapshot(self) -> TrackSnapshot:
        return TrackSnapshot(
            tokens=tuple(TokenState(t.id, t.addend_type, t.position) for t in self.tokens),
            divider=self.divider_position,
            left_count=self.left_count,
            right_count=self.right_count,
        )

    # ------------------------------------------------------------------------------
    # Layouts
    # ------------------------------------------------------------------------------

    def reset_layout(self) -> None:
        """Discard the current arrangement and use the default layout."""
        self.sort_groups()
        left, right = self.engine.default_layout(self.left_count, self.right_count)
        self._write_positions(self.left_tokens, left)
        self._write_positions(self.right_tokens, right)

    def organize(self) -> None:
        """Arrange both groups in clusters of five."""
        self.sort_groups()
        left, right = self.engine.grouped_by_five_layout(
            [t.position for t in self.left_tokens],
            [t.position for t in self.right_tokens],
        )
        self._write_positions(self.left_tokens, left)
        self._write_positions(self.right_tokens, right)
        logger.info(f"Organized {self.left_count} + {self.right_count} beads in groups of {self.config.cluster_size}.")

    def fit_groups(self, clearance: float) -> None:
        """Push each group clear of the divider and inside the track."""
        self.sort_groups()
        divider = self.divider_position
        for side in (AddendType.LEFT, AddendType.RIGHT):
            tokens = self.group(side)
            fitted = self.engine.fit_group([t.position for t in tokens], side, divider, clearance)
            self._write_positions(tokens, fitted)

    def sort_groups(self) -> None:
        self.left_tokens.sort(key=lambda t: t.position)
        self.right_tokens.sort(key=lambda t: t.position)

    @staticmethod
    def _write_positions(tokens: list[Token], positions: list[float]) -> None:
        if len(tokens) != len(positions):
            raise PreconditionError(f"{len(tokens)} tokens but {len(positions)} positions")
        for token, x in zip(tokens, positions):
            token.position = x

    # ------------------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------------------

    def transfer(self, token: Token, to: AddendType) -> None:
        """
        Move an active token across the divider. The collection move happens
        first and the membership attribute follows it.
        """
        source = token.addend_type
        if source is AddendType.INACTIVE or to is AddendType.INACTIVE or source is to:
            raise PreconditionError(f"Illegal transfer of {token!r} to {to.value}")
        self.group(source).remove(token)
        self.group(to).append(token)
        token.addend_type = to

    def reconcile(self, left_count: int, right_count: int) -> None:
        """
        Bring the group collections in line with new addend values.

        Opposite changes that cancel out (e.g. 3+2 -> 4+1) move the innermost
        beads straight across the divider. Anything else goes through the
        inactive pool: all removals first, then all additions.
        """
        self._check_counts(left_count, right_count)
        left_delta = left_count - self.left_count
        right_delta = right_count - self.right_count
        if left_delta == 0 and right_delta == 0:
            return

        logger.info(f"Reconciling {self.left_count} + {self.right_count} -> {left_count} + {right_count}")
        self.reconciling = True
        try:
            self.sort_groups()
            if left_delta + right_delta == 0:
                if left_delta > 0:
                    crossing = self.right_tokens[:left_delta]
                    to = AddendType.LEFT
                else:
                    crossing = self.left_tokens[self.left_count - right_delta:]
                    to = AddendType.RIGHT
                for token in crossing:
                    self.transfer(token, to)
            else:
                for _ in range(-right_delta):
                    self._shrink(AddendType.RIGHT)
                for _ in range(-left_delta):
                    self._shrink(AddendType.LEFT)
                for _ in range(right_delta):
                    self._grow(AddendType.RIGHT)
                for _ in range(left_delta):
                    self._grow(AddendType.LEFT)

            self.fit_groups(self.config.divider_buffer)
        finally:
            self.reconciling = False

    def _grow(self, side: AddendType) -> None:
        if not self.inactive_tokens:
            raise PreconditionError("No inactive tokens left to activate")

        tokens = self.group(side)
        new_left = self.left_count + (side is AddendType.LEFT)
        new_right = self.right_count + (side is AddendType.RIGHT)
        positions = self.engine.insert_token([t.position for t in tokens], side, new_left, new_right)

        if side is AddendType.LEFT:
            token = self.inactive_tokens.pop(0)
            tokens.insert(0, token)
        else:
            token = self.inactive_tokens.pop()
            tokens.append(token)
        token.addend_type = side
        self._write_positions(tokens, positions)

    def _shrink(self, side: AddendType) -> None:
        tokens = self.group(side)
        positions = self.engine.remove_outermost_token([t.position for t in tokens], side)

        if side is AddendType.LEFT:
            token = tokens.pop(0)
            self.inactive_tokens.insert(0, token)
        else:
            token = tokens.pop()
            self.inactive_tokens.append(token)
        token.addend_type = AddendType.INACTIVE
        token.position = INACTIVE_POSITION
        self._write_positions(tokens, positions)

    # ------------------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------------------

    def violations(self, clearance: float = 0.0) -> list[str]:
        """Human readable list of broken invariants. Empty when settled."""
        problems: list[str] = []
        for side in AddendType:
            wrong = [t.id for t in self.group(side) if t.addend_type is not side]
            if wrong:
                problems.append(f"tokens {wrong} are in the {side.value} collection with another membership")
        if len(self.inactive_tokens) != self.config.pool_size - self.total:
            problems.append(f"{len(self.inactive_tokens)} inactive tokens for a total of {self.total}")

        active = self.active_tokens()
        if not active:
            return problems

        positions = np.array([t.position for t in active])
        gaps = np.diff(positions)
        if np.any(gaps < self.config.slot_width - TOLERANCE):
            problems.append(f"active tokens closer than one slot (min gap {gaps.min():.3f})")

        track = self.config.track
        if positions[0] < track.min - TOLERANCE or positions[-1] > track.max + TOLERANCE:
            problems.append(f"positions [{positions[0]:.2f}, {positions[-1]:.2f}] leave the track")

        divider = self.divider_position
        if any(t.position > divider - clearance + TOLERANCE for t in self.left_tokens):
            problems.append(f"left token right of divider {divider:.2f}")
        if any(t.position < divider + clearance - TOLERANCE for t in self.right_tokens):
            problems.append(f"right token left of divider {divider:.2f}")
        return problems

    def check_invariants(self, clearance: float = 0.0) -> None:
        problems = self.violations(clearance)
        if problems:
            raise InvariantError("; ".join(problems))

    def _check_counts(self, left_count: int, right_count: int) -> None:
        if left_count < 0 or right_count < 0:
            raise PreconditionError(f"Negative addend in {left_count} + {right_count}")
        if left_count + right_count > self.config.pool_size:
            raise PreconditionError(
                f"{left_count} + {right_count} exceeds the pool of {self.config.pool_size} tokens"
            )
