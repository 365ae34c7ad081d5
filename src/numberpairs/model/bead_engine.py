"""
Bead Position Engine
====================
Pure computations over ordered lists of track positions.

Why is this file needed?
------------------------
1. Layout: Default and grouped-by-five placement of the two addend groups.
2. Allocation: Adding a bead to the outside of a group, or removing the
   outermost one, while keeping every bead on the track.
3. Collision: One primitive (`shift_to_resolve_overlap`) that removes overlaps
   and is reused by every other operation.

The engine keeps no state between calls. It has no knowledge of dragging,
input devices or which token object owns a position.

Conventions:
    All position lists are ASCENDING unless stated otherwise.
    `side` is AddendType.LEFT or AddendType.RIGHT.
    `direction` is the sign of travel along the track (+1 right, -1 left).
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np

from numberpairs.config import BeadLineConfig
from numberpairs.model.errors import PreconditionError
from numberpairs.model.token import AddendType

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

Layout = tuple[list[float], list[float]]


class BeadPositionEngine:
    def __init__(self, config: Optional[BeadLineConfig] = None) -> None:
        self.config: BeadLineConfig = config or BeadLineConfig()

    # ------------------------------------------------------------------------------
    # Layouts
    # ------------------------------------------------------------------------------

    def divider_position(self, left_count: int) -> float:
        """Divider coordinate for the given number of left beads."""
        self._check_count(left_count, "left_count")
        return self.config.divider_for(left_count)

    def default_layout(self, left_count: int, right_count: int) -> Layout:
        """
        Both groups packed against the divider, each innermost bead one
        divider buffer away from it.

        Returns:
            (left_positions, right_positions), both ascending.
        """
        self._check_count(left_count, "left_count")
        self._check_count(right_count, "right_count")

        divider = self.config.divider_for(left_count)
        offsets_left = self._outward_offsets(left_count, with_clusters=False)
        offsets_right = self._outward_offsets(right_count, with_clusters=False)

        left = (divider - offsets_left)[::-1]
        right = divider + offsets_right
        return (
            self.fit_group(left, AddendType.LEFT, divider, self.config.divider_buffer),
            self.fit_group(right, AddendType.RIGHT, divider, self.config.divider_buffer),
        )

    def grouped_by_five_layout(self, left_positions: Sequence[float], right_positions: Sequence[float]) -> Layout:
        """
        Lay both groups out in clusters of `cluster_size` with one extra slot
        between clusters. Walking outward from the divider the remainder
        cluster (count mod cluster_size) comes first.

        Only the lengths of the inputs matter; bead identities keep their order.
        """
        left_count, right_count = len(left_positions), len(right_positions)
        divider = self.config.divider_for(left_count)

        left = (divider - self._outward_offsets(left_count, with_clusters=True))[::-1]
        right = divider + self._outward_offsets(right_count, with_clusters=True)

        # Near the track edges the cluster gaps are squeezed out first.
        return (
            self.fit_group(left, AddendType.LEFT, divider, self.config.divider_buffer),
            self.fit_group(right, AddendType.RIGHT, divider, self.config.divider_buffer),
        )

    def _outward_offsets(self, count: int, with_clusters: bool) -> npt.NDArray[np.float64]:
        """Distance of each bead from the divider, innermost first."""
        outward = np.arange(count)
        if with_clusters:
            size = self.config.cluster_size
            # Shift the index so the remainder cluster is number 0; a zero remainder shifts by 0.
            lead = (size - count % size) % size
            clusters = (outward + lead) // size
        else:
            clusters = np.zeros(count, dtype=np.int64)
        return self.config.divider_buffer + (outward + clusters) * self.config.slot_width

    # ------------------------------------------------------------------------------
    # Collision primitive
    # ------------------------------------------------------------------------------

    def shift_to_resolve_overlap(self, positions: Sequence[float], direction: int, anchor: float) -> list[float]:
        """
        Walk `positions` in the given (traversal) order and push each one at
        least one slot further along `direction` than the previous one. The
        first position is pushed to at least `anchor`.

        With direction > 0: x[i] = max(p[i], x[i-1] + slot), x[-1] = anchor - slot.
        With direction < 0: x[i] = min(p[i], x[i-1] - slot), x[-1] = anchor + slot.

        Positions that already satisfy the constraint are left untouched.
        """
        direction = int(np.sign(direction))
        if direction == 0:
            raise PreconditionError("shift direction must be non-zero")

        p = np.asarray(positions, dtype=np.float64)
        if p.size == 0:
            return []

        # Subtracting the running slot offset turns the recurrence into a running max (or min).
        steps = np.arange(p.size) * self.config.slot_width * direction
        if direction > 0:
            shifted = np.maximum.accumulate(np.maximum(p - steps, anchor)) + steps
        else:
            shifted = np.minimum.accumulate(np.minimum(p - steps, anchor)) + steps
        return shifted.tolist()

    def fit_group(self, positions: Sequence[float], side: AddendType, divider: float, clearance: float) -> list[float]:
        """
        Keep one group on its own side of the divider, at least `clearance`
        away from it, inside the track and one slot apart.

        Args:
            positions: Ascending positions of the group.
            side: Which group the positions belong to.
            divider: Current divider coordinate.
            clearance: Minimum distance between the innermost bead and the divider.

        Returns:
            Ascending positions.
        """
        self._check_side(side)
        ascending = list(positions)
        if not ascending:
            return []

        if side is AddendType.LEFT:
            # Inside-out away from the divider, then outside-in away from the track edge.
            inside_out = self.shift_to_resolve_overlap(ascending[::-1], -1, divider - clearance)
            return self.shift_to_resolve_overlap(inside_out[::-1], 1, self.config.min_x)

        inside_out = self.shift_to_resolve_overlap(ascending, 1, divider + clearance)
        return self.shift_to_resolve_overlap(inside_out[::-1], -1, self.config.max_x)[::-1]

    def clamp_to_track(self, positions: Sequence[float]) -> list[float]:
        """Ascending positions pushed inside [min_x, max_x], one slot apart."""
        lifted = self.shift_to_resolve_overlap(positions, 1, self.config.min_x)
        return self.shift_to_resolve_overlap(lifted[::-1], -1, self.config.max_x)[::-1]

    # ------------------------------------------------------------------------------
    # Adding and removing beads
    # ------------------------------------------------------------------------------

    def insert_token(
        self,
        existing_positions: Sequence[float],
        side: AddendType,
        left_count: int,
        right_count: int,
    ) -> list[float]:
        """
        Add one position at the outside end of a group (away from the divider).

        If the natural neighbour slot is off the track, the new bead is put on
        the boundary and the whole group is shifted inward to make room. An
        empty group gets the innermost slot of the default layout.

        Args:
            existing_positions: Ascending positions of the group before insertion.
            side: Which group grows.
            left_count: Number of left beads AFTER the insertion.
            right_count: Number of right beads AFTER the insertion.

        Returns:
            Ascending positions, one longer than `existing_positions`.
        """
        self._check_side(side)
        target = left_count if side is AddendType.LEFT else right_count
        if len(existing_positions) + 1 != target:
            raise PreconditionError(
                f"Inserting into {side.value} group of {len(existing_positions)} "
                f"does not produce the requested count {target}"
            )

        if not existing_positions:
            left, right = self.default_layout(left_count, right_count)
            return [left[-1]] if side is AddendType.LEFT else [right[0]]

        # Beads are added on the outside, so the group shifts toward the divider to make room.
        direction = 1 if side is AddendType.LEFT else -1
        outside_in = sorted(existing_positions, reverse=direction < 0)
        proposed = outside_in[0] - direction * self.config.slot_width
        outside_in.insert(0, proposed)

        if not self.config.track.contains(proposed):
            boundary = self.config.min_x if direction > 0 else self.config.max_x
            logger.debug(f"New {side.value} bead at {proposed:.2f} is off the track, shifting group from {boundary}")
            outside_in = self.shift_to_resolve_overlap(outside_in, direction, boundary)

        return sorted(outside_in)

    def remove_outermost_token(self, positions: Sequence[float], side: AddendType) -> list[float]:
        """
        Drop the bead farthest from the divider. Removing never creates an
        overlap, so nothing else moves.
        """
        self._check_side(side)
        if not positions:
            raise PreconditionError(f"Cannot remove a bead from the empty {side.value} group")
        ascending = sorted(positions)
        return ascending[1:] if side is AddendType.LEFT else ascending[:-1]

    # ------------------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------------------

    def _check_count(self, count: int, name: str) -> None:
        if count < 0 or count > self.config.pool_size:
            raise PreconditionError(f"{name}={count} is outside [0, {self.config.pool_size}]")

    @staticmethod
    def _check_side(side: AddendType) -> None:
        if side not in (AddendType.LEFT, AddendType.RIGHT):
            raise PreconditionError(f"Expected a LEFT or RIGHT group, got {side!r}")
