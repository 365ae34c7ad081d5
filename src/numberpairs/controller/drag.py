"""
Drag Move Controller
====================
Turns one proposed position for one dragged bead into a full layout update.

Why is this file needed?
------------------------
Beads sit on a wire: pushing one bead pushes every bead it touches in the
direction of travel, and a bead pushed across the divider changes addend.
This module implements that behaviour on top of the BeadPositionEngine:

1. Cohesion: touching beads of the same addend move together, and beads the
   move would jump over are carried along.
2. Bounds: the whole moving run stays on the track.
3. Divider crossing: crossed beads change group until no bead is left on the
   wrong side (each change moves the divider, which can expose another bead).
4. Spacing: a final overlap pass restores the one-slot minimum distance.

The controller holds no drag state between calls. Which bead is grabbed is
the caller's business (see BeadLineStore).
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging

import numpy as np

from numberpairs.model.bead_engine import BeadPositionEngine
from numberpairs.model.errors import DividerConvergenceError, PreconditionError
from numberpairs.model.partitioned_track import PartitionedTrack
from numberpairs.model.primitives import TOLERANCE
from numberpairs.model.token import AddendType, Token

logger = logging.getLogger(__name__)


@dataclass
class DragStepResult:
    token_id: int
    position: float
    moved: list[int] = field(default_factory=list)
    transferred: list[int] = field(default_factory=list)
    iterations: int = 0

    @property
    def split_changed(self) -> bool:
        return bool(self.transferred)


class DragMoveController:
    def __init__(self, engine: BeadPositionEngine) -> None:
        self.engine = engine
        self.config = engine.config

    # ------------------------------------------------------------------------------
    # Pointer / arrow-key drag
    # ------------------------------------------------------------------------------

    def step(self, track: PartitionedTrack, token_id: int, proposed: float) -> DragStepResult:
        """
        Apply one drag step.

        Args:
            track: The track to update in place.
            token_id: Id of the grabbed (active) token.
            proposed: Desired new coordinate of the grabbed token.
        """
        grabbed = self._active_token(track, token_id)
        direction = int(np.sign(proposed - grabbed.position))
        if direction == 0:
            return DragStepResult(token_id, grabbed.position)

        active = track.active_tokens()
        in_travel_order = active if direction > 0 else active[::-1]

        cohesive = self._cohesive_group(in_travel_order, grabbed, proposed, direction)
        if not cohesive or cohesive[0] is not grabbed:
            raise PreconditionError(f"Cohesive group of {grabbed!r} is malformed: {cohesive}")

        new_x = self._clamp(proposed, len(cohesive), direction)
        for rank, token in enumerate(cohesive):
            token.position = new_x + direction * rank * self.config.slot_width

        transferred, iterations = self._resolve_crossings(track, cohesive, direction)
        self._resolve_spacing(track, cohesive, direction)

        if transferred:
            logger.debug(f"Drag of token {token_id} moved {transferred} across the divider "
                         f"({track.left_count} + {track.right_count})")
        return DragStepResult(
            token_id=token_id,
            position=grabbed.position,
            moved=[t.id for t in cohesive],
            transferred=transferred,
            iterations=iterations,
        )

    def release(self, track: PartitionedTrack, token_id: int) -> DragStepResult:
        """
        Settle after a drop: no bead may rest within one slot of the divider,
        so such beads are nudged to exactly one slot away from it.
        """
        token = self._active_token(track, token_id)
        track.fit_groups(self.config.slot_width)
        return DragStepResult(token_id, token.position)

    # ------------------------------------------------------------------------------
    # Home / End
    # ------------------------------------------------------------------------------

    def jump(self, track: PartitionedTrack, token_id: int, side: AddendType) -> DragStepResult:
        """
        Move a bead to the other addend in one go (Home -> LEFT, End -> RIGHT).
        The bead is placed one divider buffer past the new divider without a
        bounds check; the following overlap pass makes room for it.
        A bead already on `side` does not move.
        """
        token = self._active_token(track, token_id)
        if side is AddendType.INACTIVE:
            raise PreconditionError("Cannot jump a token to the inactive pool")
        if token.addend_type is side:
            return DragStepResult(token_id, token.position)

        track.transfer(token, side)
        divider = track.divider_position
        buffer = self.config.divider_buffer
        token.position = divider - buffer if side is AddendType.LEFT else divider + buffer

        track.fit_groups(buffer)
        logger.debug(f"Token {token_id} jumped to the {side.value} addend")
        return DragStepResult(token_id, token.position, moved=[token_id], transferred=[token_id])

    # ------------------------------------------------------------------------------
    # Steps of a drag
    # ------------------------------------------------------------------------------

    def _cohesive_group(
        self, in_travel_order: list[Token], grabbed: Token, proposed: float, direction: int
    ) -> list[Token]:
        """
        The grabbed token plus the run ahead of it that moves with it: tokens
        of the same addend that touch the previous member, and any token the
        proposed move would jump over (whatever its addend).
        """
        start = in_travel_order.index(grabbed)
        group = [grabbed]
        for token in in_travel_order[start + 1:]:
            crossed = direction * (proposed - token.position) >= 0.0
            touching = abs(token.position - group[-1].position) <= self.config.slot_width + TOLERANCE
            if crossed or (touching and token.addend_type is grabbed.addend_type):
                group.append(token)
            else:
                break
        return group

    def _clamp(self, proposed: float, group_size: int, direction: int) -> float:
        """Clamp the grabbed position so the whole group ahead of it stays on the track."""
        extent = (group_size - 1) * self.config.slot_width
        track = self.config.track
        bounds = track.shrunk(high=extent) if direction > 0 else track.shrunk(low=extent)
        return bounds.clamp(proposed)

    def _resolve_crossings(
        self, track: PartitionedTrack, cohesive: list[Token], direction: int
    ) -> tuple[list[int], int]:
        """
        Reassign moving tokens that ended up on the wrong side of the divider,
        one per iteration, until none is left. Each reassignment moves the
        divider. A tie (token exactly on the divider) goes to the side of travel.

        Every token changes sides at most once per step, so the loop ends within
        pool_size iterations; running past that is a bug.
        """
        transferred: list[int] = []
        buffer = self.config.divider_buffer
        for iteration in range(self.config.pool_size + 1):
            divider = track.divider_position
            wrong = next((t for t in cohesive if self._on_wrong_side(t, divider, direction)), None)
            if wrong is None:
                return transferred, iteration

            target = wrong.addend_type.opposite
            track.transfer(wrong, target)
            divider = track.divider_position
            if target is AddendType.RIGHT:
                wrong.position = max(wrong.position, divider + buffer)
            else:
                wrong.position = min(wrong.position, divider - buffer)
            transferred.append(wrong.id)

        raise DividerConvergenceError(
            f"Divider crossings did not settle within {self.config.pool_size} iterations "
            f"(transferred {transferred})"
        )

    @staticmethod
    def _on_wrong_side(token: Token, divider: float, direction: int) -> bool:
        if token.addend_type is AddendType.LEFT:
            return token.position > divider or (token.position == divider and direction > 0)
        return token.position < divider or (token.position == divider and direction < 0)

    def _resolve_spacing(self, track: PartitionedTrack, cohesive: list[Token], direction: int) -> None:
        """
        Push tokens ahead of the moving run out of its way, pull the whole
        line back onto the track, then keep both groups half a slot clear of
        the divider.
        """
        moving = set(cohesive)
        # At equal positions the moving token counts as behind, so the resting one is pushed.
        ordered = sorted(
            track.active_tokens(),
            key=lambda t: (direction * t.position, t not in moving),
        )
        shifted = self.engine.shift_to_resolve_overlap(
            [t.position for t in ordered], direction, ordered[0].position
        )
        for token, x in zip(ordered, shifted):
            token.position = x

        # The push can run the far end of the line off the track.
        ascending = track.active_tokens()
        clamped = self.engine.clamp_to_track([t.position for t in ascending])
        for token, x in zip(ascending, clamped):
            token.position = x

        track.fit_groups(self.config.slot_width / 2)

    @staticmethod
    def _active_token(track: PartitionedTrack, token_id: int) -> Token:
        token = track.token_by_id(token_id)
        if not token.is_active:
            raise PreconditionError(f"Token {token_id} is not on the wire")
        return token
