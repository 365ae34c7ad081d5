"""
Bead Line Store
===============
Central state holder for one bead line, with Qt signals for view sync.

Why is this file needed?
------------------------
1. Ownership: It owns the PartitionedTrack. The engine and the drag controller
   only ever see it for the duration of one call.
2. Routing: Every external event (addend change, drag, key command, organize,
   reset) enters through one slot here and is applied synchronously.
3. Gating: Drag input is ignored while an addend change is being reconciled,
   so a drag can never start on a half-updated track.
4. Notification: Views and mirrored representations listen to the signals
   instead of polling.
"""
from __future__ import annotations

from enum import IntEnum
import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from numberpairs.config import BeadLineConfig
from numberpairs.controller.drag import DragMoveController, DragStepResult
from numberpairs.model.bead_engine import BeadPositionEngine
from numberpairs.model.errors import BeadLineError
from numberpairs.model.partitioned_track import PartitionedTrack, TrackSnapshot
from numberpairs.model.token import AddendType

logger = logging.getLogger(__name__)


class DragState(IntEnum):
    SETTLED = 0
    DRAGGING = 1
    RECONCILING = 2


class BeadLineStore(QObject):
    """Central bead-line state with signals for view sync."""
    positions_changed = Signal(object)   # TrackSnapshot
    divider_changed = Signal(float)
    drag_state_changed = Signal(object)  # DragState
    addends_changed = Signal(int, int)   # split changed by a drag or a key command

    def __init__(self, left_count: int, right_count: int, config: Optional[BeadLineConfig] = None) -> None:
        super().__init__()
        self.config = config or BeadLineConfig()
        self.engine = BeadPositionEngine(self.config)
        self.track = PartitionedTrack(self.config, left_count, right_count, engine=self.engine)
        self.drag_controller = DragMoveController(self.engine)

        self._drag_state = DragState.SETTLED
        self._dragged_token_id: Optional[int] = None
        self._last_divider = self.track.divider_position

    @property
    def drag_state(self) -> DragState:
        return self._drag_state

    @property
    def is_settled(self) -> bool:
        return self._drag_state is DragState.SETTLED

    @property
    def dragged_token_id(self) -> Optional[int]:
        return self._dragged_token_id

    def snapshot(self) -> TrackSnapshot:
        return self.track.snapshot()

    # ------------------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------------------

    def on_addend_counts_changed(self, left_count: int, right_count: int) -> None:
        if (left_count, right_count) == (self.track.left_count, self.track.right_count):
            return
        if self._dragged_token_id is not None:
            logger.debug(f"Addend change interrupts the drag of token {self._dragged_token_id}")
            self._dragged_token_id = None

        self._set_drag_state(DragState.RECONCILING)
        try:
            self.track.reconcile(left_count, right_count)
        except BeadLineError as e:
            logger.error(f"Reconciling {left_count} + {right_count} failed: {e}")
            raise
        finally:
            self._set_drag_state(DragState.SETTLED)
        self._publish_settled()

    def on_drag_proposed(self, token_id: int, proposed: float) -> Optional[DragStepResult]:
        if not self._accepts_input(token_id):
            return None

        result = self._run(self.drag_controller.step, token_id, proposed)
        self._dragged_token_id = token_id
        self._set_drag_state(DragState.DRAGGING)
        if result.split_changed:
            self.addends_changed.emit(self.track.left_count, self.track.right_count)
        self._publish()
        return result

    def on_drag_released(self, token_id: int) -> Optional[DragStepResult]:
        if not self._accepts_input(token_id):
            return None

        result = self._run(self.drag_controller.release, token_id)
        self._dragged_token_id = None
        self._set_drag_state(DragState.SETTLED)
        self._publish_settled()
        return result

    def on_home_command(self, token_id: int) -> Optional[DragStepResult]:
        return self._jump(token_id, AddendType.LEFT)

    def on_end_command(self, token_id: int) -> Optional[DragStepResult]:
        return self._jump(token_id, AddendType.RIGHT)

    def on_organize_command(self) -> None:
        if self._drag_state is DragState.RECONCILING:
            logger.debug("Organize ignored while reconciling.")
            return
        self._dragged_token_id = None
        self._set_drag_state(DragState.SETTLED)
        self.track.organize()
        self._publish_settled()

    def on_reset_command(self) -> None:
        """Hard reset: drop any drag in progress and use the default layout."""
        self._dragged_token_id = None
        self._set_drag_state(DragState.SETTLED)
        self.track.reset_layout()
        logger.info(f"Bead line reset to the default layout for {self.track.left_count} + {self.track.right_count}.")
        self._publish_settled()

    # ------------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------------

    def _jump(self, token_id: int, side: AddendType) -> Optional[DragStepResult]:
        if not self._accepts_input(token_id):
            return None

        result = self._run(self.drag_controller.jump, token_id, side)
        self._dragged_token_id = None
        self._set_drag_state(DragState.SETTLED)
        if result.split_changed:
            self.addends_changed.emit(self.track.left_count, self.track.right_count)
        self._publish_settled()
        return result

    def _accepts_input(self, token_id: int) -> bool:
        if self._drag_state is DragState.RECONCILING or self.track.reconciling:
            logger.debug(f"Input for token {token_id} ignored while reconciling.")
            return False
        if self._dragged_token_id is not None and self._dragged_token_id != token_id:
            logger.debug(f"Input for token {token_id} ignored, token {self._dragged_token_id} is being dragged.")
            return False
        return True

    def _run(self, operation, *args) -> DragStepResult:
        try:
            return operation(self.track, *args)
        except BeadLineError as e:
            logger.error(f"{operation.__name__}{args} failed: {e}")
            raise

    def _set_drag_state(self, state: DragState) -> None:
        if state is not self._drag_state:
            self._drag_state = state
            self.drag_state_changed.emit(state)

    def _publish_settled(self) -> None:
        try:
            self.track.check_invariants()
        except BeadLineError as e:
            logger.error(f"Settled bead line is inconsistent: {e}")
            raise
        self._publish()

    def _publish(self) -> None:
        snapshot = self.track.snapshot()
        if snapshot.divider != self._last_divider:
            self._last_divider = snapshot.divider
            self.divider_changed.emit(snapshot.divider)
        self.positions_changed.emit(snapshot)
