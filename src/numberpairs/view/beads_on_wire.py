"""
Beads On Wire
Draws the wire, the divider and one bead per token, and forwards pointer and
keyboard input to the BeadLineStore.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QBrush, QColor, QKeyEvent, QPainter, QPen
from PySide6.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsLineItem, QGraphicsScene,
    QGraphicsSceneMouseEvent, QGraphicsView, QWidget
)

from numberpairs.config import BEAD_HEIGHT_PX, BEAD_WIDTH_PX, COUNTING_AREA_WIDTH_PX
from numberpairs.controller.store import BeadLineStore
from numberpairs.model.partitioned_track import TrackSnapshot
from numberpairs.model.token import AddendType

BEAD_COLORS: dict[AddendType, str] = {
    AddendType.LEFT: "#F7B0D5",
    AddendType.RIGHT: "#8ED1F5",
}
DIVIDER_RADIUS_PX = 5.0
WIRE_WIDTH_PX = 2.0


def model_to_view_x(x: float) -> float:
    """Track coordinate (slots) -> scene x (px). Slot 0 is centred half a bead from the wire start."""
    return x * BEAD_WIDTH_PX + BEAD_WIDTH_PX / 2


def view_to_model_x(px: float) -> float:
    return (px - BEAD_WIDTH_PX / 2) / BEAD_WIDTH_PX


class BeadItem(QGraphicsEllipseItem):
    """One bead. Pointer drags and arrow / Home / End keys go to the store."""
    def __init__(self, token_id: int, store: BeadLineStore) -> None:
        super().__init__(-BEAD_WIDTH_PX / 2, -BEAD_HEIGHT_PX / 4, BEAD_WIDTH_PX, BEAD_HEIGHT_PX / 2)
        self.token_id = token_id
        self.store = store
        self.setPen(QPen(QColor("black"), 1.0))
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsFocusable, True)
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.setOpacity(0.8)

    def set_addend_type(self, addend_type: AddendType) -> None:
        self.setBrush(QBrush(QColor(BEAD_COLORS[addend_type])))

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        self.setFocus()
        self.setCursor(Qt.CursorShape.ClosedHandCursor)
        event.accept()

    def mouseMoveEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        self.store.on_drag_proposed(self.token_id, view_to_model_x(event.scenePos().x()))

    def mouseReleaseEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.store.on_drag_released(self.token_id)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key = event.key()
        if key in (Qt.Key.Key_Left, Qt.Key.Key_Right):
            step = self.store.config.slot_width
            if key == Qt.Key.Key_Left:
                step = -step
            x = self.store.track.token_by_id(self.token_id).position
            self.store.on_drag_proposed(self.token_id, x + step)
            self.store.on_drag_released(self.token_id)
        elif key == Qt.Key.Key_Home:
            self.store.on_home_command(self.token_id)
        elif key == Qt.Key.Key_End:
            self.store.on_end_command(self.token_id)
        else:
            super().keyPressEvent(event)


class BeadsOnWireView(QGraphicsView):
    def __init__(self, store: BeadLineStore, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.store = store
        self.setRenderHint(QPainter.RenderHint.Antialiasing)

        self._scene = QGraphicsScene(self)
        self._scene.setSceneRect(0, -BEAD_HEIGHT_PX / 2, COUNTING_AREA_WIDTH_PX, BEAD_HEIGHT_PX)
        self.setScene(self._scene)

        self._wire = QGraphicsLineItem(0, 0, COUNTING_AREA_WIDTH_PX, 0)
        self._wire.setPen(QPen(QColor("black"), WIRE_WIDTH_PX))
        self._scene.addItem(self._wire)

        r = DIVIDER_RADIUS_PX
        self._divider = QGraphicsEllipseItem(-r, -r, 2 * r, 2 * r)
        self._divider.setBrush(QBrush(QColor("black")))
        self._divider.setZValue(1)
        self._scene.addItem(self._divider)

        # token id -> bead item; the only lookup between model tokens and scene items
        self.bead_items: dict[int, BeadItem] = {}
        for token in store.track.tokens:
            item = BeadItem(token.id, store)
            item.setZValue(2)
            self._scene.addItem(item)
            self.bead_items[token.id] = item

        store.positions_changed.connect(self.update_from_snapshot)
        self.update_from_snapshot(store.snapshot())

    def update_from_snapshot(self, snapshot: TrackSnapshot) -> None:
        self._divider.setPos(model_to_view_x(snapshot.divider), 0)
        for state in snapshot.tokens:
            item = self.bead_items[state.id]
            visible = state.addend_type is not AddendType.INACTIVE
            item.setVisible(visible)
            if visible:
                item.set_addend_type(state.addend_type)
                item.setPos(model_to_view_x(state.position), 0)
