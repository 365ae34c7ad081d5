"""
Main Application Window
=======================
The GUI container holding the bead wire and the addend controls.

Why is this file needed?
------------------------
1. Layout: It arranges the wire view above the controls row.
2. Routing: The addend spin boxes are the addend-count source; the Organize
   and Reset buttons map to the store commands. Splits changed by dragging
   are written back into the spin boxes.
"""
from typing import Optional

from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QMainWindow, QPushButton, QSpinBox, QVBoxLayout, QWidget
)

from numberpairs.controller.store import BeadLineStore
from numberpairs.view.beads_on_wire import BeadsOnWireView


VISIBLE_APP_NAME = "Number Pairs: Beads"


class MainWindow(QMainWindow):
    def __init__(self, store: BeadLineStore, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.store = store
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(960, 320)

        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QVBoxLayout(main_widget)

        # --- 1. WIRE ---
        self.wire_view = BeadsOnWireView(store)
        main_layout.addWidget(self.wire_view)

        # --- 2. CONTROLS ---
        controls = QHBoxLayout()
        main_layout.addLayout(controls)

        pool = store.config.pool_size
        self.left_spin = QSpinBox()
        self.left_spin.setRange(0, pool)
        self.left_spin.setValue(store.track.left_count)
        self.right_spin = QSpinBox()
        self.right_spin.setRange(0, pool)
        self.right_spin.setValue(store.track.right_count)
        self._update_spin_limits()

        self.organize_button = QPushButton("Organize")
        self.reset_button = QPushButton("Reset")

        controls.addWidget(QLabel("Left addend:"))
        controls.addWidget(self.left_spin)
        controls.addWidget(QLabel("Right addend:"))
        controls.addWidget(self.right_spin)
        controls.addStretch(1)
        controls.addWidget(self.organize_button)
        controls.addWidget(self.reset_button)

        # --- SIGNAL CONNECTIONS ---
        self.left_spin.valueChanged.connect(self.on_addend_spin_changed)
        self.right_spin.valueChanged.connect(self.on_addend_spin_changed)
        self.organize_button.clicked.connect(store.on_organize_command)
        self.reset_button.clicked.connect(store.on_reset_command)
        store.addends_changed.connect(self.on_addends_changed)

    def on_addend_spin_changed(self, _value: int) -> None:
        self._update_spin_limits()
        self.store.on_addend_counts_changed(self.left_spin.value(), self.right_spin.value())

    def on_addends_changed(self, left: int, right: int) -> None:
        """A drag moved beads across the divider; mirror the new split without feeding it back."""
        spins = (self.left_spin, self.right_spin)
        for spin in spins:
            spin.blockSignals(True)
        try:
            for spin, value in zip(spins, (left, right)):
                spin.setMaximum(self.store.config.pool_size)
                spin.setValue(value)
            self._update_spin_limits()
        finally:
            for spin in spins:
                spin.blockSignals(False)

    def _update_spin_limits(self) -> None:
        pool = self.store.config.pool_size
        self.left_spin.setMaximum(pool - self.right_spin.value())
        self.right_spin.setMaximum(pool - self.left_spin.value())
