import os

import pytest

# Widgets are created in the view tests; no display is needed for that.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication

from numberpairs.config import BeadLineConfig
from numberpairs.controller.drag import DragMoveController
from numberpairs.model.bead_engine import BeadPositionEngine
from numberpairs.model.partitioned_track import PartitionedTrack


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def config():
    return BeadLineConfig()


@pytest.fixture
def engine(config):
    return BeadPositionEngine(config)


@pytest.fixture
def controller(engine):
    return DragMoveController(engine)


@pytest.fixture
def make_track(config, engine):
    def _make(left, right):
        return PartitionedTrack(config, left, right, engine=engine)
    return _make


@pytest.fixture
def track(make_track):
    # divider at 16.2, left 1,2,3 at 12.7 13.7 14.7, right 19,20 at 17.7 18.7
    return make_track(3, 2)
