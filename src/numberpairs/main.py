"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures logging.
2. Instantiates the BeadLineStore (model + controllers).
3. Instantiates the Main Window (View) and passes the store into it.
4. Prevents circular import errors by being the orchestrator.
"""
import logging
import sys

from PySide6.QtWidgets import QApplication

from numberpairs.config import BeadLineConfig
from numberpairs.controller.store import BeadLineStore
from numberpairs.logging_config import setup_logging
from numberpairs.view.main_window import MainWindow, VISIBLE_APP_NAME

logger = logging.getLogger(__name__)

INITIAL_LEFT_ADDEND = 2
INITIAL_RIGHT_ADDEND = 1


def main() -> None:
    # NUMBERPAIRS_LOG_LEVEL=DEBUG follows every drag step
    setup_logging()

    app = QApplication(sys.argv)
    app.setApplicationName(VISIBLE_APP_NAME)

    config = BeadLineConfig()
    logger.info(f"Track [{config.min_x}, {config.max_x}], pool of {config.pool_size} beads, "
                f"divider = left / {config.divider_divisor} + {config.divider_offset}")
    store = BeadLineStore(INITIAL_LEFT_ADDEND, INITIAL_RIGHT_ADDEND, config)

    window = MainWindow(store)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
