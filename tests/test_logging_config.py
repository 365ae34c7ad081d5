import logging

from numberpairs.logging_config import level_from_env, setup_logging


def test_setup_logging_writes_package_records_to_the_log_file(tmp_path):
    log_file = tmp_path / "numberpairs.log"
    setup_logging(level=logging.DEBUG, log_file=str(log_file))
    root = logging.getLogger("numberpairs")
    try:
        logging.getLogger("numberpairs.model.partitioned_track").debug("Reconciling 3 + 2 -> 4 + 2")

        text = log_file.read_text(encoding="utf-8")
        assert "Logging initialized at DEBUG." in text
        assert "numberpairs.model.partitioned_track - DEBUG - Reconciling 3 + 2 -> 4 + 2" in text
    finally:
        for handler in list(root.handlers):
            handler.close()
            root.removeHandler(handler)


def test_setup_logging_does_not_stack_handlers():
    setup_logging()
    setup_logging()
    root = logging.getLogger("numberpairs")
    try:
        assert len(root.handlers) == 1
    finally:
        root.handlers.clear()


def test_level_comes_from_the_environment(monkeypatch):
    monkeypatch.setenv("NUMBERPAIRS_LOG_LEVEL", "warning")
    setup_logging()
    root = logging.getLogger("numberpairs")
    try:
        assert root.level == logging.WARNING
    finally:
        root.handlers.clear()


def test_unknown_environment_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("NUMBERPAIRS_LOG_LEVEL", "chatty")
    assert level_from_env() == logging.INFO

    monkeypatch.delenv("NUMBERPAIRS_LOG_LEVEL")
    assert level_from_env() == logging.INFO
