"""Tests for root logger setup."""

import logging
from contextlib import contextmanager

from nicetimer.logging import get_logger, setup_logging


@contextmanager
def isolated_root():
    """Give the block the root logger, then put pytest's handlers back."""
    root = logging.getLogger()
    saved, level = list(root.handlers), root.level
    try:
        yield root
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            if h not in saved:
                h.close()
        for h in saved:
            root.addHandler(h)
        root.setLevel(level)


class TestSetupLogging:

    def test_file_and_console_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "nicetimer.log"
        with isolated_root():
            root = setup_logging("DEBUG", log_file=log_file)
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 2

            get_logger("nicetimer.test").info("hello file")
            for h in root.handlers:
                h.flush()
            assert "hello file" in log_file.read_text(encoding="utf-8")

    def test_console_only(self):
        with isolated_root():
            root = setup_logging(logging.WARNING, log_file=None)
            assert [type(h) for h in root.handlers] == [logging.StreamHandler]

    def test_reinit_does_not_duplicate(self):
        with isolated_root():
            setup_logging(log_file=None)
            root = setup_logging(log_file=None)
            assert len(root.handlers) == 1

    def test_unknown_level_name_falls_back_to_info(self):
        with isolated_root():
            root = setup_logging("LOUD", log_file=None)
            assert root.level == logging.INFO


class TestGetLogger:

    def test_default_namespace(self):
        assert get_logger().name == "nicetimer"

    def test_named(self):
        assert get_logger("nicetimer.store").name == "nicetimer.store"
