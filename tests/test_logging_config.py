import logging
import sys
import threading

import pytest

from nsbench.logging_config import setup_logging


@pytest.fixture
def restore_hooks():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    hooks = sys.excepthook, threading.excepthook
    yield
    sys.excepthook, threading.excepthook = hooks
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_writes_file(tmp_path, restore_hooks):
    log_file = tmp_path / "nsbench.log"
    logger = setup_logging(level="debug", log_file=str(log_file))
    logging.getLogger("nsbench.test").debug("hello from a test")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert "hello from a test" in log_file.read_text(encoding="utf-8")


def test_thread_exceptions_are_logged(tmp_path, restore_hooks):
    log_file = tmp_path / "nsbench.log"
    logger = setup_logging(log_file=str(log_file))

    def boom():
        raise ValueError("worker blew up")

    t = threading.Thread(target=boom, name="nsbench-worker-9")
    t.start()
    t.join()
    for handler in logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "nsbench-worker-9" in text
    assert "worker blew up" in text
