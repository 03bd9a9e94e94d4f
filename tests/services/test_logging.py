# tests/services/test_logging.py
import sys

import pytest
from loguru import logger

from promptmanager.services.logging import setup_logging

@pytest.fixture(autouse=True)
def restore_loguru():
    yield
    logger.remove() # Also drains enqueued sinks
    logger.add(sys.stderr)

def test_file_sink_written_to_log_dir(tmp_path, mocker):
    mocker.patch("promptmanager.services.logging.get_user_log_dir", return_value=tmp_path)
    setup_logging(level="INFO")
    logger.warning("hello from the test")
    logger.complete()
    logs = list(tmp_path.glob("promptmanager_*.log"))
    assert len(logs) == 1
    assert "hello from the test" in logs[0].read_text(encoding="utf-8")

def test_file_sink_failure_is_not_fatal(mocker):
    mocker.patch("promptmanager.services.logging.get_user_log_dir", side_effect=PermissionError("read-only"))
    setup_logging(level="DEBUG")
    logger.debug("still logging to stderr")

def test_file_sink_can_be_disabled(mocker):
    log_dir = mocker.patch("promptmanager.services.logging.get_user_log_dir")
    setup_logging(verbose=True, log_to_file=False)
    log_dir.assert_not_called()
