"""Tests for logging setup."""

import logging
from io import StringIO

import pytest

from capability_tracker.logging_config import LOGGER_NAME, setup_logging

from .helpers import add_capability, make_store


@pytest.fixture(autouse=True)
def reset_logger():
	logger = logging.getLogger(LOGGER_NAME)
	saved = (logger.handlers[:], logger.level)
	logger.handlers = []
	yield
	for handler in logger.handlers:
		handler.close()
	logger.handlers, level = saved
	logger.setLevel(level)


def test_console_handler_writes_to_stream():
	stream = StringIO()
	logger = setup_logging("INFO", stream=stream)
	logger.info("hello")
	assert "hello" in stream.getvalue()
	assert "[INFO]" in stream.getvalue()


def test_level_filters_messages():
	stream = StringIO()
	logger = setup_logging("WARNING", stream=stream)
	logger.info("quiet")
	logger.warning("loud")
	assert "quiet" not in stream.getvalue()
	assert "loud" in stream.getvalue()


def test_no_duplicate_handlers():
	setup_logging("INFO", stream=StringIO())
	setup_logging("INFO", stream=StringIO())
	assert len(logging.getLogger(LOGGER_NAME).handlers) == 1


def test_file_handler(tmp_path):
	logger = setup_logging("DEBUG", log_dir=tmp_path / "logs", stream=StringIO())
	logger.debug("to file")
	for handler in logger.handlers:
		handler.flush()
	log_file = tmp_path / "logs" / f"{LOGGER_NAME}.log"
	assert log_file.exists()
	assert "to file" in log_file.read_text()


def test_store_actions_are_logged():
	stream = StringIO()
	setup_logging("INFO", stream=stream)
	store = make_store()
	cap = add_capability(store, name="Billing API")
	assert f"Created capability {cap.id} (Billing API)" in stream.getvalue()
