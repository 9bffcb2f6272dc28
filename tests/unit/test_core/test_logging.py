"""Unit tests for logging configuration."""

import json
import sys

import pytest
from loguru import logger

from attachment_kit.core.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_default_sink():
    yield
    logger.remove()
    logger.add(sys.stderr)


def _log_lines(log_dir) -> list[str]:
    logger.remove()
    return (log_dir / "attachment-kit.log").read_text().splitlines()


class TestLogging:
    """Tests for Loguru logging setup."""

    def test_setup_logging_does_not_raise(self) -> None:
        """setup_logging with valid log level does not raise."""
        setup_logging("DEBUG")
        setup_logging("INFO")
        setup_logging("WARNING")

    def test_setup_logging_case_insensitive(self) -> None:
        """setup_logging accepts case-insensitive log levels."""
        setup_logging("info")
        setup_logging("debug")

    def test_setup_logging_with_log_dir(self, tmp_path) -> None:
        """A log directory is created and receives the log file."""
        log_dir = tmp_path / "logs"
        setup_logging("INFO", log_dir=str(log_dir))
        assert log_dir.is_dir()

    def test_text_format_by_default(self, tmp_path) -> None:
        """Records are written as formatted text unless JSON is requested."""
        setup_logging("INFO", log_dir=str(tmp_path))
        logger.info("copied attachment")

        lines = _log_lines(tmp_path)
        assert len(lines) == 1
        assert "| INFO     |" in lines[0]
        assert lines[0].endswith("copied attachment")

    def test_json_logs_serialize_every_record(self, tmp_path) -> None:
        """With json_logs, each record is one JSON object carrying the message."""
        setup_logging("INFO", log_dir=str(tmp_path), json_logs=True)
        logger.info("copied attachment")
        logger.warning("upload failed")

        records = [json.loads(line) for line in _log_lines(tmp_path)]
        assert [r["record"]["message"] for r in records] == ["copied attachment", "upload failed"]
        assert [r["record"]["level"]["name"] for r in records] == ["INFO", "WARNING"]

    def test_level_filters_records(self, tmp_path) -> None:
        """Records below the configured level are dropped."""
        setup_logging("warning", log_dir=str(tmp_path), json_logs=True)
        logger.info("ignored")
        logger.warning("kept")

        records = [json.loads(line) for line in _log_lines(tmp_path)]
        assert [r["record"]["message"] for r in records] == ["kept"]
