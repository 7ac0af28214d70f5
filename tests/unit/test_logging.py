"""Unit tests for deskwatch logging configuration."""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from deskwatch.logging import get_logger, sanitize_for_log, setup_logging, truncate_output


@pytest.fixture(autouse=True)
def _reset_deskwatch_logger():
    """Detach file handlers so temporary directories can be removed."""
    yield
    logger = logging.getLogger("deskwatch")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_creates_nested_log_directory(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "var" / "logs"
        setup_logging(log_dir=log_dir, console=False)

        assert (log_dir / "deskwatch.log").exists()

    def test_component_records_reach_the_file(self, tmp_path: Path) -> None:
        """Poller, client and store loggers share one file and show their names."""
        setup_logging(log_dir=tmp_path, console=False)

        logging.getLogger("deskwatch.poller.poller").info("cycle ran")
        logging.getLogger("deskwatch.zammad").warning("server slow")
        logging.getLogger("deskwatch.snapshot_store.store").info("saved")

        content = (tmp_path / "deskwatch.log").read_text()
        assert "cycle ran" in content
        assert " | WARNING  | deskwatch.zammad | server slow" in content
        assert "deskwatch.snapshot_store.store" in content

    def test_level_filters_messages(self, tmp_path: Path) -> None:
        setup_logging(log_dir=tmp_path, level="WARNING", console=False)
        logger = logging.getLogger("deskwatch")
        logger.info("hidden")
        logger.error("visible")

        content = (tmp_path / "deskwatch.log").read_text()
        assert "hidden" not in content
        assert "visible" in content

    def test_environment_overrides(self, tmp_path: Path) -> None:
        """Directory and level can come from the environment."""
        env = {"DESKWATCH_LOG_DIR": str(tmp_path), "DESKWATCH_LOG_LEVEL": "DEBUG"}
        with patch.dict(os.environ, env):
            logger = setup_logging(console=False)

        assert logger.name == "deskwatch"
        assert logger.level == logging.DEBUG
        assert (tmp_path / "deskwatch.log").exists()

    def test_repeated_setup_replaces_handlers(self, tmp_path: Path) -> None:
        setup_logging(log_dir=tmp_path, console=False)
        setup_logging(log_dir=tmp_path, console=True)

        assert len(logging.getLogger("deskwatch").handlers) == 2

    def test_rotation_settings(self, tmp_path: Path) -> None:
        setup_logging(log_dir=tmp_path, max_bytes=400, backup_count=2, console=False)
        logger = logging.getLogger("deskwatch")

        for i in range(40):
            logger.info("Rotation filler line %d for the snapshot poller", i)

        handler = logger.handlers[0]
        assert handler.maxBytes == 400
        assert handler.backupCount == 2
        assert (tmp_path / "deskwatch.log.1").exists()


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger function."""

    def test_adds_prefix(self) -> None:
        assert get_logger("poller").name == "deskwatch.poller"

    def test_keeps_existing_prefix(self) -> None:
        assert get_logger("deskwatch.zammad").name == "deskwatch.zammad"


@pytest.mark.unit
class TestTruncateOutput:
    """Tests for truncate_output function."""

    def test_short_output_unchanged(self) -> None:
        assert truncate_output("Internal Server Error", max_length=100) == "Internal Server Error"

    def test_long_output_truncated(self) -> None:
        result = truncate_output("<html>" + "x" * 300, max_length=100)

        assert result.startswith("<html>")
        assert "206 more chars" in result


@pytest.mark.unit
class TestSanitize:
    """Tests for sanitize_for_log function."""

    def test_redacts_zammad_token_header(self) -> None:
        result = sanitize_for_log('{"Authorization": "Token token=s3cr3t-VALUE"}')

        assert "s3cr3t" not in result
        assert "Token token=[REDACTED]" in result

    def test_redacts_bearer_tokens(self) -> None:
        result = sanitize_for_log("Authorization: Bearer abc123.def456")

        assert "abc123" not in result
        assert "Bearer [REDACTED]" in result

    def test_redacts_query_tokens(self) -> None:
        result = sanitize_for_log("GET /api/v1/users/me?token=abc123")

        assert "abc123" not in result

    def test_safe_text_unchanged(self) -> None:
        text = "Ticket 31012 updated by agent 5"
        assert sanitize_for_log(text) == text
