"""Unit tests for logging setup."""

from __future__ import annotations

import io
import json
from typing import Generator

import pytest
import structlog

from docstore.infrastructure.config import ObservabilityConfig
from docstore.infrastructure.logging import get_logger, setup_logging, setup_logging_from


@pytest.fixture(autouse=True)
def restore_structlog() -> Generator[None, None, None]:
    """Put back the structlog configuration other tests rely on."""
    saved = structlog.get_config()
    yield
    structlog.configure(**saved)


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_output(self) -> None:
        """JSON lines carry the event, component and service."""
        stream = io.StringIO()
        setup_logging(level="INFO", log_format="json", stream=stream)

        get_logger("docstore.test", store="wardrobe").info("journal_committed", records=3)

        entry = json.loads(stream.getvalue().splitlines()[-1])
        assert entry["event"] == "journal_committed"
        assert entry["component"] == "docstore.test"
        assert entry["store"] == "wardrobe"
        assert entry["service"] == "docstore"
        assert entry["records"] == 3
        assert entry["level"] == "info"

    def test_level_filtering(self) -> None:
        """Entries below the configured level are dropped."""
        stream = io.StringIO()
        setup_logging(level="WARNING", log_format="json", stream=stream)

        logger = get_logger("docstore.test")
        logger.info("ignored")
        logger.warning("journal_open_failed")

        events = [json.loads(line)["event"] for line in stream.getvalue().splitlines()]
        assert events == ["journal_open_failed"]

    def test_setup_from_config(self) -> None:
        """The observability block selects level and format."""
        setup_logging_from(ObservabilityConfig(log_level="ERROR", log_format="console"))

        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
