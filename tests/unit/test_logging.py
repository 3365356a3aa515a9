"""Tests for structured logging helpers."""

import json

import structlog
from structlog.testing import capture_logs

from vast_document.events import VastEvents
from vast_document.log_config import (
    DocumentContext,
    clear_document_context,
    configure_logging,
    get_context_logger,
    set_document_context,
)


class TestDocumentContext:
    """Test suite for DocumentContext and the context helpers."""

    def test_context_manager(self):
        """Context fields are bound inside the block and removed after it."""
        with DocumentContext(ad_id="ad-1", vast_version="3.0"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["ad_id"] == "ad-1"
            assert bound["vast_version"] == "3.0"

        assert "ad_id" not in structlog.contextvars.get_contextvars()

    def test_context_keeps_outer_fields(self):
        """Leaving the block only unbinds its own fields."""
        set_document_context(request="r-1")
        with DocumentContext(ad_id="ad-1"):
            pass

        assert structlog.contextvars.get_contextvars() == {"request": "r-1"}

    def test_clear_document_context(self):
        """clear_document_context drops everything."""
        set_document_context(ad_id="ad-1")
        clear_document_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestConfigureLogging:
    """Test configure_logging."""

    def test_json_output(self, capsys):
        """JSON mode renders one JSON object per line with context merged."""
        configure_logging(level="INFO", json=True)
        logger = get_context_logger("test")

        with DocumentContext(ad_id="ad-1"):
            logger.info(VastEvents.PARSE_COMPLETED.value, ads_count=1)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "vast.parse.completed"
        assert record["ad_id"] == "ad-1"
        assert record["ads_count"] == 1
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_level_filtering(self, capsys):
        """Events below the configured level are dropped."""
        configure_logging(level="WARNING", json=True)
        logger = get_context_logger("test")

        logger.info("hidden")
        logger.warning("shown")

        output = capsys.readouterr().out
        assert "hidden" not in output
        assert "shown" in output

    def test_parser_events(self, vast_parser, minimal_vast_xml):
        """The parser reports a completed parse with document counts."""
        with capture_logs() as logs:
            vast_parser.parse(minimal_vast_xml)

        completed = [log for log in logs if log["event"] == VastEvents.PARSE_COMPLETED]
        assert completed[0]["ads_count"] == 1
        assert completed[0]["vast_version"] == "3.0"

    def test_unsupported_version_warning(self, vast_parser):
        """Documents outside 2.0/3.0 still parse but are reported."""
        with capture_logs() as logs:
            vast = vast_parser.parse('<VAST version="4.1"/>')

        assert vast.version == "4.1"
        warnings = [log for log in logs if log["event"] == VastEvents.VERSION_UNSUPPORTED]
        assert warnings[0]["vast_version"] == "4.1"
        assert warnings[0]["log_level"] == "warning"

    def test_dropped_entries_logged(self, vast_parser, multi_media_vast_xml):
        """Dropping empty impressions is reported at debug level."""
        vast = vast_parser.parse(multi_media_vast_xml)
        with capture_logs() as logs:
            vast.validate()

        dropped = [log for log in logs if log["event"] == VastEvents.ENTRIES_DROPPED]
        assert dropped[0]["kind"] == "impression"
        assert dropped[0]["dropped"] == 1
