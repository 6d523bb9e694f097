"""Tests for structured logging."""
import io
import json
import logging

from dto_importer.observability import get_logger, setup_logging, with_parse_context
from dto_importer.observability.logging import ParseContextFilter


class TestWithParseContext:
    """Test with_parse_context helper."""

    def test_only_given_fields(self):
        assert with_parse_context(parser="Schema", record="User") == {
            "parser": "Schema",
            "record": "User",
        }

    def test_depth_zero_is_kept(self):
        assert with_parse_context(depth=0) == {"depth": 0}

    def test_extra_kwargs(self):
        extra = with_parse_context(ref="#/$defs/Address", source="common.json")

        assert extra == {"ref": "#/$defs/Address", "source": "common.json"}


class TestParseContextFilter:
    """Test ParseContextFilter."""

    def test_adds_missing_fields(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)
        record.record = "User"

        assert ParseContextFilter().filter(record) is True
        assert record.record == "User"
        assert record.parser is None
        assert record.depth is None


class TestSetupLogging:
    """Test setup_logging."""

    def test_json_output(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(stream)

        get_logger("dto_importer.test").info(
            "Committed record User",
            extra=with_parse_context(parser="Schema", record="User", depth=2),
        )

        entry = json.loads(stream.getvalue().splitlines()[-1])
        assert entry["message"] == "Committed record User"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "dto_importer.test"
        assert entry["parser"] == "Schema"
        assert entry["record"] == "User"
        assert entry["depth"] == 2
        assert entry["timestamp"]

    def test_text_output(self, monkeypatch, restore_root_logger):
        monkeypatch.setenv("DTO_IMPORTER_LOG_FORMAT", "text")
        stream = io.StringIO()
        setup_logging(stream)

        get_logger("dto_importer.test").warning("Unresolved reference #/x")

        line = stream.getvalue().splitlines()[-1]
        assert "WARNING dto_importer.test: Unresolved reference #/x" in line

    def test_level_from_settings(self, monkeypatch, restore_root_logger):
        monkeypatch.setenv("DTO_IMPORTER_LOG_LEVEL", "warning")
        stream = io.StringIO()
        setup_logging(stream)

        logger = get_logger("dto_importer.test")
        logger.info("hidden")
        logger.warning("shown")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "shown" in output
        assert restore_root_logger.level == logging.WARNING

    def test_replaces_root_handlers(self, restore_root_logger):
        setup_logging(io.StringIO())
        setup_logging(io.StringIO())

        assert len(restore_root_logger.handlers) == 1
