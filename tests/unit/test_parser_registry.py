"""Tests for parser lookup by type name."""
import pytest

from dto_importer import parsers
from dto_importer.errors import UnknownParserError
from dto_importer.parsers import DataParser, Parser, SchemaParser


class TestParserRegistry:
    """Test the parser type registry."""

    def test_types(self):
        assert parsers.types() == {"Data": DataParser, "Schema": SchemaParser}

    def test_type_labels(self):
        assert parsers.type_labels() == {
            "Data": "From JSON Data Example",
            "Schema": "From JSON Schema File",
        }

    def test_create_returns_fresh_instances(self):
        first = parsers.create("Schema")
        second = parsers.create("Schema")

        assert isinstance(first, SchemaParser)
        assert first is not second

    def test_create_unknown(self):
        with pytest.raises(UnknownParserError) as exc_info:
            parsers.create("Xml")

        assert exc_info.value.name == "Xml"
        assert 'Unknown parser type "Xml"' in str(exc_info.value)
        assert "Data, Schema" in str(exc_info.value)

    def test_unknown_is_value_error(self):
        with pytest.raises(ValueError):
            parsers.create("")

    def test_register(self, monkeypatch):
        monkeypatch.setattr(parsers.registry, "_parser_types", dict(parsers.registry._parser_types))

        class FlatParser(Parser):
            NAME = "Flat"
            LABEL = "Flat Example"

            def _parse_root(self, input):
                pass

        parsers.register(FlatParser)

        assert isinstance(parsers.create("Flat"), FlatParser)
        assert parsers.type_labels()["Flat"] == "Flat Example"

    def test_register_requires_name(self):
        class Nameless(Parser):
            def _parse_root(self, input):
                pass

        with pytest.raises(ValueError):
            parsers.register(Nameless)
