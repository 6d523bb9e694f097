"""
Importer - Entry point for inferring records from JSON/YAML text, mappings or files.

Usage:
    importer = Importer()

    # From example data
    importer.parse('{"name": "John", "age": 30}')

    # From a JSON Schema, with a namespace
    importer.parse(schema_text, {"type": "Schema", "namespace": "Api/V1"})

    # From a file, with external $ref files resolved next to it
    importer.parse_file("schemas/order.json")
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from dto_importer import parsers
from dto_importer.errors import InputDecodeError
from dto_importer.models import CanonicalResult, ParseOptions
from dto_importer.observability import get_logger, with_parse_context
from dto_importer.parsers.schema import is_openapi_document

logger = get_logger(__name__)

OptionsT = Union[ParseOptions, Dict[str, Any], None]


def guess_type(document: Mapping[str, Any]) -> str:
    """
    Guess whether a decoded document is a schema or example data.

    Returns:
        Parser type name (Schema or Data)
    """
    if is_openapi_document(document):
        return parsers.SchemaParser.NAME
    if document.get("type") == "object" and document.get("properties"):
        return parsers.SchemaParser.NAME
    if document.get("allOf"):
        return parsers.SchemaParser.NAME
    if document.get("$schema"):
        return parsers.SchemaParser.NAME
    return parsers.DataParser.NAME


def decode(text: str) -> Dict[str, Any]:
    """
    Decode JSON text, falling back to YAML.

    Raises:
        InputDecodeError: If the text is neither, or is not a mapping
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise InputDecodeError(f"Input is neither valid JSON nor YAML: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise InputDecodeError(
            f"Input must decode to a mapping, got {type(document).__name__}"
        )
    return document


class Importer:
    """Decode input, pick a parser and return the canonical result."""

    def parse(self, text: str, options: OptionsT = None) -> Dict[str, Dict[str, Any]]:
        """
        Parse JSON or YAML text into record definitions.

        Args:
            text: JSON or YAML text
            options: ParseOptions or dict; a dict may carry ``type`` (Data or
                Schema) to skip detection

        Returns:
            Canonical result as plain dicts
        """
        return self.run(decode(text), options).to_dict()

    def parse_data(self, data: Mapping[str, Any], options: OptionsT = None) -> Dict[str, Dict[str, Any]]:
        """Parse an already decoded mapping into record definitions."""
        return self.run(data, options).to_dict()

    def parse_file(self, path: Union[str, Path], options: OptionsT = None) -> Dict[str, Dict[str, Any]]:
        """Parse a JSON or YAML file; external references resolve next to it."""
        return self.run_file(path, options).to_dict()

    def run_file(self, path: Union[str, Path], options: OptionsT = None) -> CanonicalResult:
        """Like parse_file, returning the CanonicalResult with diagnostics."""
        path = Path(path)
        text = path.read_text(encoding="utf-8")

        if isinstance(options, ParseOptions):
            if not options.base_path:
                options = options.model_copy(update={"base_path": str(path.parent)})
        else:
            options = dict(options or {})
            if not options.get("base_path") and not options.get("basePath"):
                options["base_path"] = str(path.parent)

        return self.run(decode(text), options)

    def run(self, data: Mapping[str, Any], options: OptionsT = None) -> CanonicalResult:
        """
        Run a fresh parser over a decoded mapping.

        Returns:
            CanonicalResult with records and diagnostics
        """
        if not data:
            return CanonicalResult()

        parser_type: Optional[str] = None
        if isinstance(options, Mapping):
            parser_type = options.get("type")
        if not parser_type:
            parser_type = guess_type(data)

        parser = parsers.create(parser_type)
        parser.parse(data, options)

        result = parser.canonical
        logger.info(
            f"Inferred {len(result)} records",
            extra=with_parse_context(parser=parser_type),
        )
        return result


__all__ = ["Importer", "guess_type", "decode"]
