"""Parser lookup by type name."""

from __future__ import annotations

import logging
from typing import Dict, Type

from dto_importer.errors import UnknownParserError

from .base import Parser
from .data import DataParser
from .schema import SchemaParser

logger = logging.getLogger(__name__)

_parser_types: Dict[str, Type[Parser]] = {
    DataParser.NAME: DataParser,
    SchemaParser.NAME: SchemaParser,
}


def types() -> Dict[str, Type[Parser]]:
    """Registered parser classes by type name."""
    return dict(_parser_types)


def type_labels() -> Dict[str, str]:
    """Human-readable labels by type name."""
    return {name: parser_class.LABEL for name, parser_class in _parser_types.items()}


def register(parser_class: Type[Parser]) -> None:
    """
    Register a parser class under its NAME.

    Raises:
        ValueError: If the class has no NAME
    """
    if not parser_class.NAME:
        raise ValueError(f"Parser class {parser_class.__name__} has no NAME")
    _parser_types[parser_class.NAME] = parser_class
    logger.debug(f"Registered parser: {parser_class.NAME}")


def create(name: str) -> Parser:
    """
    Create a parser instance by type name.

    Raises:
        UnknownParserError: If the type is not registered
    """
    parser_class = _parser_types.get(name)
    if parser_class is None:
        raise UnknownParserError(name, list(_parser_types.keys()))
    return parser_class()


__all__ = ["types", "type_labels", "register", "create"]
