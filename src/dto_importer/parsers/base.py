"""
Parser contract and shared parse state.

Recursive descent returns the child record name to the caller, so a
parent field is linked to its child record without any side table.
Everything accumulated during one root parse (records, definitions,
processed references, diagnostics) lives in a single ParseState.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Set, Union

from dto_importer.errors import ParserReuseError
from dto_importer.inflector import singularize, ucfirst
from dto_importer.models import (
    COLLECTION_SUFFIX,
    CanonicalResult,
    Diagnostic,
    FieldDefinition,
    ParseOptions,
)

# Source type names -> canonical primitive names
TYPE_SYNONYMS = {
    "boolean": "bool",
    "real": "float",
    "double": "float",
    "number": "float",
    "integer": "int",
    "[]": "array",
}


def normalize_type(name: str) -> str:
    """Normalize a primitive type synonym to its canonical name."""
    return TYPE_SYNONYMS.get(name, name)


@dataclass(frozen=True)
class ParentContext:
    """Where a nested record hangs off its parent."""

    record: str
    field: str
    collection: bool = False
    depth: int = 0


@dataclass
class ParseState:
    """Tables shared by the whole call tree of one root parse."""

    result: CanonicalResult = field(default_factory=CanonicalResult)
    definitions: Dict[str, Any] = field(default_factory=dict)
    processed_refs: Dict[str, str] = field(default_factory=dict)
    consumed: bool = False


class Parser(ABC):
    """
    Base class for parsers turning input into canonical record definitions.

    A parser instance is single-use: create one per root input.

    Usage:
        parser = DataParser()
        records = parser.parse({"name": "John"}).result()
    """

    NAME: str = ""
    LABEL: str = ""

    def __init__(self):
        self._state = ParseState()
        self._options = ParseOptions()

    def parse(
        self,
        input: Mapping[str, Any],
        options: Union[ParseOptions, Dict[str, Any], None] = None,
    ) -> "Parser":
        """
        Translate a root input into record definitions.

        Args:
            input: Decoded input mapping
            options: ParseOptions or a dict of option values

        Returns:
            self, for chaining into result()

        Raises:
            ParserReuseError: If this instance already parsed a root input
        """
        if self._state.consumed:
            raise ParserReuseError(
                f"{type(self).__name__} already parsed a root input; create a new instance"
            )
        self._state.consumed = True
        self._options = ParseOptions.coerce(options)

        if input:
            self._parse_root(input)
        return self

    @abstractmethod
    def _parse_root(self, input: Mapping[str, Any]) -> None:
        ...

    def result(self) -> Dict[str, Dict[str, Any]]:
        """Return the canonical result as plain dicts."""
        return self._state.result.to_dict()

    @property
    def canonical(self) -> CanonicalResult:
        return self._state.result

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._state.result.diagnostics

    def _record_name(self, parent: Optional[ParentContext], default: str) -> str:
        """Derive an unqualified record name from the parent field."""
        if parent is None or not parent.field:
            return default
        name = singularize(parent.field) if parent.collection else parent.field
        return ucfirst(name)

    def _link_collection(
        self,
        definition: FieldDefinition,
        field_name: str,
        claimed: Set[str],
        key_field: Optional[str],
    ) -> None:
        """Turn a linked field into a collection of its record type."""
        definition.collection = True
        singular = singularize(field_name)
        if singular and singular != field_name and singular not in claimed:
            definition.singular = singular
            claimed.add(singular)
        if key_field:
            definition.associative = key_field
        definition.type = definition.type + COLLECTION_SUFFIX


__all__ = [
    "TYPE_SYNONYMS",
    "normalize_type",
    "ParentContext",
    "ParseState",
    "Parser",
]
