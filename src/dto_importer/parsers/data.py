"""
Data Parser - Infers records from one example JSON payload.

Nested mappings become nested records, lists of mappings become
collections of records (inferred from the first element), everything
else maps to a primitive type from the value's runtime kind.

Example data carries no requiredness signal, so every field is optional.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Set

from dto_importer.inflector import variable
from dto_importer.key_fields import get_key_field_registry
from dto_importer.models import DEFAULT_RECORD_NAME, FieldDefinition, RecordDefinition
from dto_importer.observability import get_logger, with_parse_context

from .base import ParentContext, Parser, normalize_type

logger = get_logger(__name__)

# Runtime kinds -> source type names; bool before int (bool is an int subclass)
_RUNTIME_TYPES = (
    (bool, "boolean"),
    (int, "integer"),
    (float, "double"),
    (str, "string"),
    ((Mapping, list, tuple), "[]"),
)


def _is_record_mapping(value: Any) -> bool:
    """A mapping whose keys are all strings."""
    return isinstance(value, Mapping) and all(isinstance(k, str) for k in value)


def _is_record_list(value: Any) -> bool:
    """A non-empty list whose elements are all record mappings."""
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(_is_record_mapping(v) for v in value)
    )


class DataParser(Parser):
    """Parser that infers records from example data."""

    NAME = "Data"
    LABEL = "From JSON Data Example"

    def _parse_root(self, input: Mapping[str, Any]) -> None:
        self._parse(input, None)

    def _parse(self, data: Mapping[str, Any], parent: Optional[ParentContext]) -> str:
        """
        Build one record from a mapping.

        Returns:
            The committed record name
        """
        name = self._options.qualify(self._record_name(parent, DEFAULT_RECORD_NAME))

        fields: Dict[str, FieldDefinition] = {}
        claimed: Set[str] = set()

        for key, value in data.items():
            key = str(key)
            # Private/internal keys
            if key.startswith("_"):
                continue

            field_name = variable(key)
            definition = FieldDefinition(type=self._type(value), required=False)

            if _is_record_mapping(value):
                definition.type = self._parse(value, ParentContext(record=name, field=field_name))
            elif _is_record_list(value):
                first = value[0]
                definition.type = self._parse(
                    first,
                    ParentContext(record=name, field=field_name, collection=True),
                )
                self._link_collection(
                    definition,
                    field_name,
                    claimed,
                    get_key_field_registry().detect(first),
                )

            fields[field_name] = definition
            claimed.add(field_name)

        self._state.result.commit(RecordDefinition(name=name, fields=fields))
        logger.debug(
            f"Committed record {name} with {len(fields)} fields",
            extra=with_parse_context(parser=self.NAME, record=name),
        )
        return name

    def _type(self, value: Any) -> str:
        """Infer a primitive type from a value's runtime kind."""
        if value is None:
            return "mixed"
        for kinds, name in _RUNTIME_TYPES:
            if isinstance(value, kinds):
                return normalize_type(name)
        return "mixed"


__all__ = ["DataParser"]
