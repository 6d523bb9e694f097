"""
Importer Models - Canonical record definitions and parse options.

The canonical result is the hand-off artifact for code generators:

    {
        "User": {
            "name": {"type": "string", "required": True},
            "addresses": {"type": "Address[]", "required": False,
                          "collection": True, "singular": "address"},
            "_extends": "BaseEntity",
        },
        "Address": {...},
    }
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from dto_importer.config import get_settings
from dto_importer.refs.base import RefResolver

# Reserved field-map entry carrying the parent record name
EXTENDS_KEY = "_extends"

# Suffix marking "collection of" on a record type
COLLECTION_SUFFIX = "[]"

# Separator of type unions ("string|int")
UNION_SEPARATOR = "|"

# Class marker for date/time formatted strings
DATETIME_TYPE = "datetime"

DEFAULT_RECORD_NAME = "Object"
DEFAULT_MAX_DEPTH = 50

_OPTION_ALIASES = {
    "basePath": "base_path",
    "refResolver": "ref_resolver",
    "maxDepth": "max_depth",
}


class FieldDefinition(BaseModel):
    """
    One typed field of a record.

    ``required`` is None until a parser classifies the field; both parsers
    always set it.
    """
    model_config = ConfigDict(validate_assignment=True)

    type: str = Field(..., description="Type expression")
    required: Optional[bool] = Field(None, description="Whether the field is required")
    collection: bool = Field(False, description="Whether the field is a collection of records")
    singular: Optional[str] = Field(None, description="Singular alias of a collection field")
    associative: Optional[str] = Field(
        None,
        description="Element field used as key when the collection is keyed",
    )

    @property
    def is_required(self) -> bool:
        return bool(self.required)

    @property
    def element_type(self) -> str:
        """Record name of a collection element, or the type itself."""
        if self.type.endswith(COLLECTION_SUFFIX):
            return self.type[: -len(COLLECTION_SUFFIX)]
        return self.type

    def to_dict(self) -> Dict[str, Any]:
        """Serialize, omitting unset optional keys."""
        data: Dict[str, Any] = {"type": self.type}
        if self.required is not None:
            data["required"] = self.required
        if self.collection:
            data["collection"] = True
        if self.singular is not None:
            data["singular"] = self.singular
        if self.associative is not None:
            data["associative"] = self.associative
        return data


class RecordDefinition(BaseModel):
    """A named record with ordered fields and an optional parent record."""

    name: str = Field(..., description="Record name, optionally namespace-prefixed")
    fields: Dict[str, FieldDefinition] = Field(default_factory=dict)
    extends: Optional[str] = Field(None, description="Parent record name")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {name: field.to_dict() for name, field in self.fields.items()}
        if self.extends:
            data[EXTENDS_KEY] = self.extends
        return data


class Diagnostic(BaseModel):
    """Something the parser dropped or degraded instead of failing."""

    kind: str = Field(..., description="Diagnostic kind, e.g. unresolved_ref")
    message: str = Field(..., description="Human-readable description")
    ref: Optional[str] = Field(None, description="Reference pointer involved")
    record: Optional[str] = Field(None, description="Record being built")
    field: Optional[str] = Field(None, description="Field that was affected")


class CanonicalResult(BaseModel):
    """Ordered mapping of record name to record definition."""

    records: Dict[str, RecordDefinition] = Field(default_factory=dict)
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    def commit(self, record: RecordDefinition) -> None:
        """Store a record, replacing any previous definition of the same name."""
        self.records[record.name] = record

    def get(self, name: str) -> Optional[RecordDefinition]:
        return self.records.get(name)

    def names(self) -> List[str]:
        return list(self.records.keys())

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Hand-off form: record -> field -> definition, with ``_extends`` reserved."""
        return {name: record.to_dict() for name, record in self.records.items()}

    def __contains__(self, name: str) -> bool:
        return name in self.records

    def __iter__(self) -> Iterator[RecordDefinition]:
        return iter(self.records.values())

    def __len__(self) -> int:
        return len(self.records)


class ParseOptions(BaseModel):
    """
    Options for a parse run.

    Accepts both snake_case and the camelCase keys used by document
    tooling (``basePath``, ``refResolver``, ``maxDepth``).
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        extra="ignore",
    )

    namespace: Optional[str] = Field(None, description="Namespace prefix for record names")
    base_path: Optional[str] = Field(
        None,
        alias="basePath",
        description="Base path for resolving external $ref files",
    )
    ref_resolver: Optional[RefResolver] = Field(
        None,
        alias="refResolver",
        description="Custom resolver for non-local references",
    )
    max_depth: int = Field(
        DEFAULT_MAX_DEPTH,
        alias="maxDepth",
        gt=0,
        description="Maximum inline nesting depth",
    )

    @classmethod
    def from_settings(cls, **overrides: Any) -> "ParseOptions":
        """Create options from settings, with explicit values taking precedence."""
        settings = get_settings()
        data: Dict[str, Any] = {
            "namespace": settings.default_namespace,
            "base_path": settings.base_path,
            "max_depth": settings.max_depth,
        }
        for key, value in overrides.items():
            if value is not None:
                data[_OPTION_ALIASES.get(key, key)] = value
        return cls.model_validate(data)

    @classmethod
    def coerce(cls, options: Union["ParseOptions", Dict[str, Any], None]) -> "ParseOptions":
        """Normalize None, a plain dict, or options into ParseOptions."""
        if isinstance(options, ParseOptions):
            return options
        return cls.from_settings(**(options or {}))

    def qualify(self, name: str) -> str:
        """Apply the namespace prefix to a record name."""
        if not self.namespace:
            return name
        return f"{self.namespace.rstrip('/')}/{name}"


__all__ = [
    "EXTENDS_KEY",
    "COLLECTION_SUFFIX",
    "UNION_SEPARATOR",
    "DATETIME_TYPE",
    "DEFAULT_RECORD_NAME",
    "DEFAULT_MAX_DEPTH",
    "FieldDefinition",
    "RecordDefinition",
    "Diagnostic",
    "CanonicalResult",
    "ParseOptions",
]
