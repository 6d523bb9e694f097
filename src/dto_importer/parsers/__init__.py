"""
Parsers - Translate example data or schema documents into records.

This package provides:
- Parser: Base contract (parse -> self, result -> records)
- DataParser: Inference from one example JSON payload
- SchemaParser: Inference from JSON Schema / OpenAPI documents
- types/type_labels/create/register: Parser lookup by type name
"""

from .base import ParentContext, Parser, ParseState, normalize_type
from .data import DataParser
from .registry import create, register, type_labels, types
from .schema import SchemaParser, is_openapi_document

__all__ = [
    "Parser",
    "ParentContext",
    "ParseState",
    "normalize_type",
    "DataParser",
    "SchemaParser",
    "is_openapi_document",
    "types",
    "type_labels",
    "create",
    "register",
]
