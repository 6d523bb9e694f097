"""
DTO Importer

Infers a canonical, language-agnostic description of record types (DTOs)
and their typed fields from two kinds of sources:
analyze example data or schema documents → canonical records → code generators

Architecture:
- parsers/: DataParser (example payloads) and SchemaParser (JSON Schema / OpenAPI)
- refs/: Resolution of external $ref pointers
- key_fields: Process-wide associative key candidates
- importer: Decoding, input detection and parser selection
"""

from dto_importer.importer import Importer
from dto_importer.models import CanonicalResult, FieldDefinition, ParseOptions, RecordDefinition
from dto_importer.parsers import DataParser, SchemaParser

__version__ = "1.0.0"

__all__ = [
    "Importer",
    "CanonicalResult",
    "FieldDefinition",
    "ParseOptions",
    "RecordDefinition",
    "DataParser",
    "SchemaParser",
]
