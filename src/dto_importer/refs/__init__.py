"""
Reference resolution for schema documents.

This package provides:
- RefResolver: Contract for resolving non-local $ref pointers
- ResolvedRef: Resolved schema plus its source document
- FileRefResolver: Default resolver reading JSON/YAML files from disk
"""

from .base import RefResolver, ResolvedRef
from .file import FileRefResolver

__all__ = [
    "RefResolver",
    "ResolvedRef",
    "FileRefResolver",
]
