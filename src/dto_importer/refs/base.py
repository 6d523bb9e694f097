"""
Reference Resolver contract - Resolution of non-local $ref pointers.

A resolver receives a reference such as ``common.json#/$defs/Address``
and returns the schema it points to, plus the document it came from so
that local definitions of that document can be reused.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from dto_importer.models import ParseOptions


@dataclass
class ResolvedRef:
    """Result of resolving an external reference."""

    schema: Dict[str, Any]
    definitions_source: Optional[Dict[str, Any]] = None
    source_path: Optional[str] = None
    fragment: str = ""


class RefResolver(ABC):
    """Base class for reference resolvers."""

    @abstractmethod
    def resolve(self, ref: str, options: Optional["ParseOptions"] = None) -> Optional[ResolvedRef]:
        """
        Resolve a reference pointer.

        Args:
            ref: The $ref pointer
            options: Options of the running parse

        Returns:
            ResolvedRef, or None if the reference cannot be resolved
        """
        ...


__all__ = ["ResolvedRef", "RefResolver"]
