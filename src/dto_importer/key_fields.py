"""
Key Field Registry - Candidate field names for associative collection keys.

When a collection of records is better represented as a map keyed by one
of the element's fields, the first candidate present as a string field in
a representative element is chosen as that key.

The registry is process-wide. Configure it once at startup; parsers only
read it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional

from dto_importer.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_KEY_FIELDS = ("slug", "login", "name", "id")


def is_string_value(value: Any) -> bool:
    """Whether an example value is a string."""
    return isinstance(value, str)


class KeyFieldRegistry:
    """
    Ordered list of associative key candidates.

    Usage:
        registry = KeyFieldRegistry()
        registry.set(["uuid", "id"])

        registry.detect({"uuid": "a1", "id": 1})  # "uuid"
    """

    def __init__(self, fields: Optional[Iterable[str]] = None):
        self._fields: List[str] = list(fields if fields is not None else DEFAULT_KEY_FIELDS)

    def get(self) -> List[str]:
        """Get the candidate names in priority order."""
        return list(self._fields)

    def set(self, fields: Iterable[str]) -> None:
        """
        Replace the candidate names.

        Args:
            fields: Field names in priority order

        Raises:
            TypeError: If any entry is not a string
        """
        fields = list(fields)
        for field in fields:
            if not isinstance(field, str):
                raise TypeError(f"Key field names must be strings, got {type(field).__name__}")
        self._fields = fields
        logger.debug(f"Key fields set: {fields}")

    def reset(self) -> None:
        """Restore the default candidates."""
        self._fields = list(DEFAULT_KEY_FIELDS)

    def detect(
        self,
        element: Mapping[str, Any],
        is_string: Callable[[Any], bool] = is_string_value,
    ) -> Optional[str]:
        """
        Detect the associative key of a representative collection element.

        Args:
            element: Example element (field -> value) or element schema
                properties (field -> property schema)
            is_string: Predicate telling whether an entry is string-typed

        Returns:
            First candidate present as a string field, or None
        """
        if not isinstance(element, Mapping):
            return None

        for name in self._fields:
            if name in element and is_string(element[name]):
                return name
        return None

    def __iter__(self):
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)


# Global registry instance
_global_registry: Optional[KeyFieldRegistry] = None


def get_key_field_registry() -> KeyFieldRegistry:
    """Get the global key field registry (lazy initialized)."""
    global _global_registry
    if _global_registry is None:
        _global_registry = KeyFieldRegistry()
    return _global_registry


def get_key_fields() -> List[str]:
    """Get the global candidate names."""
    return get_key_field_registry().get()


def set_key_fields(fields: Iterable[str]) -> None:
    """Replace the global candidate names."""
    get_key_field_registry().set(fields)


def reset_key_fields() -> None:
    """Restore the global defaults (useful for testing)."""
    get_key_field_registry().reset()


def apply_settings_key_fields() -> bool:
    """
    Replace the global candidates from settings, if configured.

    Returns:
        True if settings provided key fields
    """
    fields = get_settings().get_key_fields()
    if fields is None:
        return False
    set_key_fields(fields)
    return True


__all__ = [
    "DEFAULT_KEY_FIELDS",
    "KeyFieldRegistry",
    "get_key_field_registry",
    "get_key_fields",
    "set_key_fields",
    "reset_key_fields",
    "apply_settings_key_fields",
    "is_string_value",
]
