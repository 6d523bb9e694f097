"""
File Ref Resolver - Resolves ``path#/pointer`` references from JSON or YAML files.

Relative paths are resolved against the parse ``base_path`` option, then
against the resolver's own base path. If a base path names a file, its
directory is used. Loaded documents are cached per path.

Remote references (any URL with a scheme) are not fetched.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple
from urllib.parse import unquote, urlparse

import yaml

from dto_importer.observability import get_logger, with_parse_context

from .base import RefResolver, ResolvedRef

if TYPE_CHECKING:
    from dto_importer.models import ParseOptions

logger = get_logger(__name__)

_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")
_YAML_SUFFIXES = {".yaml", ".yml"}


class FileRefResolver(RefResolver):
    """
    Resolve external references against the local file system.

    Usage:
        resolver = FileRefResolver("/schemas")
        resolved = resolver.resolve("common.json#/$defs/Address")
        resolved.schema  # {"type": "object", ...}
    """

    def __init__(self, base_path: Optional[str] = None):
        self.base_path = base_path
        self._cache: Dict[Path, Dict[str, Any]] = {}

    def resolve(self, ref: str, options: Optional["ParseOptions"] = None) -> Optional[ResolvedRef]:
        if ref.startswith("#"):
            return None

        if not _WINDOWS_DRIVE.match(ref) and urlparse(ref).scheme:
            logger.debug(
                "Remote reference not supported",
                extra=with_parse_context(ref=ref),
            )
            return None

        path, fragment = self._split_ref(ref)
        if path is None:
            return None

        resolved_path = self._resolve_path(path, options)
        if resolved_path is None:
            logger.debug(
                f"Reference file not found: {path}",
                extra=with_parse_context(ref=ref),
            )
            return None

        document = self._load_document(resolved_path)
        if document is None:
            return None

        schema = self._resolve_fragment(document, fragment)
        if schema is None:
            logger.debug(
                f"Reference fragment not found: #{fragment}",
                extra=with_parse_context(ref=ref),
            )
            return None

        return ResolvedRef(
            schema=schema,
            definitions_source=document,
            source_path=str(resolved_path),
            fragment=fragment,
        )

    def _split_ref(self, ref: str) -> Tuple[Optional[str], str]:
        path, _, fragment = ref.partition("#")
        if not path:
            return None, fragment
        return path, fragment

    def _resolve_path(self, path: str, options: Optional["ParseOptions"]) -> Optional[Path]:
        candidate = Path(path)
        if candidate.is_absolute() or _WINDOWS_DRIVE.match(path):
            return candidate if candidate.is_file() else None

        base_path = (options.base_path if options is not None else None) or self.base_path
        if not base_path:
            return None

        base = Path(base_path)
        if base.is_file():
            base = base.parent

        full_path = base / candidate
        return full_path if full_path.is_file() else None

    def _load_document(self, path: Path) -> Optional[Dict[str, Any]]:
        if path in self._cache:
            return self._cache[path]

        try:
            contents = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.debug(f"Failed to read {path}: {e}")
            return None

        try:
            if path.suffix.lower() in _YAML_SUFFIXES:
                document = yaml.safe_load(contents)
            else:
                document = json.loads(contents)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            logger.debug(f"Failed to decode {path}: {e}")
            return None

        if not isinstance(document, dict):
            return None

        self._cache[path] = document
        return document

    def _resolve_fragment(self, document: Dict[str, Any], fragment: str) -> Optional[Dict[str, Any]]:
        if fragment in ("", "#"):
            return document

        if not fragment.startswith("/"):
            return None

        current: Any = document
        for segment in unquote(fragment).lstrip("/").split("/"):
            segment = segment.replace("~1", "/").replace("~0", "~")
            if isinstance(current, dict) and segment in current:
                current = current[segment]
            elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
                current = current[int(segment)]
            else:
                return None

        return current if isinstance(current, dict) else None


__all__ = ["FileRefResolver"]
