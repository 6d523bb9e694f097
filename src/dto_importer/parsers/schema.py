"""
Schema Parser - Converts JSON Schema and OpenAPI documents to records.

Handles:
- Local references into $defs, definitions and components/schemas
- External references through a RefResolver (files by default)
- allOf composition as single-parent inheritance plus property merging
- anyOf/oneOf and type lists as pipe-joined type unions
- OpenAPI documents as a batch of independent component records

Every referenced record is expanded at most once. A reference is marked
processed before its schema is walked, so self-referencing and mutually
referencing schemas terminate. Inline nesting (no $ref involved) is
bounded by the max_depth option instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple
from urllib.parse import unquote

from dto_importer.errors import RecursionLimitError
from dto_importer.inflector import camelize, variable
from dto_importer.key_fields import get_key_field_registry
from dto_importer.models import (
    DATETIME_TYPE,
    DEFAULT_RECORD_NAME,
    UNION_SEPARATOR,
    Diagnostic,
    FieldDefinition,
    RecordDefinition,
)
from dto_importer.observability import get_logger, with_parse_context
from dto_importer.refs import FileRefResolver, RefResolver, ResolvedRef

from .base import ParentContext, Parser, normalize_type

logger = get_logger(__name__)

_LOCAL_REF_PREFIXES = ("#/$defs/", "#/definitions/", "#/components/schemas/")
_DATE_FORMATS = {"date-time", "date"}


def is_openapi_document(document: Mapping[str, Any]) -> bool:
    """Whether a document carries an OpenAPI version and component schemas."""
    components = document.get("components")
    return bool(
        document.get("openapi")
        and isinstance(components, Mapping)
        and components.get("schemas")
    )


def _declares_object(type_: Any) -> bool:
    if isinstance(type_, list):
        return "object" in type_
    return type_ == "object"


def _is_record_schema(schema: Mapping[str, Any]) -> bool:
    """Whether a schema produces a record of its own."""
    if schema.get("allOf"):
        return True
    return _declares_object(schema.get("type")) and bool(schema.get("properties"))


def _is_string_property(schema: Any) -> bool:
    return isinstance(schema, Mapping) and schema.get("type") == "string"


def _flatten(types: List[Any]) -> Iterator[Any]:
    for type_ in types:
        if isinstance(type_, list):
            yield from _flatten(type_)
        else:
            yield type_


def _unescape_pointer(segment: str) -> str:
    return unquote(segment).replace("~1", "/").replace("~0", "~")


@dataclass
class _Resolved:
    """A resolved reference: its schema, and its record name if it has one."""

    schema: Dict[str, Any]
    record: Optional[str] = None


class SchemaParser(Parser):
    """Parser that converts JSON Schema / OpenAPI documents to records."""

    NAME = "Schema"
    LABEL = "From JSON Schema File"

    def __init__(self):
        super().__init__()
        self._resolver: RefResolver = FileRefResolver()

    def _parse_root(self, document: Mapping[str, Any]) -> None:
        self._harvest_definitions(document)
        self._resolver = self._options.ref_resolver or FileRefResolver(self._options.base_path)

        if is_openapi_document(document):
            self._parse_components(document["components"]["schemas"])
            return

        # A root that is only a pointer to its real schema
        if document.get("$ref") and not document.get("properties"):
            self._resolve_ref(document["$ref"], None, None)
            return

        self._parse(document, None)

    def _parse_components(self, schemas: Mapping[str, Any]) -> None:
        """Parse every object component as its own top-level record."""
        for component_name, schema in schemas.items():
            if not isinstance(schema, Mapping):
                continue
            if not (_declares_object(schema.get("type")) or schema.get("allOf")):
                continue

            key = str(component_name)
            # Private/internal components
            if key.startswith("_"):
                continue
            # Already expanded through a reference from an earlier component
            if key in self._state.processed_refs:
                continue

            schema = dict(schema)
            title = key or schema.get("title")
            if title:
                schema["title"] = title
                self._state.processed_refs[key] = self._options.qualify(camelize(str(title)))
            if self._parse(schema, None) is None and key in self._state.processed_refs:
                self._state.processed_refs[key] = ""

    def _parse(self, schema: Mapping[str, Any], parent: Optional[ParentContext]) -> Optional[str]:
        """
        Build one record from an object schema.

        Args:
            schema: Object schema (properties, required, title, allOf)
            parent: Parent record and field for nested schemas, None for
                top-level records

        Returns:
            The committed record name, or None if the schema yields no record

        Raises:
            RecursionLimitError: If inline nesting exceeds max_depth
        """
        depth = parent.depth if parent is not None else 0
        if depth > self._options.max_depth:
            logger.error(
                f"Inline nesting exceeded max depth {self._options.max_depth}",
                extra=with_parse_context(
                    parser=self.NAME,
                    record=parent.record if parent else None,
                    field=parent.field if parent else None,
                    depth=depth,
                ),
            )
            raise RecursionLimitError(depth, self._options.max_depth)

        if not isinstance(schema, Mapping) or not schema:
            return None

        extends = None
        if schema.get("allOf"):
            schema, extends = self._merge_all_of(schema)

        properties = schema.get("properties")
        if not isinstance(properties, Mapping):
            properties = {}
        if not properties and not extends:
            return None

        title = schema.get("title")
        if title and isinstance(title, str):
            name = camelize(title)
        else:
            name = self._record_name(parent, DEFAULT_RECORD_NAME)
        name = self._options.qualify(name)

        required_fields = schema.get("required")
        if not isinstance(required_fields, list):
            required_fields = []

        fields: Dict[str, FieldDefinition] = {}
        claimed: Set[str] = set()

        for property_name, details in properties.items():
            property_name = str(property_name)
            # Private/internal properties
            if property_name.startswith("_"):
                continue
            if not isinstance(details, Mapping):
                continue

            field_name = variable(property_name)
            definition = self._field(
                details,
                property_name in required_fields,
                ParentContext(record=name, field=field_name, depth=depth),
                claimed,
            )
            if definition is None:
                continue

            fields[field_name] = definition
            claimed.add(field_name)

        self._state.result.commit(RecordDefinition(name=name, fields=fields, extends=extends))
        logger.debug(
            f"Committed record {name} with {len(fields)} fields",
            extra=with_parse_context(parser=self.NAME, record=name, depth=depth),
        )
        return name

    def _field(
        self,
        details: Mapping[str, Any],
        required: bool,
        context: ParentContext,
        claimed: Set[str],
    ) -> Optional[FieldDefinition]:
        """Classify one property; None drops it from the record."""
        details = dict(details)
        linked: Optional[str] = None

        # OpenAPI 3.0 nullable flag
        if details.get("nullable") is True:
            required = False

        if details.get("$ref"):
            resolved = self._resolve_ref(details["$ref"], context.record, context.field)
            if resolved is None:
                return None
            details = dict(resolved.schema)
            linked = resolved.record

        type_ = details.get("type")

        # Composition wrapper around a single reference
        if not type_ and details.get("allOf"):
            branches = details["allOf"]
            if (
                isinstance(branches, list)
                and len(branches) == 1
                and isinstance(branches[0], Mapping)
                and branches[0].get("$ref")
                and not details.get("properties")
            ):
                resolved = self._resolve_ref(branches[0]["$ref"], context.record, context.field)
                if resolved is None:
                    return None
                details = dict(resolved.schema)
                linked = resolved.record
                type_ = details.get("type")
            else:
                type_ = "object"

        if not type_:
            for key in ("anyOf", "oneOf"):
                branches = details.get(key)
                if not branches or not isinstance(branches, list):
                    continue
                types, object_branch, branch_record = self._union_branches(branches, context)
                if not types:
                    continue
                type_ = types
                if object_branch is not None:
                    details["properties"] = object_branch.get("properties") or {}
                    details["required"] = object_branch.get("required")
                    details["title"] = object_branch.get("title")
                    linked = branch_record
                break

        if not type_ and details.get("enum"):
            type_ = "string"

        if isinstance(type_, list) or type_ == "null":
            type_, nullable = self._collapse_types(type_ if isinstance(type_, list) else [type_])
            if nullable:
                required = False

        collection = False
        if type_ == "array" and isinstance(details.get("items"), Mapping):
            items = dict(details["items"])
            item_record = None
            if items.get("$ref"):
                resolved = self._resolve_ref(items["$ref"], context.record, context.field)
                if resolved is not None:
                    items = dict(resolved.schema)
                    item_record = resolved.record

            if _declares_object(items.get("type")):
                collection = True
                type_ = "object"
                details["properties"] = items.get("properties") or {}
                details["required"] = items.get("required")
                details["title"] = items.get("title")
                linked = item_record

        if not type_ or not isinstance(type_, str):
            type_ = "mixed"
        type_ = normalize_type(type_)

        if type_ == "string" and details.get("format") in _DATE_FORMATS:
            type_ = DATETIME_TYPE

        definition = FieldDefinition(type=type_, required=required)
        if type_ != "object":
            return definition

        if linked:
            definition.type = linked
        else:
            child = self._parse(
                details,
                ParentContext(
                    record=context.record,
                    field=context.field,
                    collection=collection,
                    depth=context.depth + 1,
                ),
            )
            if child is None:
                # Object without properties: a generic container
                definition.type = "array"
                return definition
            definition.type = child

        if collection:
            key_field = get_key_field_registry().detect(
                details.get("properties") or {},
                is_string=_is_string_property,
            )
            self._link_collection(definition, context.field, claimed, key_field)

        return definition

    def _union_branches(
        self,
        branches: List[Any],
        context: ParentContext,
    ) -> Tuple[List[Any], Optional[Dict[str, Any]], Optional[str]]:
        """
        Collect the declared types of anyOf/oneOf branches.

        Returns:
            (types, last object-typed branch, record name of that branch)
        """
        types: List[Any] = []
        object_branch: Optional[Dict[str, Any]] = None
        branch_record: Optional[str] = None

        for branch in branches:
            if not isinstance(branch, Mapping):
                continue
            record = None
            if branch.get("$ref"):
                resolved = self._resolve_ref(branch["$ref"], context.record, context.field)
                if resolved is None:
                    continue
                branch = resolved.schema
                record = resolved.record

            branch_type = branch.get("type")
            if not branch_type:
                continue
            types.append(branch_type)
            if _declares_object(branch_type):
                object_branch = dict(branch)
                branch_record = record

        return types, object_branch, branch_record

    def _collapse_types(self, types: List[Any]) -> Tuple[str, bool]:
        """
        Reduce a type list to one type expression.

        ``null`` is stripped and reported as nullable, nested lists are
        flattened, synonyms normalized and duplicates dropped. A list
        containing ``array`` collapses to plain ``array``.

        Returns:
            (type expression, nullable)
        """
        flat = list(_flatten(types))
        nullable = "null" in flat

        names: List[str] = []
        for type_ in flat:
            if type_ == "null" or not isinstance(type_, str):
                continue
            type_ = normalize_type(type_)
            if type_ not in names:
                names.append(type_)

        if "array" in names:
            return "array", nullable
        if not names:
            return "mixed", nullable
        return UNION_SEPARATOR.join(names), nullable

    def _merge_all_of(self, schema: Mapping[str, Any]) -> Tuple[Dict[str, Any], Optional[str]]:
        """
        Merge allOf branches into one object schema.

        Inline branches contribute properties and required names; the
        first title wins. A branch referencing a record becomes the parent
        record (the last one wins).

        Returns:
            (merged schema, parent record name or None)
        """
        merged = {k: v for k, v in schema.items() if k != "allOf"}
        properties: Dict[str, Any] = dict(merged.get("properties") or {})
        required: List[str] = list(merged.get("required") or [])
        title = merged.get("title")
        extends: Optional[str] = None

        for branch in schema.get("allOf") or []:
            if not isinstance(branch, Mapping):
                continue

            if branch.get("$ref"):
                resolved = self._resolve_ref(branch["$ref"], None, None)
                if resolved is None:
                    continue
                if resolved.record:
                    extends = resolved.record
                    continue
                branch = resolved.schema

            if branch.get("allOf"):
                branch, branch_extends = self._merge_all_of(branch)
                if branch_extends:
                    extends = branch_extends

            properties.update(branch.get("properties") or {})
            for name in branch.get("required") or []:
                if name not in required:
                    required.append(name)
            if not title and branch.get("title"):
                title = branch["title"]

        merged["type"] = "object"
        merged["properties"] = properties
        merged["required"] = required
        if title:
            merged["title"] = title
        return merged, extends

    def _harvest_definitions(self, document: Mapping[str, Any]) -> None:
        """Collect $defs, definitions and components/schemas; later ones win."""
        components = document.get("components")
        containers = (
            document.get("$defs"),
            document.get("definitions"),
            components.get("schemas") if isinstance(components, Mapping) else None,
        )
        for container in containers:
            if isinstance(container, Mapping):
                self._state.definitions.update(container)

    def _resolve_ref(
        self,
        ref: str,
        record: Optional[str],
        field: Optional[str],
    ) -> Optional[_Resolved]:
        """
        Resolve a $ref pointer.

        An object schema is expanded into its own record the first time its
        reference is seen; every call returns that record's name.

        Returns:
            _Resolved, or None if the reference cannot be resolved
        """
        schema: Any = None
        if ref.startswith("#"):
            key = self._local_ref_name(ref)
            name = key
            if key:
                schema = self._state.definitions.get(key)
        else:
            key = ref
            name = None
            resolved = self._resolver.resolve(ref, self._options)
            if resolved is not None:
                if isinstance(resolved.definitions_source, Mapping):
                    self._harvest_definitions(resolved.definitions_source)
                schema = resolved.schema
                name = self._external_ref_name(ref, resolved)

        if not isinstance(schema, Mapping):
            self._unresolved(ref, record, field)
            return None

        schema = dict(schema)
        if not _is_record_schema(schema):
            return _Resolved(schema=schema)

        if not schema.get("title") and name:
            schema["title"] = name

        if key not in self._state.processed_refs:
            # Mark before walking: a reference back to this schema
            # short-circuits to the same record name
            self._state.processed_refs[key] = self._options.qualify(
                camelize(str(schema.get("title") or DEFAULT_RECORD_NAME))
            )
            logger.debug(
                f"Expanding reference {ref}",
                extra=with_parse_context(parser=self.NAME, record=record, field=field, ref=ref),
            )
            if self._parse(schema, None) is None:
                self._state.processed_refs[key] = ""

        record_name = self._state.processed_refs[key]
        if not record_name:
            return _Resolved(schema=schema)

        return _Resolved(
            schema={
                "type": schema.get("type") or "object",
                "properties": schema.get("properties") or {},
                "required": schema.get("required") or [],
                "title": schema.get("title"),
            },
            record=record_name,
        )

    def _local_ref_name(self, ref: str) -> Optional[str]:
        """Definition name of a local pointer such as ``#/$defs/Name``."""
        for prefix in _LOCAL_REF_PREFIXES:
            if ref.startswith(prefix):
                return _unescape_pointer(ref[len(prefix):]) or None
        if ref.startswith("#/"):
            return _unescape_pointer(ref.rstrip("/").rsplit("/", 1)[-1]) or None
        return None

    def _external_ref_name(self, ref: str, resolved: ResolvedRef) -> str:
        """Name for an external reference: fragment, then title, then file name."""
        fragment = resolved.fragment.strip("#").rstrip("/")
        if fragment:
            return _unescape_pointer(fragment.rsplit("/", 1)[-1])
        title = resolved.schema.get("title")
        if title:
            return str(title)
        return Path(resolved.source_path or ref.partition("#")[0]).stem

    def _unresolved(self, ref: str, record: Optional[str], field: Optional[str]) -> None:
        self._state.result.diagnostics.append(
            Diagnostic(
                kind="unresolved_ref",
                message=f"Could not resolve reference {ref}",
                ref=ref,
                record=record,
                field=field,
            )
        )
        logger.warning(
            f"Unresolved reference {ref}",
            extra=with_parse_context(parser=self.NAME, record=record, field=field, ref=ref),
        )


__all__ = ["SchemaParser", "is_openapi_document"]
