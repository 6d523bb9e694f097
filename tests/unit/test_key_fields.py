"""Tests for the associative key field registry."""
import pytest

from dto_importer.key_fields import (
    DEFAULT_KEY_FIELDS,
    KeyFieldRegistry,
    apply_settings_key_fields,
    get_key_field_registry,
    get_key_fields,
    reset_key_fields,
    set_key_fields,
)


class TestKeyFieldRegistry:
    """Test KeyFieldRegistry."""

    def test_defaults(self):
        registry = KeyFieldRegistry()

        assert registry.get() == ["slug", "login", "name", "id"]
        assert list(registry) == list(DEFAULT_KEY_FIELDS)
        assert len(registry) == 4

    def test_get_returns_copy(self):
        registry = KeyFieldRegistry()
        registry.get().append("uuid")

        assert "uuid" not in registry.get()

    def test_set_and_reset(self):
        registry = KeyFieldRegistry()
        registry.set(["uuid"])

        assert registry.get() == ["uuid"]

        registry.reset()

        assert registry.get() == list(DEFAULT_KEY_FIELDS)

    def test_set_rejects_non_strings(self):
        registry = KeyFieldRegistry()

        with pytest.raises(TypeError):
            registry.set(["uuid", 1])

        assert registry.get() == list(DEFAULT_KEY_FIELDS)

    def test_detect_priority_order(self):
        registry = KeyFieldRegistry()

        assert registry.detect({"id": "1", "name": "John", "login": "john"}) == "login"

    def test_detect_requires_string_value(self):
        registry = KeyFieldRegistry()

        assert registry.detect({"id": 1, "name": None}) is None
        assert registry.detect({"id": 1, "name": "John"}) == "name"

    def test_detect_with_custom_predicate(self):
        registry = KeyFieldRegistry()
        properties = {"id": {"type": "integer"}, "slug": {"type": "string"}}

        detected = registry.detect(
            properties,
            is_string=lambda schema: schema.get("type") == "string",
        )

        assert detected == "slug"

    def test_detect_non_mapping(self):
        assert KeyFieldRegistry().detect(["slug"]) is None

    def test_empty_candidates(self):
        registry = KeyFieldRegistry([])

        assert registry.detect({"slug": "a"}) is None


class TestGlobalRegistry:
    """Test the process-wide registry accessors."""

    def test_singleton(self):
        assert get_key_field_registry() is get_key_field_registry()

    def test_set_and_reset(self):
        set_key_fields(["email"])

        assert get_key_fields() == ["email"]

        reset_key_fields()

        assert get_key_fields() == list(DEFAULT_KEY_FIELDS)

    def test_apply_settings(self, monkeypatch):
        monkeypatch.setenv("DTO_IMPORTER_KEY_FIELDS_JSON", '["uuid", "slug"]')

        assert apply_settings_key_fields() is True
        assert get_key_fields() == ["uuid", "slug"]

    def test_apply_settings_unset(self, monkeypatch):
        monkeypatch.delenv("DTO_IMPORTER_KEY_FIELDS_JSON", raising=False)

        assert apply_settings_key_fields() is False
        assert get_key_fields() == list(DEFAULT_KEY_FIELDS)
