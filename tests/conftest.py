"""Pytest configuration and fixtures."""
import json
import logging
import os

import pytest

# Set test environment variables
os.environ["DTO_IMPORTER_ENV"] = "test"

from dto_importer.config import reset_settings
from dto_importer.key_fields import reset_key_fields


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset settings and the key field registry around every test."""
    reset_settings()
    reset_key_fields()
    yield
    reset_settings()
    reset_key_fields()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers replaced by setup_logging()."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document under tmp_path and return its path."""

    def _write(name, document):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
