"""Observability package."""
from dto_importer.observability.logging import (
    get_logger,
    setup_logging,
    with_parse_context,
)

__all__ = ["get_logger", "setup_logging", "with_parse_context"]
