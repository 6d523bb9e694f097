"""Importer exceptions."""


class ImporterError(Exception):
    """Base exception for importer errors."""

    pass


class RecursionLimitError(ImporterError):
    """Raised when inline object nesting exceeds the configured maximum depth."""

    def __init__(self, depth: int, max_depth: int):
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"Maximum nesting depth exceeded: reached depth {depth} (limit {max_depth})"
        )


class UnknownParserError(ImporterError, ValueError):
    """Raised when a parser type name is not registered."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(
            f'Unknown parser type "{name}". Available types: {", ".join(available)}'
        )


class InputDecodeError(ImporterError, ValueError):
    """Raised when input text cannot be decoded into a mapping."""

    pass


class ParserReuseError(ImporterError):
    """Raised when a parser instance is asked to parse a second root input."""

    pass


__all__ = [
    "ImporterError",
    "RecursionLimitError",
    "UnknownParserError",
    "InputDecodeError",
    "ParserReuseError",
]
