"""Valet exception hierarchy.

Base exceptions for loading, inference, chart retrieval and output.

Usage:
    from valet.exceptions import NotFoundError, ValetError

    try:
        values = load_values(path)
    except NotFoundError as e:
        logger.error("Values file missing: %s", e.path)
"""

from pathlib import Path


class ValetError(Exception):
    """Base exception for all Valet errors.

    Carries an optional path (file or chart identity) for context.
    """

    def __init__(self, message: str, *, path: str | Path | None = None):
        self.path = str(path) if path is not None else None
        super().__init__(message)


class NotFoundError(ValetError):
    """A required input file does not exist."""

    pass


class ParseError(ValetError):
    """Input bytes are not valid YAML."""

    def __init__(self, message: str, *, line: int | None = None, **kwargs):
        self.line = line
        super().__init__(message, **kwargs)


class NotAMappingError(ValetError):
    """Top-level YAML document is not a mapping."""

    def __init__(self, message: str, *, found: str | None = None, **kwargs):
        self.found = found
        super().__init__(message, **kwargs)


class InvalidRootError(ValetError):
    """Merged root value is not a mapping at document assembly."""

    pass


class ReadError(ValetError):
    """An input path exists but cannot be read as a file."""

    pass


class ConfigurationError(ValetError):
    """Invalid combination of CLI flags or configuration values."""

    pass


class ChartError(ValetError):
    """Errors from remote chart retrieval or archive loading."""

    def __init__(self, message: str, *, chart: str | None = None, **kwargs):
        self.chart = chart
        super().__init__(message, **kwargs)


class ChartTooLargeError(ChartError):
    """Chart archive exceeds the configured size limit."""

    def __init__(self, message: str, *, size: int, limit: int, **kwargs):
        self.size = size
        self.limit = limit
        super().__init__(message, **kwargs)


class SchemaNotFoundError(ChartError):
    """Chart does not carry a values.schema.json file."""

    pass


class WriteError(ValetError):
    """Schema document could not be written."""

    pass
