"""Exceptions raised by the METAR decode and render pipeline."""


class MetarError(Exception):
    """Base class for all wxmetar errors."""


class InvalidDocument(MetarError):
    """The input could not be parsed as an ADDS METAR document."""


class NoMatchingElements(MetarError):
    """The document is valid but holds no METAR elements."""


class FieldCoercionAnomaly(MetarError, ValueError):
    """A field's text could not be converted to its expected type."""

    def __init__(self, field: str, text: str):
        super().__init__(f"Cannot coerce {field}={text!r}")
        self.field = field
        self.text = text


class OutputCapacityExceeded(MetarError):
    """Appending to a bounded output would reach its capacity."""


class FetchError(MetarError):
    """The document source could not retrieve a document."""
