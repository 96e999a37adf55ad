"""
Exception types raised by spector.

Registry-time problems (malformed or duplicate schemas) and typed-model
conversion problems surface as exceptions. Per-document problems never
escape the validation chain: the engine converts them into report levels.
"""

from __future__ import annotations


class SpectorError(Exception):
    """Base class for all spector errors."""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class SchemaError(SpectorError):
    """A schema could not be registered."""

    def __init__(self, identifier: str, message: str) -> None:
        super().__init__(f"{identifier}: {message}")
        self.identifier = identifier


class MalformedSchemaError(SchemaError):
    """Schema text is not a valid JSON Schema Draft-07 document."""


class DuplicateIdentifierError(SchemaError):
    """The document type identifier is already registered."""


# ---------------------------------------------------------------------------
# Nested payload extraction
# ---------------------------------------------------------------------------

class EnvelopeError(SpectorError):
    """
    The nested predicate could not be extracted from a statement.

    ``field`` names the envelope member at fault ("" when the statement
    itself has the wrong shape).
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class MissingFieldError(EnvelopeError):
    pass


class WrongShapeError(EnvelopeError):
    pass


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class DocumentParseError(SpectorError):
    """Input bytes are not a UTF-8 JSON document."""


class DecodeError(SpectorError):
    """A value could not be converted into its typed model."""
