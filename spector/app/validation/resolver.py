"""
Nested payload extraction for statement envelopes.

The resolver only pulls the predicate out of a statement. Whether the
predicate type is supported is decided by the caller, which consults the
schema registry.
"""

from __future__ import annotations

from typing import Any, Tuple

from spector.app.errors import MissingFieldError, WrongShapeError

PREDICATE_TYPE_FIELD = "predicateType"
PREDICATE_FIELD = "predicate"


def extract_predicate(statement_value: Any) -> Tuple[str, Any]:
    """
    Return ``(predicate_type_uri, predicate_value)`` from a statement.

    Raises:
        MissingFieldError: ``predicateType`` or ``predicate`` is absent.
        WrongShapeError: the statement is not an object, or
            ``predicateType`` is not a string.
    """
    if not isinstance(statement_value, dict):
        raise WrongShapeError(
            "",
            f"statement must be a JSON object, "
            f"got {type(statement_value).__name__}",
        )

    if PREDICATE_TYPE_FIELD not in statement_value:
        raise MissingFieldError(
            PREDICATE_TYPE_FIELD,
            f"statement has no '{PREDICATE_TYPE_FIELD}' field",
        )

    predicate_type = statement_value[PREDICATE_TYPE_FIELD]
    if not isinstance(predicate_type, str):
        raise WrongShapeError(
            PREDICATE_TYPE_FIELD,
            f"'{PREDICATE_TYPE_FIELD}' must be a string, "
            f"got {type(predicate_type).__name__}",
        )

    if PREDICATE_FIELD not in statement_value:
        raise MissingFieldError(
            PREDICATE_FIELD,
            f"statement has no '{PREDICATE_FIELD}' field",
        )

    return predicate_type, statement_value[PREDICATE_FIELD]
