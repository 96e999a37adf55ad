"""
Structural (JSON Schema) validation of a single value.

All violations are collected in one pass, in the order the compiled
schema reports them, so a caller can fix every problem in one edit cycle.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

from jsonschema.exceptions import ValidationError
from pydantic import BaseModel, ConfigDict, Field

from spector.app.registry.registry import SchemaEntry
from spector.app.schemas.validation_report import Violation


def escape_pointer_token(token: Any) -> str:
    return str(token).replace("~", "~0").replace("/", "~1")


def json_pointer(parts: Iterable[Any], base: str = "") -> str:
    """Render path parts as an RFC 6901 pointer appended to ``base``."""
    return base + "".join("/" + escape_pointer_token(p) for p in parts)


class ValidationOutcome(BaseModel):
    passed: bool
    violations: List[Violation] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class StructuralValidator:
    """
    Evaluates values against a registered schema entry.

    Stateless; the compiled schema is owned by the entry.
    """

    def validate(
        self,
        entry: SchemaEntry,
        value: Any,
        *,
        base_pointer: str = "",
    ) -> ValidationOutcome:
        violations: List[Violation] = []

        # (schema location, instance location) -> required errors seen so far
        required_seen: Dict[Tuple[Tuple[Any, ...], Tuple[Any, ...]], int] = {}

        for error in entry.validator.iter_errors(value):
            path = list(error.absolute_path)

            if error.validator == "required":
                missing = self._missing_property(error, required_seen)
                if missing is not None:
                    path.append(missing)

            violations.append(
                Violation(
                    pointer=json_pointer(path, base_pointer),
                    keyword=str(error.validator),
                    message=error.message,
                )
            )

        return ValidationOutcome(
            passed=not violations,
            violations=violations,
        )

    @staticmethod
    def _missing_property(
        error: ValidationError,
        required_seen: Dict[Tuple[Tuple[Any, ...], Tuple[Any, ...]], int],
    ) -> str | None:
        # A "required" keyword yields one error per missing property, in
        # declaration order.
        if not isinstance(error.instance, dict):
            return None

        missing = [
            name for name in error.validator_value
            if name not in error.instance
        ]

        key = (tuple(error.absolute_schema_path), tuple(error.absolute_path))
        index = required_seen.get(key, 0)
        required_seen[key] = index + 1

        if index < len(missing):
            return missing[index]
        return None
