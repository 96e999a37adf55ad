"""
ValidationReport schema.

Defines the per-level report produced by the validation chain engine.

The report captures, for every document type identifier in the requested
chain:
- whether the value at that level passed, failed, or was never reached,
- why a failed level failed,
- and every schema violation found at that level.

Reports contain no timestamps or generated identifiers. Validating the
same bytes against the same chain always serializes identically.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Enumerations (FROZEN CONTRACTS)
# ---------------------------------------------------------------------------

class LevelStatus(str, Enum):
    """Outcome of a single chain level."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class ErrorKind(str, Enum):
    """
    Reason a level failed.

    Only failed levels carry an error kind.
    """

    PARSE_ERROR = "parse_error"
    UNKNOWN_DOCUMENT_TYPE = "unknown_document_type"
    ENVELOPE_MISSING_FIELD = "envelope_missing_field"
    ENVELOPE_WRONG_SHAPE = "envelope_wrong_shape"
    SCHEMA_VIOLATION = "schema_violation"
    PREDICATE_TYPE_MISMATCH = "predicate_type_mismatch"


# ---------------------------------------------------------------------------
# Violations
# ---------------------------------------------------------------------------

class Violation(BaseModel):
    """A single constraint failure located by JSON pointer."""

    pointer: str = Field(
        ...,
        description=(
            "RFC 6901 JSON pointer into the input document. "
            "The empty string designates the document root."
        ),
    )

    keyword: str = Field(
        ...,
        description="Schema keyword (or engine check) that failed",
    )

    message: str = Field(
        ...,
        description="Human-readable description of the failure",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------

class LevelResult(BaseModel):
    """Result of validating one document type identifier of the chain."""

    identifier: str = Field(
        ...,
        description="Document type identifier requested for this level",
    )

    pointer: str = Field(
        "",
        description="JSON pointer of the value validated at this level",
    )

    status: LevelStatus

    error: Optional[ErrorKind] = None

    violations: List[Violation] = Field(default_factory=list)

    @model_validator(mode="after")
    def enforce_level_invariants(self):
        """
        - PASSED and SKIPPED levels carry neither an error nor violations.
        - FAILED levels carry an error kind and at least one violation.
        """
        if self.status == LevelStatus.FAILED:
            if self.error is None or not self.violations:
                raise ValueError(
                    "Failed levels must carry an error kind and violations"
                )
        elif self.error is not None or self.violations:
            raise ValueError(
                f"{self.status.value} levels must not carry errors or "
                f"violations"
            )
        return self

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Master Report (AUTHORITATIVE)
# ---------------------------------------------------------------------------

class ValidationReport(BaseModel):
    """Ordered per-level outcome of one validation chain run."""

    chain: List[str] = Field(
        ...,
        min_length=1,
        description="Document type identifiers, outermost first",
    )

    document_sha256: str = Field(
        ...,
        description="SHA-256 of the raw input bytes (hex)",
    )

    levels: List[LevelResult] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return len(self.levels) == len(self.chain) and all(
            level.status == LevelStatus.PASSED for level in self.levels
        )

    @property
    def violations(self) -> List[Violation]:
        return [v for level in self.levels for v in level.violations]

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def enforce_report_invariants(self):
        """
        Enforce chain invariants:

        - Levels follow the chain order.
        - Once a level did not pass, every later level is SKIPPED.
        - Level count equals the chain length, except for a document
          that could not be parsed, which yields a single failed level.
        """
        parse_failure = (
            len(self.levels) == 1
            and self.levels[0].error == ErrorKind.PARSE_ERROR
        )

        if not parse_failure and len(self.levels) != len(self.chain):
            raise ValueError("Report must hold one level per chain entry")

        for level, identifier in zip(self.levels, self.chain):
            if level.identifier != identifier:
                raise ValueError("Levels must follow the chain order")

        halted = False
        for level in self.levels:
            if halted and level.status != LevelStatus.SKIPPED:
                raise ValueError(
                    "Levels after a non-passing level must be skipped"
                )
            if level.status != LevelStatus.PASSED:
                halted = True

        return self

    model_config = ConfigDict(frozen=True, extra="forbid")
