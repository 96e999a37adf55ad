"""
Validation chain engine.

The engine is a gate, not an interpreter. Its responsibilities are:
- parsing the input bytes once,
- walking the requested chain of document types outermost first,
- stopping at the first level that does not pass,
- aggregating per-level outcomes into a ValidationReport.

It never raises for problems with the document itself. Every call returns
a report describing exactly what happened, including partial success.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, List, Optional, Sequence
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from spector.app.config import SpectorConfig
from spector.app.errors import (
    DecodeError,
    DocumentParseError,
    EnvelopeError,
    MissingFieldError,
)
from spector.app.events import (
    NullEventEmitter,
    ValidationEvent,
    ValidationEventEmitter,
    ValidationEventType,
)
from spector.app.registry.builtin import default_registry
from spector.app.registry.registry import SchemaEntry, SchemaRegistry
from spector.app.schemas.validation_report import (
    ErrorKind,
    LevelResult,
    LevelStatus,
    ValidationReport,
    Violation,
)
from spector.app.validation.resolver import (
    PREDICATE_FIELD,
    PREDICATE_TYPE_FIELD,
    extract_predicate,
)
from spector.app.validation.structural import (
    StructuralValidator,
    escape_pointer_token,
)

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def level_pointer(index: int) -> str:
    """JSON pointer of the value validated at chain level ``index``."""
    return f"/{PREDICATE_FIELD}" * index


def parse_document(raw_bytes: bytes) -> Any:
    """
    Parse UTF-8 JSON bytes into a generic document value.

    A leading byte order mark is tolerated; NaN and Infinity are not.
    """
    try:
        text = raw_bytes.decode("utf-8-sig")
        return json.loads(text, parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise DocumentParseError(f"malformed JSON: {exc}") from exc


class ValidatedDocument(BaseModel):
    """
    A parsed document together with its validation report.

    ``values[i]`` is the value evaluated at chain level ``i`` (only levels
    that were reached have a value).
    """

    report: ValidationReport
    document: Any = None
    values: List[Any] = Field(default_factory=list)
    registry: SchemaRegistry = Field(..., exclude=True, repr=False)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def passed(self) -> bool:
        return self.report.passed

    def decode(self, identifier: str) -> BaseModel:
        """
        Convert the value validated as ``identifier`` into its typed model.

        Raises:
            DecodeError: no level of this document passed as
                ``identifier``, the type has no typed model, or the model
                rejects the value.
        """
        for index, level in enumerate(self.report.levels):
            if (
                level.identifier == identifier
                and level.status == LevelStatus.PASSED
            ):
                break
        else:
            raise DecodeError(
                f"Document was not successfully validated as '{identifier}'"
            )

        entry = self.registry.resolve(identifier)
        if entry is None or entry.decoder is None:
            raise DecodeError(f"'{identifier}' has no typed model")

        try:
            return entry.decoder.model_validate(self.values[index])
        except ValidationError as exc:
            raise DecodeError(
                f"Value at '{level.pointer}' does not fit "
                f"{entry.decoder.__name__}: {exc}"
            ) from exc


class ValidationChainEngine:
    """
    Validates a document against an ordered chain of document types.

    Level 0 validates the whole document. Each further level validates the
    ``predicate`` extracted from the value that passed the level above.
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        config: Optional[SpectorConfig] = None,
        validator: Optional[StructuralValidator] = None,
        emitter: Optional[ValidationEventEmitter] = None,
    ) -> None:
        self._registry = registry
        self._config = config if config is not None else SpectorConfig()
        self._validator = (
            validator if validator is not None else StructuralValidator()
        )
        self._emitter = emitter

    @classmethod
    def from_config(cls, config: SpectorConfig) -> "ValidationChainEngine":
        """Engine over the built-in document types."""
        return cls(registry=default_registry(), config=config)

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate_chain(
        self,
        raw_bytes: bytes,
        type_chain: Sequence[str],
        *,
        emitter: Optional[ValidationEventEmitter] = None,
    ) -> ValidationReport:
        return self.validate_document(
            raw_bytes, type_chain, emitter=emitter
        ).report

    def validate_document(
        self,
        raw_bytes: bytes,
        type_chain: Sequence[str],
        *,
        emitter: Optional[ValidationEventEmitter] = None,
        validation_id: Optional[str] = None,
    ) -> ValidatedDocument:
        chain = list(type_chain)
        if not chain:
            raise ValueError("type_chain must name at least one document type")

        emitter = emitter or self._emitter or NullEventEmitter()
        validation_id = validation_id or str(uuid4())
        document_sha256 = hashlib.sha256(raw_bytes).hexdigest()

        self._emit(
            emitter,
            validation_id,
            ValidationEventType.VALIDATION_STARTED,
            {"chain": chain, "document_sha256": document_sha256},
        )

        # --------------------------------------------------------------
        # 1. Parse (HARD GATE)
        # --------------------------------------------------------------
        try:
            document = parse_document(raw_bytes)
        except DocumentParseError as exc:
            report = ValidationReport(
                chain=chain,
                document_sha256=document_sha256,
                levels=[
                    self._failed(
                        chain[0],
                        "",
                        ErrorKind.PARSE_ERROR,
                        [Violation(pointer="", keyword="parse", message=str(exc))],
                    )
                ],
            )
            return self._finish(
                emitter, validation_id, report, document=None, values=[]
            )

        # --------------------------------------------------------------
        # 2. Walk the chain
        # --------------------------------------------------------------
        levels: List[LevelResult] = []
        values: List[Any] = []

        current = document
        halted = False

        for index, identifier in enumerate(chain):
            pointer = level_pointer(index)

            if halted:
                levels.append(self._skipped(identifier, pointer))
                self._emit(
                    emitter,
                    validation_id,
                    ValidationEventType.LEVEL_SKIPPED,
                    {"index": index, "identifier": identifier},
                )
                continue

            self._emit(
                emitter,
                validation_id,
                ValidationEventType.LEVEL_STARTED,
                {"index": index, "identifier": identifier},
            )

            level: Optional[LevelResult] = None
            declared_type: Optional[str] = None

            if index > 0:
                parent_pointer = level_pointer(index - 1)
                try:
                    declared_type, current = extract_predicate(current)
                except EnvelopeError as exc:
                    level = self._envelope_failure(
                        identifier, pointer, parent_pointer, exc
                    )

            if level is None:
                values.append(current)
                level = self._validate_level(
                    identifier,
                    current,
                    pointer=pointer,
                    declared_type=declared_type,
                )

            levels.append(level)
            halted = level.status != LevelStatus.PASSED

            logger.debug(
                "Level %d (%s) %s with %d violation(s)",
                index,
                identifier,
                level.status.value,
                len(level.violations),
            )
            self._emit(
                emitter,
                validation_id,
                ValidationEventType.LEVEL_COMPLETED,
                {
                    "index": index,
                    "identifier": identifier,
                    "status": level.status.value,
                    "violations_count": len(level.violations),
                },
            )

        report = ValidationReport(
            chain=chain,
            document_sha256=document_sha256,
            levels=levels,
        )
        return self._finish(
            emitter, validation_id, report, document=document, values=values
        )

    # ------------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------------

    def _validate_level(
        self,
        identifier: str,
        value: Any,
        *,
        pointer: str,
        declared_type: Optional[str],
    ) -> LevelResult:
        entry = self._registry.resolve(identifier)
        if entry is None:
            return self._failed(
                identifier,
                pointer,
                ErrorKind.UNKNOWN_DOCUMENT_TYPE,
                [
                    Violation(
                        pointer=pointer,
                        keyword="documentType",
                        message=self._unknown_type_message(identifier),
                    )
                ],
            )

        outcome = self._validator.validate(entry, value, base_pointer=pointer)
        violations = list(outcome.violations)
        error = ErrorKind.SCHEMA_VIOLATION if violations else None

        mismatch = self._predicate_type_mismatch(entry, declared_type, pointer)
        if mismatch is not None:
            violations.append(mismatch)
            error = error or ErrorKind.PREDICATE_TYPE_MISMATCH

        if violations:
            return self._failed(identifier, pointer, error, violations)

        return LevelResult(
            identifier=identifier,
            pointer=pointer,
            status=LevelStatus.PASSED,
        )

    def _predicate_type_mismatch(
        self,
        entry: SchemaEntry,
        declared_type: Optional[str],
        pointer: str,
    ) -> Optional[Violation]:
        if (
            not self._config.STRICT_PREDICATE_TYPE
            or declared_type is None
            or entry.predicate_type_uri is None
            or declared_type == entry.predicate_type_uri
        ):
            return None

        # predicateType is a sibling of the predicate being validated
        parent = pointer[: -len(PREDICATE_FIELD) - 1]
        return Violation(
            pointer=f"{parent}/{PREDICATE_TYPE_FIELD}",
            keyword=PREDICATE_TYPE_FIELD,
            message=(
                f"'{declared_type}' does not match "
                f"'{entry.predicate_type_uri}' required by {entry.identifier}"
            ),
        )

    def _unknown_type_message(self, identifier: str) -> str:
        reason = self._registry.unavailable_reason(identifier)
        if reason is not None:
            return f"Document type '{identifier}' is unavailable: {reason}"
        return f"Unknown document type '{identifier}'"

    @staticmethod
    def _envelope_failure(
        identifier: str,
        pointer: str,
        parent_pointer: str,
        exc: EnvelopeError,
    ) -> LevelResult:
        error = (
            ErrorKind.ENVELOPE_MISSING_FIELD
            if isinstance(exc, MissingFieldError)
            else ErrorKind.ENVELOPE_WRONG_SHAPE
        )
        field_pointer = (
            f"{parent_pointer}/{escape_pointer_token(exc.field)}"
            if exc.field
            else parent_pointer
        )
        return ValidationChainEngine._failed(
            identifier,
            pointer,
            error,
            [
                Violation(
                    pointer=field_pointer,
                    keyword="envelope",
                    message=exc.message,
                )
            ],
        )

    @staticmethod
    def _failed(
        identifier: str,
        pointer: str,
        error: ErrorKind,
        violations: List[Violation],
    ) -> LevelResult:
        return LevelResult(
            identifier=identifier,
            pointer=pointer,
            status=LevelStatus.FAILED,
            error=error,
            violations=violations,
        )

    @staticmethod
    def _skipped(identifier: str, pointer: str) -> LevelResult:
        return LevelResult(
            identifier=identifier,
            pointer=pointer,
            status=LevelStatus.SKIPPED,
        )

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    def _finish(
        self,
        emitter: ValidationEventEmitter,
        validation_id: str,
        report: ValidationReport,
        *,
        document: Any,
        values: List[Any],
    ) -> ValidatedDocument:
        logger.info(
            "Validated %s against %s: %s",
            report.document_sha256[:12],
            " > ".join(report.chain),
            "passed" if report.passed else "failed",
        )
        self._emit(
            emitter,
            validation_id,
            ValidationEventType.VALIDATION_COMPLETED,
            {
                "passed": report.passed,
                "report": report.model_dump(mode="json"),
            },
        )
        return ValidatedDocument(
            report=report,
            document=document,
            values=values,
            registry=self._registry,
        )

    @staticmethod
    def _emit(
        emitter: ValidationEventEmitter,
        validation_id: str,
        event_type: ValidationEventType,
        details: Optional[dict] = None,
    ) -> None:
        try:
            emitter.emit(
                ValidationEvent(
                    validation_id=validation_id,
                    event_type=event_type,
                    details=details,
                )
            )
        except Exception:
            logger.warning(
                "Event emitter failed on %s", event_type.value, exc_info=True
            )
