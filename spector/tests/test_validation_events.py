"""
Validation events are observational: they follow the chain's progression
and never change the report.
"""

from spector.app.events import (
    MemoryEventEmitter,
    NullEventEmitter,
    ValidationEvent,
    ValidationEventType,
)
from spector.app.registry.builtin import build_default_registry
from spector.app.validation.chain import ValidationChainEngine
from spector.tests.fixtures.documents import encode, in_toto_statement, statement_without


class ExplodingEmitter:
    def emit(self, event: ValidationEvent) -> None:
        raise RuntimeError("listener crashed")


def test_events_follow_chain_progression():
    emitter = MemoryEventEmitter()
    engine = ValidationChainEngine(registry=build_default_registry())

    engine.validate_chain(
        encode(statement_without("subject")),
        ["in-toto-v1", "slsa-provenance-v1"],
        emitter=emitter,
    )

    assert [e.event_type for e in emitter.events] == [
        ValidationEventType.VALIDATION_STARTED,
        ValidationEventType.LEVEL_STARTED,
        ValidationEventType.LEVEL_COMPLETED,
        ValidationEventType.LEVEL_SKIPPED,
        ValidationEventType.VALIDATION_COMPLETED,
    ]
    assert len({e.validation_id for e in emitter.events}) == 1
    assert emitter.events[2].details["status"] == "failed"
    assert emitter.events[-1].details["passed"] is False
    assert emitter.closed is True


def test_memory_emitter_ignores_events_after_completion():
    emitter = MemoryEventEmitter()
    emitter.emit(
        ValidationEvent(
            validation_id="v-1",
            event_type=ValidationEventType.VALIDATION_COMPLETED,
        )
    )
    emitter.emit(
        ValidationEvent(
            validation_id="v-1",
            event_type=ValidationEventType.LEVEL_STARTED,
        )
    )

    assert len(emitter.events) == 1


def test_emitter_failure_does_not_change_report():
    engine = ValidationChainEngine(registry=build_default_registry())
    raw_bytes = encode(in_toto_statement())
    chain = ["in-toto-v1", "slsa-provenance-v1"]

    quiet = engine.validate_chain(raw_bytes, chain, emitter=NullEventEmitter())
    noisy = engine.validate_chain(raw_bytes, chain, emitter=ExplodingEmitter())

    assert noisy.model_dump_json() == quiet.model_dump_json()
    assert noisy.passed is True


def test_engine_level_emitter_is_used_by_default():
    emitter = MemoryEventEmitter()
    engine = ValidationChainEngine(
        registry=build_default_registry(),
        emitter=emitter,
    )

    engine.validate_document(
        encode(in_toto_statement()), ["in-toto-v1"], validation_id="run-7"
    )

    assert emitter.events[0].validation_id == "run-7"
    assert emitter.events[-1].event_type == ValidationEventType.VALIDATION_COMPLETED
