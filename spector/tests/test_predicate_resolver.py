import pytest

from spector.app.errors import (
    DecodeError,
    EnvelopeError,
    MissingFieldError,
    WrongShapeError,
)
from spector.app.models.intoto.predicate import (
    KnownPredicate,
    OtherPredicate,
    resolve_predicate,
)
from spector.app.models.slsa.provenance_v1 import SLSAProvenanceV1Predicate
from spector.app.registry.builtin import build_default_registry
from spector.app.validation.resolver import extract_predicate
from spector.tests.fixtures.documents import (
    in_toto_statement,
    slsa_provenance_v1_predicate,
    statement_without,
)


# ----------------------------------------------------------------------
# extract_predicate
# ----------------------------------------------------------------------

def test_extract_predicate_returns_type_and_payload():
    predicate_type, predicate = extract_predicate(in_toto_statement())

    assert predicate_type == "https://slsa.dev/provenance/v1"
    assert predicate == slsa_provenance_v1_predicate()


def test_extract_predicate_accepts_any_predicate_value():
    statement = in_toto_statement(predicate={}, predicate_type="urn:example:x")
    statement["predicate"] = None

    assert extract_predicate(statement) == ("urn:example:x", None)


@pytest.mark.parametrize("field", ["predicateType", "predicate"])
def test_missing_fields_raise_missing_field(field):
    with pytest.raises(MissingFieldError) as exc_info:
        extract_predicate(statement_without(field))

    assert exc_info.value.field == field
    assert isinstance(exc_info.value, EnvelopeError)


@pytest.mark.parametrize("value", [None, 1, ["https://slsa.dev/provenance/v1"]])
def test_non_string_predicate_type_raises_wrong_shape(value):
    statement = in_toto_statement()
    statement["predicateType"] = value

    with pytest.raises(WrongShapeError) as exc_info:
        extract_predicate(statement)

    assert exc_info.value.field == "predicateType"


@pytest.mark.parametrize("value", [[], "statement", 3, None])
def test_non_object_statement_raises_wrong_shape(value):
    with pytest.raises(WrongShapeError) as exc_info:
        extract_predicate(value)

    assert exc_info.value.field == ""


# ----------------------------------------------------------------------
# resolve_predicate
# ----------------------------------------------------------------------

@pytest.fixture(scope="module")
def registry():
    return build_default_registry()


def test_registered_predicate_type_resolves_to_known(registry):
    predicate = resolve_predicate(
        "https://slsa.dev/provenance/v1",
        slsa_provenance_v1_predicate(),
        registry,
    )

    assert isinstance(predicate, KnownPredicate)
    assert predicate.identifier == "slsa-provenance-v1"
    assert isinstance(predicate.value, SLSAProvenanceV1Predicate)
    assert (
        predicate.value.run_details.builder.id == "https://example.com/builder"
    )


def test_unregistered_predicate_type_degrades_to_other(registry):
    payload = {"key": "value", "nested": {"a": 1, "b": "two"}}

    predicate = resolve_predicate("https://unknown.example.com", payload, registry)

    assert isinstance(predicate, OtherPredicate)
    assert predicate.value == payload


def test_registered_predicate_type_with_bad_payload_raises(registry):
    with pytest.raises(DecodeError):
        resolve_predicate(
            "https://slsa.dev/provenance/v1",
            {"invalid": "data"},
            registry,
        )
