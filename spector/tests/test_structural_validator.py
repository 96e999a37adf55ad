"""
Structural validator tests.

Violations must be exhaustive, located by RFC 6901 pointer, and reported
in schema traversal order.
"""

import json

import pytest

from spector.app.registry.registry import SchemaRegistry
from spector.app.validation.structural import (
    StructuralValidator,
    json_pointer,
)


@pytest.fixture
def entry():
    schema = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "properties": {
            "a/b": {"type": "string"},
            "m~n": {"type": "integer"},
            "items": {"type": "array", "items": {"type": "integer"}},
            "when": {"type": "string", "format": "date-time"},
        },
        "required": ["first", "second", "a/b"],
    }
    return SchemaRegistry().register("example-v1", json.dumps(schema))


def test_valid_value_passes(entry):
    outcome = StructuralValidator().validate(
        entry,
        {"first": 1, "second": 2, "a/b": "x", "when": "2024-01-01T00:00:00Z"},
    )

    assert outcome.passed is True
    assert outcome.violations == []


def test_each_missing_property_gets_its_own_pointer(entry):
    outcome = StructuralValidator().validate(entry, {"second": 2})

    assert [(v.pointer, v.keyword) for v in outcome.violations] == [
        ("/first", "required"),
        ("/a~1b", "required"),
    ]


def test_pointer_tokens_are_escaped(entry):
    outcome = StructuralValidator().validate(
        entry,
        {"first": 1, "second": 2, "a/b": 5, "m~n": "x", "items": [1, "two"]},
    )

    assert [v.pointer for v in outcome.violations] == [
        "/a~1b",
        "/m~0n",
        "/items/1",
    ]
    assert all(v.keyword == "type" for v in outcome.violations)


def test_base_pointer_prefixes_every_violation(entry):
    outcome = StructuralValidator().validate(
        entry, {"second": 2, "a/b": "x"}, base_pointer="/predicate"
    )

    assert [v.pointer for v in outcome.violations] == ["/predicate/first"]


def test_format_failure_is_a_violation(entry):
    outcome = StructuralValidator().validate(
        entry,
        {"first": 1, "second": 2, "a/b": "x", "when": "not a date"},
    )

    assert outcome.passed is False
    assert [(v.pointer, v.keyword) for v in outcome.violations] == [
        ("/when", "format"),
    ]


def test_root_type_mismatch_is_reported_at_root(entry):
    outcome = StructuralValidator().validate(entry, ["not", "an", "object"])

    assert [(v.pointer, v.keyword) for v in outcome.violations] == [
        ("", "type"),
    ]


def test_json_pointer_rendering():
    assert json_pointer([]) == ""
    assert json_pointer(["subject", 0, "digest"]) == "/subject/0/digest"
    assert json_pointer(["a/b", "c~d"], "/predicate") == "/predicate/a~1b/c~0d"
