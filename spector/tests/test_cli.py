import json

import pytest
from typer.testing import CliRunner

from spector.app.cli import app
from spector.tests.fixtures.documents import (
    encode,
    in_toto_statement,
    provenance_statement_without,
)

runner = CliRunner()


@pytest.fixture
def write_document(tmp_path):
    def _write(document, name="statement.json"):
        path = tmp_path / name
        path.write_bytes(encode(document) if not isinstance(document, bytes) else document)
        return path

    return _write


# ----------------------------------------------------------------------
# validate
# ----------------------------------------------------------------------

def test_valid_document_exits_zero(write_document):
    path = write_document(in_toto_statement())

    result = runner.invoke(
        app,
        ["validate", "in-toto-v1", "slsa-provenance-v1", "--file", str(path)],
    )

    assert result.exit_code == 0, result.output
    assert "[PASS] in-toto-v1" in result.output
    assert "[PASS] slsa-provenance-v1" in result.output
    assert "Document is valid" in result.output


def test_valid_document_is_echoed_pretty_printed(write_document):
    path = write_document(in_toto_statement())

    result = runner.invoke(
        app,
        ["validate", "in-toto-v1", "slsa-provenance-v1", "--file", str(path)],
    )

    assert result.exit_code == 0, result.output
    assert '"id": "https://example.com/builder"' in result.output
    assert '\n  "predicateType": ' in result.output


def test_invalid_document_prints_violations_and_exits_one(write_document):
    path = write_document(provenance_statement_without("buildDefinition"))

    result = runner.invoke(
        app,
        ["validate", "in-toto-v1", "slsa-provenance-v1", "-f", str(path)],
    )

    assert result.exit_code == 1
    assert "[FAIL] slsa-provenance-v1 (schema_violation)" in result.output
    assert "/predicate/buildDefinition" in result.output
    assert "Document is invalid" in result.output
    assert "predicateType" not in result.output


def test_unknown_type_exits_one(write_document):
    path = write_document(in_toto_statement())

    result = runner.invoke(
        app, ["validate", "made-up-type-v9", "--file", str(path)]
    )

    assert result.exit_code == 1
    assert "unknown_document_type" in result.output


def test_json_output_is_the_report(write_document):
    path = write_document(b"{not json")

    result = runner.invoke(
        app,
        ["validate", "in-toto-v1", "--file", str(path), "--format", "json"],
    )

    assert result.exit_code == 1
    report = json.loads(result.output)
    assert report["chain"] == ["in-toto-v1"]
    assert report["levels"][0]["error"] == "parse_error"


def test_strict_flag_checks_predicate_type(write_document):
    path = write_document(
        in_toto_statement(predicate_type="https://example.com/other/v1")
    )
    args = ["validate", "in-toto-v1", "slsa-provenance-v1", "--file", str(path)]

    assert runner.invoke(app, args).exit_code == 0

    result = runner.invoke(app, args + ["--strict-predicate-type"])
    assert result.exit_code == 1
    assert "predicate_type_mismatch" in result.output


def test_missing_file_is_a_usage_error(tmp_path):
    result = runner.invoke(
        app,
        ["validate", "in-toto-v1", "--file", str(tmp_path / "absent.json")],
    )

    assert result.exit_code == 2


def test_oversize_file_is_a_usage_error(write_document, monkeypatch):
    monkeypatch.setenv("SPECTOR_MAX_DOCUMENT_SIZE_MB", "1")
    path = write_document(b" " * (1024 * 1024 + 1))

    result = runner.invoke(app, ["validate", "in-toto-v1", "--file", str(path)])

    assert result.exit_code == 2


@pytest.mark.parametrize(
    "name, value",
    [("SPECTOR_MAX_DOCUMENT_SIZE_MB", "lots"), ("SPECTOR_LOG_LEVEL", "LOUD")],
)
def test_bad_environment_is_a_usage_error(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    result = runner.invoke(app, ["types"])

    assert result.exit_code == 2
    assert "SPECTOR_" in result.output


# ----------------------------------------------------------------------
# schema / types
# ----------------------------------------------------------------------

def test_schema_prints_embedded_schema():
    result = runner.invoke(app, ["schema", "slsa-provenance-v1"])

    assert result.exit_code == 0
    schema = json.loads(result.output)
    assert schema["required"] == ["buildDefinition", "runDetails"]


def test_schema_of_unknown_type_is_a_usage_error():
    result = runner.invoke(app, ["schema", "made-up-type-v9"])

    assert result.exit_code == 2


def test_types_lists_builtin_document_types():
    result = runner.invoke(app, ["types"])

    assert result.exit_code == 0
    assert "in-toto-v1" in result.output
    assert "https://slsa.dev/provenance/v0.2" in result.output
