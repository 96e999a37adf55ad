"""
Command-line interface for spector.

Reads a document from disk, runs it through the validation chain engine,
and maps the report onto an exit status: 0 when every level passed, 1
otherwise. Usage errors exit with 2.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, List

import typer

from spector.app.config import SpectorConfig, configure_logging
from spector.app.registry.builtin import default_registry
from spector.app.schemas.validation_report import LevelStatus, ValidationReport
from spector.app.validation.chain import ValidationChainEngine

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="spector",
    help="Validate supply chain metadata documents against their schemas.",
    no_args_is_help=True,
    add_completion=False,
)


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


_STATUS_MARKERS = {
    LevelStatus.PASSED: "PASS",
    LevelStatus.FAILED: "FAIL",
    LevelStatus.SKIPPED: "SKIP",
}


@app.callback()
def main(ctx: typer.Context) -> None:
    try:
        config = SpectorConfig.from_env()
    except ValueError as exc:
        raise typer.BadParameter(f"invalid SPECTOR_* environment: {exc}") from exc
    configure_logging(config)
    ctx.obj = config


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------

@app.command()
def validate(
    ctx: typer.Context,
    document_types: Annotated[
        List[str],
        typer.Argument(
            metavar="TYPE [NESTED-TYPE]...",
            help="Document type identifiers, outermost first "
            "(e.g. in-toto-v1 slsa-provenance-v1).",
        ),
    ],
    file: Annotated[
        Path,
        typer.Option(
            "--file",
            "-f",
            exists=True,
            dir_okay=False,
            readable=True,
            help="Path of the JSON document to validate.",
        ),
    ],
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", help="Report rendering."),
    ] = OutputFormat.TEXT,
    strict_predicate_type: Annotated[
        bool,
        typer.Option(
            "--strict-predicate-type",
            help="Require predicateType to match each nested document type.",
        ),
    ] = False,
) -> None:
    """Validate a document against a chain of document types."""
    config: SpectorConfig = ctx.obj or SpectorConfig.from_env()
    if strict_predicate_type:
        config = config.model_copy(update={"STRICT_PREDICATE_TYPE": True})

    size = file.stat().st_size
    if size > config.max_document_bytes:
        raise typer.BadParameter(
            f"{file} is {size} bytes; the limit is "
            f"{config.MAX_DOCUMENT_SIZE_MB} MB",
            param_hint="--file",
        )

    logger.debug("Validating %s as %s", file, " > ".join(document_types))
    engine = ValidationChainEngine(registry=default_registry(), config=config)
    validated = engine.validate_document(file.read_bytes(), document_types)
    report = validated.report

    if output_format == OutputFormat.JSON:
        typer.echo(report.model_dump_json(indent=2))
    else:
        typer.echo(render_report(report))
        if report.passed:
            typer.echo(json.dumps(validated.document, indent=2))

    raise typer.Exit(code=0 if report.passed else 1)


def render_report(report: ValidationReport) -> str:
    lines = []
    for level in report.levels:
        marker = _STATUS_MARKERS[level.status]
        suffix = f" ({level.error.value})" if level.error else ""
        lines.append(f"[{marker}] {level.identifier}{suffix}")
        for violation in level.violations:
            location = violation.pointer or "/"
            lines.append(
                f"    {location}: {violation.message} [{violation.keyword}]"
            )

    verdict = "valid" if report.passed else "invalid"
    lines.append(f"Document is {verdict} ({' > '.join(report.chain)})")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# schema / types
# ---------------------------------------------------------------------------

@app.command()
def schema(
    document_type: Annotated[
        str,
        typer.Argument(metavar="TYPE", help="Document type identifier."),
    ],
) -> None:
    """Print the JSON Schema of a registered document type."""
    entry = default_registry().resolve(document_type)
    if entry is None:
        raise typer.BadParameter(
            f"Unknown document type '{document_type}'",
            param_hint="TYPE",
        )
    typer.echo(json.dumps(entry.schema_document, indent=2))


@app.command()
def types() -> None:
    """List the registered document types."""
    registry = default_registry()
    for identifier in registry.identifiers():
        entry = registry.resolve(identifier)
        predicate_type = entry.predicate_type_uri or "-"
        typer.echo(f"{identifier}\t{predicate_type}\t{entry.description}")


if __name__ == "__main__":
    app()
