"""
FastAPI entrypoint for spector.

Exposes the validation chain engine over HTTP. A request carries the raw
JSON document as its body and the chain of document types as repeated
``chain`` query parameters. Validation failures are reported in the body
of a 200 response; only unusable requests produce HTTP errors.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Annotated, Any, AsyncIterator, List
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from spector.app.config import SpectorConfig, configure_logging
from spector.app.events import MemoryEventEmitter
from spector.app.registry.builtin import default_registry
from spector.app.schemas.validation_report import ValidationReport
from spector.app.validation.chain import ValidationChainEngine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Presentation helpers (presentation-only)
# ---------------------------------------------------------------------------

def pretty_json(data: Any) -> str:
    return json.dumps(
        data,
        ensure_ascii=False,
        allow_nan=False,
        indent=2,
        separators=(", ", ": "),
    )


class PrettyJSONResponse(Response):
    """Pretty-printed JSON response for human-readable console output."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        return pretty_json(content).encode("utf-8")


# ---------------------------------------------------------------------------
# Startup / Shutdown
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Configuration and the schema registry are loaded once and treated as
    immutable for the lifetime of the process.
    """
    config = SpectorConfig.from_env()
    configure_logging(config)

    app.state.config = config
    app.state.engine = ValidationChainEngine(
        registry=default_registry(),
        config=config,
    )
    logger.info("spector service started")
    yield


app = FastAPI(
    title="Spector Service",
    description="Schema validation for in-toto attestations and their predicates",
    version="0.1.0",
    lifespan=lifespan,
)


async def _read_document(request: Request) -> bytes:
    raw_bytes = await request.body()

    if not raw_bytes:
        raise HTTPException(
            status_code=400,
            detail="Request body is empty",
        )

    # ------------------------------------------------------------------
    # Hard resource safety limits
    # ------------------------------------------------------------------
    config: SpectorConfig = request.app.state.config
    if len(raw_bytes) > config.max_document_bytes:
        raise HTTPException(
            status_code=413,
            detail=(
                f"Document exceeds maximum allowed size of "
                f"{config.MAX_DOCUMENT_SIZE_MB} MB"
            ),
        )

    return raw_bytes


ChainQuery = Annotated[
    List[str],
    Query(
        min_length=1,
        description="Document type identifiers, outermost first",
    ),
]


# ---------------------------------------------------------------------------
# API Routes
# ---------------------------------------------------------------------------

@app.post(
    "/validate",
    response_model=ValidationReport,
    response_class=PrettyJSONResponse,
    summary="Validate a document against a chain of document types",
)
async def validate_document(
    request: Request,
    chain: ChainQuery,
) -> ValidationReport:
    raw_bytes = await _read_document(request)
    engine: ValidationChainEngine = request.app.state.engine
    return await run_in_threadpool(engine.validate_chain, raw_bytes, chain)


@app.post(
    "/validate/trace",
    response_class=PrettyJSONResponse,
    summary="Validate a document and return the progression events",
)
async def validate_document_trace(
    request: Request,
    chain: ChainQuery,
) -> dict:
    """
    Same as ``/validate`` but also returns every event observed during
    the run. Events are observational and not part of the report.
    """
    raw_bytes = await _read_document(request)
    engine: ValidationChainEngine = request.app.state.engine
    emitter = MemoryEventEmitter()

    validated = await run_in_threadpool(
        lambda: engine.validate_document(
            raw_bytes,
            chain,
            emitter=emitter,
            validation_id=str(uuid4()),
        )
    )

    return {
        "report": validated.report.model_dump(mode="json"),
        "events": [event.model_dump(mode="json") for event in emitter],
    }


@app.get(
    "/schemas",
    summary="List registered document types",
)
def list_schemas(request: Request) -> JSONResponse:
    registry = request.app.state.engine.registry
    return JSONResponse(
        content=[
            {
                "identifier": entry.identifier,
                "predicate_type": entry.predicate_type_uri,
                "description": entry.description,
            }
            for entry in registry.entries.values()
        ]
    )


@app.get(
    "/schemas/{identifier}",
    response_class=PrettyJSONResponse,
    summary="Return the JSON Schema of a document type",
)
def get_schema(identifier: str, request: Request) -> Any:
    entry = request.app.state.engine.registry.resolve(identifier)
    if entry is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown document type '{identifier}'",
        )
    return entry.schema_document


# ---------------------------------------------------------------------------
# Health Check
# ---------------------------------------------------------------------------

@app.get(
    "/health",
    summary="Service health check",
)
def health_check() -> JSONResponse:
    """Simple health check endpoint."""
    return JSONResponse(
        content={
            "status": "ok",
            "service": "spector",
        }
    )
