"""
Built-in document types.

The supported schemas ship as package data beside this module and are
registered once per process. A schema that fails to load makes only its
own document type unavailable.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict

from spector.app.errors import SchemaError
from spector.app.models.intoto.statement import InTotoStatementV1
from spector.app.models.scai.attribute_report_v02 import (
    PREDICATE_TYPE_SCAI_V02,
    SCAIV02Predicate,
)
from spector.app.models.slsa.provenance_v02 import (
    PREDICATE_TYPE_V02,
    SLSAProvenanceV02Predicate,
)
from spector.app.models.slsa.provenance_v1 import (
    PREDICATE_TYPE_V1,
    SLSAProvenanceV1Predicate,
)
from spector.app.registry.registry import SchemaRegistry

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent / "documents"


class BuiltinDocumentType(BaseModel):
    identifier: str
    schema_file: str
    decoder: Type[BaseModel]
    predicate_type_uri: Optional[str] = None
    description: str

    model_config = ConfigDict(frozen=True)


BUILTIN_DOCUMENT_TYPES: Tuple[BuiltinDocumentType, ...] = (
    BuiltinDocumentType(
        identifier="in-toto-v1",
        schema_file="in_toto_statement_v1.schema.json",
        decoder=InTotoStatementV1,
        description="in-toto attestation Statement v1",
    ),
    BuiltinDocumentType(
        identifier="slsa-provenance-v1",
        schema_file="slsa_provenance_v1.schema.json",
        decoder=SLSAProvenanceV1Predicate,
        predicate_type_uri=PREDICATE_TYPE_V1,
        description="SLSA Provenance v1 predicate",
    ),
    BuiltinDocumentType(
        identifier="slsa-provenance-v02",
        schema_file="slsa_provenance_v02.schema.json",
        decoder=SLSAProvenanceV02Predicate,
        predicate_type_uri=PREDICATE_TYPE_V02,
        description="SLSA Provenance v0.2 predicate",
    ),
    BuiltinDocumentType(
        identifier="scai-attribute-report-v02",
        schema_file="scai_attribute_report_v02.schema.json",
        decoder=SCAIV02Predicate,
        predicate_type_uri=PREDICATE_TYPE_SCAI_V02,
        description="SCAI attribute report v0.2 predicate",
    ),
)


def build_default_registry(
    document_types: Tuple[BuiltinDocumentType, ...] = BUILTIN_DOCUMENT_TYPES,
    schema_dir: Path = SCHEMA_DIR,
) -> SchemaRegistry:
    """
    Register every built-in document type and freeze the registry.
    """
    registry = SchemaRegistry()

    for doc_type in document_types:
        try:
            schema_text = (schema_dir / doc_type.schema_file).read_text(
                encoding="utf-8"
            )
            registry.register(
                doc_type.identifier,
                schema_text,
                predicate_type_uri=doc_type.predicate_type_uri,
                decoder=doc_type.decoder,
                description=doc_type.description,
            )
        except (OSError, SchemaError) as exc:
            logger.error(
                "Document type %s is unavailable: %s",
                doc_type.identifier,
                exc,
            )
            registry.mark_unavailable(doc_type.identifier, str(exc))

    registry.freeze()
    logger.info(
        "Schema registry ready: %s", ", ".join(registry.identifiers())
    )
    return registry


@lru_cache(maxsize=1)
def default_registry() -> SchemaRegistry:
    """Process-wide registry of the built-in document types."""
    return build_default_registry()
