"""
in-toto Statement v1 typed model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List

from pydantic import BaseModel, ConfigDict, Field

from spector.app.models.intoto.predicate import Predicate, resolve_predicate
from spector.app.models.intoto.resource_descriptor import DigestSet

if TYPE_CHECKING:
    from spector.app.registry.registry import SchemaRegistry

STATEMENT_TYPE_V1 = "https://in-toto.io/Statement/v1"


class Subject(BaseModel):
    name: str
    digest: DigestSet

    model_config = ConfigDict(frozen=True)


class InTotoStatementV1(BaseModel):
    """
    in-toto attestation Statement.

    ``predicate`` is kept as the raw JSON value; its typed form depends on
    ``predicate_type`` and is resolved with ``resolve_predicate``.
    """

    type: str = Field(STATEMENT_TYPE_V1, alias="_type")
    subject: List[Subject] = Field(..., min_length=1)
    predicate_type: str = Field(..., alias="predicateType")
    predicate: Any

    def resolve_predicate(self, registry: "SchemaRegistry") -> Predicate:
        return resolve_predicate(self.predicate_type, self.predicate, registry)

    model_config = ConfigDict(frozen=True, populate_by_name=True)
