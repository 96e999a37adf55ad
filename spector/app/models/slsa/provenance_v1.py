"""
SLSA Provenance v1 predicate model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from spector.app.models.intoto.resource_descriptor import ResourceDescriptor

PREDICATE_TYPE_V1 = "https://slsa.dev/provenance/v1"


class BuildDefinition(BaseModel):
    build_type: str = Field(..., alias="buildType")
    external_parameters: Dict[str, Any] = Field(
        ..., alias="externalParameters"
    )
    internal_parameters: Optional[Dict[str, Any]] = Field(
        None, alias="internalParameters"
    )
    resolved_dependencies: List[ResourceDescriptor] = Field(
        default_factory=list, alias="resolvedDependencies"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Builder(BaseModel):
    id: str
    builder_dependencies: List[ResourceDescriptor] = Field(
        default_factory=list, alias="builderDependencies"
    )
    version: Optional[str] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class BuildMetadata(BaseModel):
    invocation_id: Optional[str] = Field(None, alias="invocationId")
    started_on: Optional[datetime] = Field(None, alias="startedOn")
    finished_on: Optional[datetime] = Field(None, alias="finishedOn")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class RunDetails(BaseModel):
    builder: Builder
    metadata: Optional[BuildMetadata] = None
    byproducts: List[ResourceDescriptor] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class SLSAProvenanceV1Predicate(BaseModel):
    """Describes how an artifact was built: what ran, and on which builder."""

    build_definition: BuildDefinition = Field(..., alias="buildDefinition")
    run_details: RunDetails = Field(..., alias="runDetails")

    model_config = ConfigDict(frozen=True, populate_by_name=True)
