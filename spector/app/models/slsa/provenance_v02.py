"""
SLSA Provenance v0.2 predicate model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from spector.app.models.intoto.resource_descriptor import DigestSet

PREDICATE_TYPE_V02 = "https://slsa.dev/provenance/v0.2"


class Builder(BaseModel):
    id: str

    model_config = ConfigDict(frozen=True)


class ConfigSource(BaseModel):
    uri: Optional[str] = None
    digest: Optional[DigestSet] = None
    entry_point: Optional[str] = Field(None, alias="entryPoint")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Invocation(BaseModel):
    config_source: Optional[ConfigSource] = Field(None, alias="configSource")
    parameters: Optional[Dict[str, Any]] = None
    environment: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Completeness(BaseModel):
    parameters: Optional[bool] = None
    environment: Optional[bool] = None
    materials: Optional[bool] = None

    model_config = ConfigDict(frozen=True)


class BuildMetadata(BaseModel):
    invocation_id: Optional[str] = Field(None, alias="buildInvocationId")
    started_on: Optional[datetime] = Field(None, alias="buildStartedOn")
    finished_on: Optional[datetime] = Field(None, alias="buildFinishedOn")
    completeness: Optional[Completeness] = None
    reproducible: Optional[bool] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Material(BaseModel):
    uri: Optional[str] = None
    digest: Optional[DigestSet] = None

    model_config = ConfigDict(frozen=True)


class SLSAProvenanceV02Predicate(BaseModel):
    builder: Builder
    build_type: str = Field(..., alias="buildType")
    invocation: Optional[Invocation] = None
    build_config: Optional[Dict[str, Any]] = Field(None, alias="buildConfig")
    metadata: Optional[BuildMetadata] = None
    materials: List[Material] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True)
