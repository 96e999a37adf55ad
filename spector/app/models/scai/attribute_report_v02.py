"""
SCAI (Software Supply Chain Attribute Integrity) attribute report v0.2.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from spector.app.models.intoto.resource_descriptor import ResourceDescriptor

PREDICATE_TYPE_SCAI_V02 = "https://in-toto.io/attestation/scai/attribute-report/v0.2"


class Attribute(BaseModel):
    """A claimed attribute of ``target``, optionally backed by ``evidence``."""

    attribute: str
    target: Optional[ResourceDescriptor] = None
    conditions: Optional[Dict[str, str]] = None
    evidence: Optional[ResourceDescriptor] = None

    model_config = ConfigDict(frozen=True)


class SCAIV02Predicate(BaseModel):
    attributes: List[Attribute]
    producer: Optional[ResourceDescriptor] = None

    model_config = ConfigDict(frozen=True)
