"""
in-toto ResourceDescriptor and DigestSet.

Shared by the SLSA Provenance v1 and SCAI predicate models.
"""

from __future__ import annotations

import base64
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

DigestSet = Dict[str, str]


class ResourceDescriptor(BaseModel):
    """An artifact or resource referenced by URI, digest, or inline content."""

    uri: Optional[str] = None
    digest: Optional[DigestSet] = None
    name: Optional[str] = None
    download_location: Optional[str] = Field(None, alias="downloadLocation")
    media_type: Optional[str] = Field(None, alias="mediaType")
    content: Optional[str] = Field(
        None,
        description="Base64-encoded resource content",
    )
    annotations: Optional[Dict[str, Any]] = None

    def decoded_content(self) -> Optional[bytes]:
        if self.content is None:
            return None
        return base64.b64decode(self.content, validate=True)

    model_config = ConfigDict(frozen=True, populate_by_name=True)
