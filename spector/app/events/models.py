from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# ----------------------------------------------------------------------
# Event Types
# ----------------------------------------------------------------------
class ValidationEventType(str, Enum):
    """
    Progression events emitted while a validation chain runs.

    New entries must preserve observational semantics.
    """

    VALIDATION_STARTED = "validation_started"
    VALIDATION_COMPLETED = "validation_completed"

    LEVEL_STARTED = "level_started"
    LEVEL_COMPLETED = "level_completed"
    LEVEL_SKIPPED = "level_skipped"


# ----------------------------------------------------------------------
# Event Model
# ----------------------------------------------------------------------
class ValidationEvent(BaseModel):
    """
    An immutable observation of a validation chain transition.

    Events are observational only and never part of the report.
    """

    event_id: UUID = Field(default_factory=uuid4)
    validation_id: str = Field(..., description="Identifier of the run")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    event_type: ValidationEventType

    # Level index, identifier, status, violation counts
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
