from __future__ import annotations

from typing import Protocol

from spector.app.events.models import ValidationEvent


class ValidationEventEmitter(Protocol):
    """
    Interface for broadcasting validation observations.

    Implementations must be:
    - non-blocking
    - fail-safe (emission failures must not change the report)
    - observational only
    """

    def emit(self, event: ValidationEvent) -> None:
        ...


class NullEventEmitter:
    """A no-op emitter, used when nobody is listening."""

    def emit(self, event: ValidationEvent) -> None:
        return
