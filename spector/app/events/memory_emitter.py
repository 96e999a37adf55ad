from __future__ import annotations

import logging
from typing import Iterator, List

from spector.app.events.emitter import ValidationEventEmitter
from spector.app.events.models import ValidationEvent, ValidationEventType

logger = logging.getLogger(__name__)


class MemoryEventEmitter(ValidationEventEmitter):
    """
    In-memory emitter collecting events in emission order.

    Stops accepting events once a run has completed.
    """

    def __init__(self) -> None:
        self._events: List[ValidationEvent] = []
        self._closed = False

    def emit(self, event: ValidationEvent) -> None:
        if self._closed:
            logger.debug("Dropping %s after close", event.event_type.value)
            return

        self._events.append(event)

        if event.event_type == ValidationEventType.VALIDATION_COMPLETED:
            self.close()

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def events(self) -> List[ValidationEvent]:
        return list(self._events)

    def __iter__(self) -> Iterator[ValidationEvent]:
        return iter(list(self._events))
