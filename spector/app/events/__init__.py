from .models import ValidationEvent, ValidationEventType
from .emitter import ValidationEventEmitter, NullEventEmitter
from .memory_emitter import MemoryEventEmitter

__all__ = [
    "ValidationEvent",
    "ValidationEventType",
    "ValidationEventEmitter",
    "NullEventEmitter",
    "MemoryEventEmitter",
]
