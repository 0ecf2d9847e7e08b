"""Event system for observing graph surface interactions."""

from ownergraph.events.dispatcher import EventDispatcher
from ownergraph.events.processor import (
    EventProcessor,
    LoggingProcessor,
    TypedEventProcessor,
)
from ownergraph.events.types import (
    BaseEvent,
    ElementsHiddenEvent,
    ElementTapEvent,
    Event,
    OverlayClosedEvent,
    OverlayOpenedEvent,
    SelectionChangedEvent,
    ShortcutEvent,
    SurfaceErrorEvent,
    SurfaceMountedEvent,
    SurfaceUnmountedEvent,
)

__all__ = [
    # Event types
    "BaseEvent",
    "ElementTapEvent",
    "ElementsHiddenEvent",
    "Event",
    "OverlayClosedEvent",
    "OverlayOpenedEvent",
    "SelectionChangedEvent",
    "ShortcutEvent",
    "SurfaceErrorEvent",
    "SurfaceMountedEvent",
    "SurfaceUnmountedEvent",
    # Processor interfaces
    "EventProcessor",
    "LoggingProcessor",
    "TypedEventProcessor",
    # Dispatcher
    "EventDispatcher",
]
