"""Structured events emitted by a graph surface."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field


def _generate_span_id() -> str:
    """Generate a unique span ID."""
    return uuid.uuid4().hex[:16]


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class BaseEvent:
    """Base class for all surface events.

    Attributes:
        surface_id: Identifier of the surface that produced this event.
        span_id: Unique identifier for this event.
        timestamp: Unix timestamp when the event was created.
    """

    surface_id: str = ""
    span_id: str = field(default_factory=_generate_span_id)
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class SurfaceMountedEvent(BaseEvent):
    """Emitted after new data is rendered (or an empty canvas is shown).

    Attributes:
        node_count: Valid nodes rendered.
        edge_count: Valid edges rendered.
        dropped_count: Records filtered out by validation.
        generation: How many times the surface has received data.
    """

    node_count: int = 0
    edge_count: int = 0
    dropped_count: int = 0
    generation: int = 0


@dataclass(frozen=True)
class SurfaceErrorEvent(BaseEvent):
    """Emitted when the rendering engine fails.

    Attributes:
        error: Error message.
        error_type: Exception type name of the engine failure.
    """

    error: str = ""
    error_type: str = ""


@dataclass(frozen=True)
class SurfaceUnmountedEvent(BaseEvent):
    """Emitted once when the surface is torn down."""

    generation: int = 0


@dataclass(frozen=True)
class ElementTapEvent(BaseEvent):
    """Emitted for every primary tap on a node or edge.

    Attributes:
        element_id: Tapped element.
        element_kind: "node" or "edge".
        multi_select: Whether Ctrl/Meta was held.
    """

    element_id: str = ""
    element_kind: str = ""
    multi_select: bool = False


@dataclass(frozen=True)
class SelectionChangedEvent(BaseEvent):
    """Emitted when the selection set changes.

    Attributes:
        selected: Selected ids after the change.
        cause: Action that changed it (tap, background-tap, escape, ...).
    """

    selected: tuple[str, ...] = ()
    cause: str = ""


@dataclass(frozen=True)
class OverlayOpenedEvent(BaseEvent):
    """Emitted when an overlay panel is attached.

    Attributes:
        kind: Overlay kind value (node-info, edge-info, ...).
        replaced: Whether a live panel of the same kind was replaced.
    """

    kind: str = ""
    replaced: bool = False


@dataclass(frozen=True)
class OverlayClosedEvent(BaseEvent):
    """Emitted when an overlay panel is detached.

    Attributes:
        kind: Overlay kind value.
        reason: Why it closed (timeout, panel-click, outside-click, escape, ...).
    """

    kind: str = ""
    reason: str = ""


@dataclass(frozen=True)
class ShortcutEvent(BaseEvent):
    """Emitted when a keyboard shortcut fires.

    Attributes:
        action: Human-readable action name.
        key: Key as reported by the host.
    """

    action: str = ""
    key: str = ""


@dataclass(frozen=True)
class ElementsHiddenEvent(BaseEvent):
    """Emitted when elements are hidden or shown again.

    Attributes:
        element_ids: Affected ids.
        hidden: True when hiding, False when restoring.
    """

    element_ids: tuple[str, ...] = ()
    hidden: bool = True


Event = (
    SurfaceMountedEvent
    | SurfaceErrorEvent
    | SurfaceUnmountedEvent
    | ElementTapEvent
    | SelectionChangedEvent
    | OverlayOpenedEvent
    | OverlayClosedEvent
    | ShortcutEvent
    | ElementsHiddenEvent
)
