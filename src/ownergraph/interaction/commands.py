"""Side effects requested by the reducer and carried out by the surface.

For one user action the reducer emits commands in a fixed order:
stop-propagation, temporary highlight, (selection already applied to state),
restyle, overlay updates, viewport changes, then events to log.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ownergraph.events.types import BaseEvent
from ownergraph.overlays import OverlayKind, PanelPart


@dataclass(frozen=True)
class StopPropagation:
    """The event was consumed by an element; the background must not see it."""


@dataclass(frozen=True)
class ScheduleHighlightRevert:
    element_id: str
    token: int


@dataclass(frozen=True)
class Restyle:
    """Recompute the style of these elements from the current state."""

    element_ids: tuple[str, ...]


@dataclass(frozen=True)
class DismissOutside:
    """Fire outside-click listeners of every panel except ``source``."""

    source: OverlayKind | None = None


@dataclass(frozen=True)
class ClickPanel:
    kind: OverlayKind
    part: PanelPart


@dataclass(frozen=True)
class OpenOverlay:
    kind: OverlayKind
    payload: Any


@dataclass(frozen=True)
class CloseOverlay:
    kind: OverlayKind
    reason: str = "closed"


@dataclass(frozen=True)
class PanBy:
    dx: float
    dy: float


@dataclass(frozen=True)
class ZoomBy:
    """Multiply the zoom level by ``factor``, clamped to the configured bounds."""

    factor: float


@dataclass(frozen=True)
class ResetZoom:
    """Zoom to 1.0 and recenter."""


@dataclass(frozen=True)
class Fit:
    """Fit the viewport to ``element_ids`` (every element if None)."""

    element_ids: tuple[str, ...] | None
    padding: float


@dataclass(frozen=True)
class Center:
    element_ids: tuple[str, ...] | None = None


@dataclass(frozen=True)
class Emit:
    event: BaseEvent


Command = (
    StopPropagation
    | ScheduleHighlightRevert
    | Restyle
    | DismissOutside
    | ClickPanel
    | OpenOverlay
    | CloseOverlay
    | PanBy
    | ZoomBy
    | ResetZoom
    | Fit
    | Center
    | Emit
)
