"""Input events delivered to a graph surface.

One physical user action maps to exactly one of these. The host translates
its native events (DOM, Qt, a test script) into this vocabulary and calls
``GraphSurface.handle``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ownergraph.overlays import OverlayKind, PanelPart


class FocusTarget(Enum):
    """What currently holds keyboard focus in the host."""

    NONE = "none"
    TEXT_INPUT = "text-input"
    TEXT_AREA = "text-area"
    CONTENT_EDITABLE = "content-editable"
    OTHER = "other"


TEXT_ENTRY_FOCUS = frozenset({FocusTarget.TEXT_INPUT, FocusTarget.TEXT_AREA, FocusTarget.CONTENT_EDITABLE})


@dataclass(frozen=True)
class HoverEnter:
    element_id: str


@dataclass(frozen=True)
class HoverLeave:
    element_id: str


@dataclass(frozen=True)
class Tap:
    """Primary tap on a node or edge."""

    element_id: str
    ctrl: bool = False
    meta: bool = False


@dataclass(frozen=True)
class DoubleTap:
    element_id: str


@dataclass(frozen=True)
class ContextTap:
    """Secondary tap (context-menu trigger) on a node or edge.

    ``x``/``y`` are viewport (client) coordinates of the pointer.
    """

    element_id: str
    x: float
    y: float


@dataclass(frozen=True)
class BackgroundTap:
    """Primary tap whose target is the surface itself."""


@dataclass(frozen=True)
class BackgroundContextTap:
    x: float
    y: float


@dataclass(frozen=True)
class KeyPress:
    """A key event. ``key`` uses DOM ``KeyboardEvent.key`` names."""

    key: str
    ctrl: bool = False
    meta: bool = False
    focus: FocusTarget = FocusTarget.NONE


@dataclass(frozen=True)
class MenuSelect:
    """An item of the open context menu was activated."""

    item_id: str


@dataclass(frozen=True)
class PanelClick:
    """A click that landed on an overlay panel."""

    kind: OverlayKind
    part: PanelPart = PanelPart.BODY


@dataclass(frozen=True)
class DocumentClick:
    """A click outside the surface and outside every overlay."""


@dataclass(frozen=True)
class HighlightExpired:
    """Internal: the temporary highlight identified by ``token`` ran out."""

    element_id: str
    token: int


PointerEvent = HoverEnter | HoverLeave | Tap | DoubleTap | ContextTap | BackgroundTap | BackgroundContextTap

InputEvent = PointerEvent | KeyPress | MenuSelect | PanelClick | DocumentClick | HighlightExpired


def is_multi_select(event: Tap | KeyPress) -> bool:
    """True when Ctrl or Meta was held: the single modifier predicate."""
    return bool(event.ctrl or event.meta)


def is_text_entry(focus: FocusTarget) -> bool:
    """True when focus is somewhere the user is typing text."""
    return focus in TEXT_ENTRY_FOCUS
