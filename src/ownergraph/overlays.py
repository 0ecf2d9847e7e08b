"""Transient UI surfaces: info panels, context menu, expanded modal, keyboard toast.

An OverlayManager belongs to one graph surface. It keeps at most one live
panel per kind, each attached to the host under a fixed well-known key, and
owns the auto-dismiss timers of those panels.

Dismiss rules per kind:

    kind              timeout  panel click         outside click  Escape
    node-info         10s      anywhere on panel   yes            yes
    edge-info         10s      anywhere on panel   yes            yes
    context-menu      -        (items only)        yes            yes
    expanded-modal    -        backdrop or close   -              yes
    keyboard-feedback 1.5s     anywhere on panel   yes            -

Node-info and edge-info are mutually exclusive.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Protocol

from ownergraph.config import InteractionTimings, ViewportSize
from ownergraph.events.types import OverlayClosedEvent, OverlayOpenedEvent
from ownergraph.exceptions import OverlaySurfaceUnavailableError
from ownergraph.timers import Scheduler, TimerGroup

if TYPE_CHECKING:
    from ownergraph.elements import EdgeElement, NodeElement, RenderableElement
    from ownergraph.events.types import Event
    from ownergraph.graph import ElementGraph

logger = logging.getLogger(__name__)


class OverlayKind(Enum):
    NODE_INFO = "node-info"
    EDGE_INFO = "edge-info"
    CONTEXT_MENU = "context-menu"
    EXPANDED_MODAL = "expanded-modal"
    KEYBOARD_TOAST = "keyboard-feedback"

    @property
    def key(self) -> str:
        """Well-known identifier the panel is attached under."""
        return _WELL_KNOWN_KEYS[self]


_WELL_KNOWN_KEYS = {
    OverlayKind.NODE_INFO: "node-info-display",
    OverlayKind.EDGE_INFO: "edge-info-display",
    OverlayKind.CONTEXT_MENU: "context-menu",
    OverlayKind.EXPANDED_MODAL: "expanded-modal",
    OverlayKind.KEYBOARD_TOAST: "keyboard-feedback",
}


class PanelPart(Enum):
    """Region of a panel a click landed on."""

    BODY = "body"
    BACKDROP = "backdrop"
    CLOSE = "close"


_EXCLUSIVE = {
    OverlayKind.NODE_INFO: OverlayKind.EDGE_INFO,
    OverlayKind.EDGE_INFO: OverlayKind.NODE_INFO,
}


@dataclass(frozen=True)
class DismissPolicy:
    """How a panel kind goes away on its own.

    Attributes:
        timeout: Name of the InteractionTimings field holding the delay, or None
        outside_click: Whether a click elsewhere dismisses it (once)
        closing_parts: Panel parts whose click dismisses it
    """

    timeout: str | None
    outside_click: bool
    closing_parts: frozenset[PanelPart]


_ALL_PARTS = frozenset(PanelPart)

POLICIES: dict[OverlayKind, DismissPolicy] = {
    OverlayKind.NODE_INFO: DismissPolicy("info_panel", True, _ALL_PARTS),
    OverlayKind.EDGE_INFO: DismissPolicy("info_panel", True, _ALL_PARTS),
    OverlayKind.CONTEXT_MENU: DismissPolicy(None, True, frozenset()),
    OverlayKind.EXPANDED_MODAL: DismissPolicy(None, False, frozenset({PanelPart.BACKDROP, PanelPart.CLOSE})),
    OverlayKind.KEYBOARD_TOAST: DismissPolicy("toast", True, _ALL_PARTS),
}


@dataclass
class OverlayPanel:
    """A live overlay instance.

    Attributes:
        kind: Which singleton slot it occupies
        payload: What it shows (NodeInfo, EdgeInfo, ContextMenu, ...)
        created_at: Unix timestamp of creation
        dismiss_after: Auto-dismiss delay in seconds, or None
    """

    kind: OverlayKind
    payload: Any
    created_at: float = field(default_factory=time.time)
    dismiss_after: float | None = None

    @property
    def key(self) -> str:
        return self.kind.key


# ---------------------------------------------------------------------------
# Hosts
# ---------------------------------------------------------------------------


class OverlayHost(Protocol):
    """Where panels are physically shown.

    ``attach`` raises OverlaySurfaceUnavailableError when there is nowhere to
    put a panel; the manager then treats the open as a no-op.
    """

    def attach(self, panel: OverlayPanel) -> None: ...

    def detach(self, panel: OverlayPanel) -> None: ...


class InMemoryOverlayHost:
    """Keeps attached panels in a dict keyed by their well-known identifier."""

    def __init__(self) -> None:
        self.attached: dict[str, OverlayPanel] = {}

    def attach(self, panel: OverlayPanel) -> None:
        self.attached[panel.key] = panel

    def detach(self, panel: OverlayPanel) -> None:
        if self.attached.get(panel.key) is panel:
            del self.attached[panel.key]


class HeadlessOverlayHost:
    """A host with no UI surface at all: every attach is refused."""

    def attach(self, panel: OverlayPanel) -> None:
        raise OverlaySurfaceUnavailableError(f"No surface to attach '{panel.key}' to")

    def detach(self, panel: OverlayPanel) -> None:
        pass


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------


class OverlayManager:
    """Opens, replaces and dismisses overlay panels, one per kind."""

    def __init__(
        self,
        scheduler: Scheduler,
        host: OverlayHost | None = None,
        timings: InteractionTimings | None = None,
        *,
        emit: Callable[[Event], None] | None = None,
        surface_id: str = "",
    ) -> None:
        self._host: OverlayHost = host if host is not None else InMemoryOverlayHost()
        self._timings = timings or InteractionTimings()
        self._timers = TimerGroup(scheduler)
        self._emit = emit
        self._surface_id = surface_id
        self._panels: dict[OverlayKind, OverlayPanel] = {}
        self._timer_keys: dict[OverlayKind, int] = {}
        self._outside_listeners: set[OverlayKind] = set()

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    def get(self, kind: OverlayKind) -> OverlayPanel | None:
        return self._panels.get(kind)

    def is_open(self, kind: OverlayKind) -> bool:
        return kind in self._panels

    def panels(self) -> list[OverlayPanel]:
        return list(self._panels.values())

    def open(self, kind: OverlayKind, payload: Any) -> OverlayPanel | None:
        """Show a panel, replacing any live panel of the same kind.

        Returns:
            The new panel, or None if the host has no surface to attach to.
        """
        replaced = self._discard(kind)
        exclusive = _EXCLUSIVE.get(kind)
        if exclusive is not None:
            self.close(exclusive, reason="exclusive")

        policy = POLICIES[kind]
        delay = getattr(self._timings, policy.timeout) if policy.timeout else None
        panel = OverlayPanel(kind=kind, payload=payload, dismiss_after=delay)
        try:
            self._host.attach(panel)
        except OverlaySurfaceUnavailableError as exc:
            logger.debug("Overlay %s not shown: %s", kind.value, exc)
            return None

        self._panels[kind] = panel
        if delay is not None:
            self._timer_keys[kind] = self._timers.call_later(delay, lambda: self._expire(panel))
        if policy.outside_click:
            self._outside_listeners.add(kind)
        self._notify(OverlayOpenedEvent(surface_id=self._surface_id, kind=kind.value, replaced=replaced))
        return panel

    def close(self, kind: OverlayKind, reason: str = "closed") -> bool:
        """Remove the live panel of this kind. Returns False if none was open."""
        if not self._discard(kind):
            return False
        self._notify(OverlayClosedEvent(surface_id=self._surface_id, kind=kind.value, reason=reason))
        return True

    def close_all(self, reason: str = "closed") -> None:
        for kind in list(self._panels):
            self.close(kind, reason=reason)
        self._timers.cancel_all()

    def click_panel(self, kind: OverlayKind, part: PanelPart = PanelPart.BODY) -> bool:
        """A click landed on a panel; dismiss it if its policy says so."""
        if kind not in self._panels or part not in POLICIES[kind].closing_parts:
            return False
        return self.close(kind, reason="panel-click")

    def click_outside(self, source: OverlayKind | None = None) -> list[OverlayKind]:
        """A click landed somewhere other than ``source``.

        Every armed outside-click listener fires once and is removed.

        Returns:
            The kinds that were dismissed.
        """
        fired = [kind for kind in self._panels if kind in self._outside_listeners and kind != source]
        for kind in fired:
            self._outside_listeners.discard(kind)
            self.close(kind, reason="outside-click")
        return fired

    def _expire(self, panel: OverlayPanel) -> None:
        if self._panels.get(panel.kind) is panel:
            self._timer_keys.pop(panel.kind, None)
            self.close(panel.kind, reason="timeout")

    def _discard(self, kind: OverlayKind) -> bool:
        panel = self._panels.pop(kind, None)
        self._timers.cancel(self._timer_keys.pop(kind, None))
        self._outside_listeners.discard(kind)
        if panel is None:
            return False
        self._host.detach(panel)
        return True

    def _notify(self, event: Event) -> None:
        if self._emit is not None:
            self._emit(event)


# ---------------------------------------------------------------------------
# Positioning
# ---------------------------------------------------------------------------


def clamp_menu_position(
    position: tuple[float, float],
    size: tuple[float, float],
    viewport: ViewportSize,
    margin: float = 10.0,
) -> tuple[float, float]:
    """Keep a menu inside the viewport, each axis independently.

    A menu whose far edge would overflow is shifted inward by the overflow
    plus ``margin``, but never past ``margin`` from the top-left edge, so a
    menu larger than the viewport still starts on screen.
    """
    x, y = position
    width, height = size
    if x + width > viewport.width:
        x = max(viewport.width - width - margin, margin)
    if y + height > viewport.height:
        y = max(viewport.height - height - margin, margin)
    return x, y


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

RELATIONSHIP_LABELS = {
    "owns": "Owns",
    "member_of": "Member Of",
    "codeowner": "Code Owner",
    "maintained_by": "Maintained By",
    "has_topic": "Has Topic",
    "has": "Has",
}

NODE_TYPE_LABELS = {
    "organization": "Organization",
    "repository": "Repository",
    "team": "Team",
    "user": "User",
    "topic": "Topic",
}


def relationship_label(edge_type: str) -> str:
    return RELATIONSHIP_LABELS.get(edge_type, edge_type)


def node_type_label(node_type: str) -> str:
    return NODE_TYPE_LABELS.get(node_type, node_type)


@dataclass(frozen=True)
class NodeInfo:
    id: str
    type: str
    type_label: str
    label: str
    data: dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def data_count(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class EndpointInfo:
    id: str
    label: str
    type: str


@dataclass(frozen=True)
class EdgeInfo:
    id: str
    relationship: str
    relationship_label: str
    label: str
    source: EndpointInfo
    target: EndpointInfo


@dataclass(frozen=True)
class ExpandedDetails:
    """Content of the expanded modal.

    ``incoming``/``outgoing`` partition the edges touching a node; both are
    empty for edges.
    """

    element_id: str
    kind: str
    title: str
    data: dict[str, Any] = field(default_factory=dict, hash=False)
    incoming: tuple[EdgeInfo, ...] = ()
    outgoing: tuple[EdgeInfo, ...] = ()


@dataclass(frozen=True)
class KeyboardToast:
    action: str
    key: str

    @property
    def text(self) -> str:
        return f"{self.action} ({self.key})"


def node_info(node: NodeElement) -> NodeInfo:
    return NodeInfo(
        id=node.id,
        type=node.type,
        type_label=node_type_label(node.type),
        label=node.label,
        data=dict(node.data),
    )


def _endpoint(graph: ElementGraph, node_id: str) -> EndpointInfo:
    node = graph.element(node_id)
    return EndpointInfo(id=node_id, label=node.label, type=node.type)


def edge_info(edge: EdgeElement, graph: ElementGraph) -> EdgeInfo:
    return EdgeInfo(
        id=edge.id,
        relationship=edge.type,
        relationship_label=relationship_label(edge.type),
        label=edge.label or "No label",
        source=_endpoint(graph, edge.source),
        target=_endpoint(graph, edge.target),
    )


def expanded_details(element: RenderableElement, graph: ElementGraph) -> ExpandedDetails:
    """Full data of an element; for nodes, connected edges split by direction."""
    if element.is_node:
        return ExpandedDetails(
            element_id=element.id,
            kind="node",
            title=f"{node_type_label(element.type)}: {element.label}",
            data={"id": element.id, "type": element.type, "label": element.label, **element.data},
            incoming=tuple(edge_info(e, graph) for e in graph.incoming(element.id)),
            outgoing=tuple(edge_info(e, graph) for e in graph.outgoing(element.id)),
        )
    return ExpandedDetails(
        element_id=element.id,
        kind="edge",
        title=f"{relationship_label(element.type)}: {element.source} -> {element.target}",
        data={
            "id": element.id,
            "type": element.type,
            "label": element.label,
            "source": element.source,
            "target": element.target,
        },
    )
