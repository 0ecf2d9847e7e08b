"""Context menu contents and the graph operations its items trigger.

Menus are plain data. Activating an item is an input event (MenuSelect)
that the reducer turns into commands.
"""

from __future__ import annotations

from dataclasses import dataclass

from ownergraph.graph import ElementGraph
from ownergraph.interaction.selection import HiddenElementsLedger

MENU_MIN_WIDTH = 180.0
MENU_ITEM_HEIGHT = 36.0
MENU_SEPARATOR_HEIGHT = 9.0
MENU_PADDING = 8.0


@dataclass(frozen=True)
class MenuItem:
    id: str
    label: str = ""
    icon: str = ""
    disabled: bool = False
    separator: bool = False

    @property
    def actionable(self) -> bool:
        return not (self.separator or self.disabled)


@dataclass(frozen=True)
class ContextMenu:
    """A context menu ready to display.

    Attributes:
        target_type: "node", "edge" or "background"
        target_id: Element the menu was opened on (None for background)
        position: Viewport position after clamping
        items: Entries top to bottom
    """

    target_type: str
    target_id: str | None
    position: tuple[float, float]
    items: tuple[MenuItem, ...]

    def item(self, item_id: str) -> MenuItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


def _separator(n: int) -> MenuItem:
    return MenuItem(id=f"separator-{n}", separator=True)


def node_menu_items() -> tuple[MenuItem, ...]:
    return (
        MenuItem("view-details", "View Details", "🔍"),
        _separator(1),
        MenuItem("zoom-to-node", "Zoom to Node", "🎯"),
        MenuItem("select-connected", "Select Connected", "🔗"),
        _separator(2),
        MenuItem("hide-node", "Hide Node", "👁️‍🗨️"),
    )


def edge_menu_items() -> tuple[MenuItem, ...]:
    return (
        MenuItem("view-edge-details", "View Edge Details", "🔍"),
        _separator(1),
        MenuItem("select-source-target", "Select Source/Target", "🎯"),
        _separator(2),
        MenuItem("hide-edge", "Hide Edge", "👁️‍🗨️"),
    )


def background_menu_items(hidden: HiddenElementsLedger) -> tuple[MenuItem, ...]:
    return (
        MenuItem("zoom-to-fit", "Zoom to Fit", "🔍"),
        MenuItem("center-graph", "Center Graph", "🎯"),
        _separator(1),
        MenuItem("clear-selections", "Clear Selections", "✖️"),
        _separator(2),
        MenuItem("show-all", "Show All", "👁️", disabled=hidden.is_empty),
    )


def menu_items_for(
    graph: ElementGraph,
    target_id: str | None,
    hidden: HiddenElementsLedger,
) -> tuple[str, tuple[MenuItem, ...]]:
    """Pick the item list by target type. Returns (target_type, items)."""
    if target_id is None:
        return "background", background_menu_items(hidden)
    if graph.is_node(target_id):
        return "node", node_menu_items()
    return "edge", edge_menu_items()


def estimate_menu_size(items: tuple[MenuItem, ...]) -> tuple[float, float]:
    """Rendered (width, height) of a menu, used for viewport clamping."""
    height = MENU_PADDING + sum(
        MENU_SEPARATOR_HEIGHT if item.separator else MENU_ITEM_HEIGHT for item in items
    )
    return MENU_MIN_WIDTH, height


# ---------------------------------------------------------------------------
# Item operations
# ---------------------------------------------------------------------------


def connected_selection(graph: ElementGraph, node_id: str) -> tuple[str, ...]:
    """The node, every edge touching it and every node one hop away."""
    return tuple(graph.neighborhood(node_id))


def source_target_selection(graph: ElementGraph, edge_id: str) -> tuple[str, ...]:
    """The edge together with both of its endpoints."""
    endpoints = graph.endpoints(edge_id)
    if endpoints is None:
        return ()
    return tuple(dict.fromkeys((edge_id, *endpoints)))


def hide_node(
    ledger: HiddenElementsLedger,
    graph: ElementGraph,
    node_id: str,
) -> tuple[HiddenElementsLedger, tuple[str, ...]]:
    """Hide a node and its edges. Returns the new ledger and the affected ids."""
    if not graph.is_node(node_id):
        return ledger, ()
    edge_ids = graph.connected_edges(node_id)
    return ledger.hide_node(node_id, edge_ids), (node_id, *edge_ids)


def hide_edge(
    ledger: HiddenElementsLedger,
    graph: ElementGraph,
    edge_id: str,
) -> tuple[HiddenElementsLedger, tuple[str, ...]]:
    if not graph.is_edge(edge_id):
        return ledger, ()
    return ledger.hide_edge(edge_id), (edge_id,)
