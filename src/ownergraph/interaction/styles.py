"""Pure style resolution for nodes and edges.

An element's visual state is derived from InteractionState every time it
repaints, with precedence hidden > highlighted > selected > hovering > none.
The style dicts are per-element overrides layered on top of the engine's
base stylesheet.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from ownergraph.interaction.selection import InteractionState


class VisualState(Enum):
    NONE = "none"
    HOVERING = "hovering"
    SELECTED = "selected"
    HIGHLIGHTED = "highlighted"
    HIDDEN = "hidden"


HOVER_COLOR = "#58a6ff"
ALERT_COLOR = "#f85149"
EDGE_COLOR = "#30363d"

NODE_STYLES: dict[VisualState, dict[str, Any]] = {
    VisualState.NONE: {"display": "element", "border-width": 2, "overlay-opacity": 0},
    VisualState.HOVERING: {
        "display": "element",
        "border-width": 4,
        "border-color": HOVER_COLOR,
        "overlay-color": HOVER_COLOR,
        "overlay-opacity": 0.2,
    },
    VisualState.SELECTED: {
        "display": "element",
        "border-width": 4,
        "border-color": HOVER_COLOR,
        "overlay-color": HOVER_COLOR,
        "overlay-opacity": 0.2,
    },
    VisualState.HIGHLIGHTED: {
        "display": "element",
        "border-width": 6,
        "border-color": ALERT_COLOR,
        "overlay-color": ALERT_COLOR,
        "overlay-opacity": 0.3,
        "z-index": 999,
    },
    VisualState.HIDDEN: {"display": "none"},
}

EDGE_STYLES: dict[VisualState, dict[str, Any]] = {
    VisualState.NONE: {
        "display": "element",
        "line-color": EDGE_COLOR,
        "target-arrow-color": EDGE_COLOR,
        "width": 2,
        "overlay-opacity": 0,
    },
    VisualState.HOVERING: {
        "display": "element",
        "line-color": HOVER_COLOR,
        "target-arrow-color": HOVER_COLOR,
        "width": 3,
        "overlay-color": HOVER_COLOR,
        "overlay-opacity": 0.2,
    },
    VisualState.SELECTED: {
        "display": "element",
        "line-color": ALERT_COLOR,
        "target-arrow-color": ALERT_COLOR,
        "width": 4,
        "overlay-color": ALERT_COLOR,
        "overlay-opacity": 0.3,
    },
    VisualState.HIGHLIGHTED: {
        "display": "element",
        "line-color": ALERT_COLOR,
        "target-arrow-color": ALERT_COLOR,
        "width": 6,
        "overlay-color": ALERT_COLOR,
        "overlay-opacity": 0.3,
        "z-index": 999,
    },
    VisualState.HIDDEN: {"display": "none"},
}


def visual_state(state: InteractionState, element_id: str) -> VisualState:
    """Resolve which of the visual states an element is in right now."""
    if element_id in state.hidden:
        return VisualState.HIDDEN
    if state.is_highlighted(element_id):
        return VisualState.HIGHLIGHTED
    if state.is_selected(element_id):
        return VisualState.SELECTED
    if state.hovered == element_id:
        return VisualState.HOVERING
    return VisualState.NONE


def style_for(is_node: bool, visual: VisualState) -> dict[str, Any]:
    """Style override for an element kind in a visual state (a fresh copy)."""
    table = NODE_STYLES if is_node else EDGE_STYLES
    return dict(table[visual])
