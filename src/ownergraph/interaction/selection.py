"""Selection, hover, temporary-highlight and hidden-element state.

All state is immutable; every transition returns a new value. The reducer
composes these helpers and the surface keeps the latest InteractionState.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class HiddenElementsLedger:
    """Ids hidden by user action, so "show all" can restore them.

    Purely a view concern: validated elements are never touched.
    """

    nodes: tuple[str, ...] = ()
    edges: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def __contains__(self, element_id: object) -> bool:
        return element_id in self.nodes or element_id in self.edges

    def all_ids(self) -> tuple[str, ...]:
        return self.nodes + self.edges

    def hide_node(self, node_id: str, edge_ids: Iterable[str]) -> HiddenElementsLedger:
        """Record a node together with the edges touching it."""
        return HiddenElementsLedger(
            nodes=_append_unique(self.nodes, [node_id]),
            edges=_append_unique(self.edges, edge_ids),
        )

    def hide_edge(self, edge_id: str) -> HiddenElementsLedger:
        return HiddenElementsLedger(nodes=self.nodes, edges=_append_unique(self.edges, [edge_id]))


def _append_unique(existing: tuple[str, ...], new: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys([*existing, *new]))


@dataclass(frozen=True)
class InteractionState:
    """Everything the interaction layer remembers between events.

    Attributes:
        selected: Selected element ids, in the order they were selected
        hovered: Element under the pointer, if any
        highlights: element id -> token of its live temporary highlight
        next_token: Token handed to the next highlight
        hidden: Hidden-elements ledger
    """

    selected: tuple[str, ...] = ()
    hovered: str | None = None
    highlights: dict[str, int] = field(default_factory=dict, hash=False)
    next_token: int = 1
    hidden: HiddenElementsLedger = field(default_factory=HiddenElementsLedger)

    def is_selected(self, element_id: str) -> bool:
        return element_id in self.selected

    def is_highlighted(self, element_id: str) -> bool:
        return element_id in self.highlights


# ---------------------------------------------------------------------------
# Selection transitions
# ---------------------------------------------------------------------------


def toggle(selected: tuple[str, ...], element_id: str, multi: bool) -> tuple[str, ...]:
    """Primary-tap transition for one element.

    Without a modifier the element becomes the sole selection, unless it
    already was, in which case the selection empties. With a modifier only the
    element's own state flips.
    """
    if not multi:
        return () if selected == (element_id,) else (element_id,)
    if element_id in selected:
        return tuple(i for i in selected if i != element_id)
    return (*selected, element_id)


def select_only(element_ids: Iterable[str]) -> tuple[str, ...]:
    """Replace the selection with exactly these ids (duplicates dropped)."""
    return tuple(dict.fromkeys(element_ids))


def with_selection(state: InteractionState, selected: tuple[str, ...]) -> InteractionState:
    return replace(state, selected=selected)


def clear_selection(state: InteractionState) -> InteractionState:
    return replace(state, selected=())


# ---------------------------------------------------------------------------
# Hover
# ---------------------------------------------------------------------------


def hover(state: InteractionState, element_id: str) -> InteractionState:
    return replace(state, hovered=element_id)


def unhover(state: InteractionState, element_id: str) -> InteractionState:
    if state.hovered != element_id:
        return state
    return replace(state, hovered=None)


# ---------------------------------------------------------------------------
# Temporary highlight
# ---------------------------------------------------------------------------


def start_highlight(state: InteractionState, element_id: str) -> tuple[InteractionState, int]:
    """Highlight an element, superseding any highlight it already had."""
    token = state.next_token
    highlights = {**state.highlights, element_id: token}
    return replace(state, highlights=highlights, next_token=token + 1), token


def end_highlight(state: InteractionState, element_id: str, token: int) -> InteractionState:
    """Drop the highlight only if ``token`` is still the live one.

    A revert scheduled by an earlier click therefore never cancels the
    highlight of a later click on the same element.
    """
    if state.highlights.get(element_id) != token:
        return state
    highlights = {k: v for k, v in state.highlights.items() if k != element_id}
    return replace(state, highlights=highlights)


def clear_highlights(state: InteractionState) -> InteractionState:
    return replace(state, highlights={})
