"""Tests for selection, highlight and hidden-element state transitions."""

from __future__ import annotations

from dataclasses import replace

import pytest

from ownergraph.interaction.selection import (
    HiddenElementsLedger,
    InteractionState,
    clear_highlights,
    end_highlight,
    hover,
    select_only,
    start_highlight,
    toggle,
    unhover,
)
from ownergraph.interaction.styles import VisualState, style_for, visual_state


class TestToggle:
    def test_plain_click_selects_only_target(self):
        assert toggle(("a", "b"), "c", multi=False) == ("c",)

    def test_plain_click_on_sole_selection_clears(self):
        assert toggle(("a",), "a", multi=False) == ()

    def test_plain_click_on_one_of_many_makes_it_sole(self):
        assert toggle(("a", "b"), "a", multi=False) == ("a",)

    def test_modifier_click_adds(self):
        assert toggle(("a",), "b", multi=True) == ("a", "b")

    def test_modifier_click_removes(self):
        assert toggle(("a", "b"), "a", multi=True) == ("b",)

    @pytest.mark.parametrize("prior", [(), ("x",), ("x", "y"), ("a",)])
    def test_plain_click_exclusivity(self, prior):
        result = toggle(prior, "a", multi=False)
        if prior == ("a",):
            assert result == ()
        else:
            assert result == ("a",)

    def test_modifier_clicks_are_additive(self):
        selected: tuple[str, ...] = ()
        ids = [f"n{i}" for i in range(7)]
        for element_id in ids:
            selected = toggle(selected, element_id, multi=True)
        assert selected == tuple(ids)

    def test_plain_then_modifier(self):
        selected = toggle((), "A", multi=False)
        selected = toggle(selected, "B", multi=True)
        assert set(selected) == {"A", "B"}

    def test_select_only_dedupes(self):
        assert select_only(["a", "b", "a"]) == ("a", "b")


class TestHighlight:
    def test_tokens_increase(self):
        state, first = start_highlight(InteractionState(), "a")
        state, second = start_highlight(state, "a")
        assert second > first
        assert state.highlights == {"a": second}

    def test_stale_token_does_not_end_newer_highlight(self):
        state, first = start_highlight(InteractionState(), "a")
        state, second = start_highlight(state, "a")

        after_stale = end_highlight(state, "a", first)
        assert after_stale is state
        assert after_stale.is_highlighted("a")

        after_live = end_highlight(state, "a", second)
        assert not after_live.is_highlighted("a")

    def test_clear_highlights(self):
        state, _ = start_highlight(InteractionState(), "a")
        assert clear_highlights(state).highlights == {}


class TestHover:
    def test_unhover_other_element_is_noop(self):
        state = hover(InteractionState(), "a")
        assert unhover(state, "b") is state
        assert unhover(state, "a").hovered is None


class TestLedger:
    def test_hide_node_records_edges(self):
        ledger = HiddenElementsLedger().hide_node("n1", ["e1", "e2"]).hide_edge("e2").hide_edge("e3")
        assert ledger.nodes == ("n1",)
        assert ledger.edges == ("e1", "e2", "e3")
        assert "e3" in ledger
        assert not ledger.is_empty
        assert HiddenElementsLedger().is_empty


class TestVisualState:
    def test_precedence(self):
        state = InteractionState(selected=("a",), hovered="a")
        assert visual_state(state, "a") is VisualState.SELECTED

        state, _ = start_highlight(state, "a")
        assert visual_state(state, "a") is VisualState.HIGHLIGHTED

        hidden = HiddenElementsLedger().hide_edge("a")
        assert visual_state(replace(state, hidden=hidden), "a") is VisualState.HIDDEN

    def test_hover_then_default(self):
        state = hover(InteractionState(), "a")
        assert visual_state(state, "a") is VisualState.HOVERING
        assert visual_state(unhover(state, "a"), "a") is VisualState.NONE

    def test_hover_leave_keeps_selected_style(self):
        state = unhover(hover(InteractionState(selected=("e1",)), "e1"), "e1")
        assert visual_state(state, "e1") is VisualState.SELECTED

    def test_styles_are_fresh_copies(self):
        style = style_for(True, VisualState.SELECTED)
        style["border-width"] = 99
        assert style_for(True, VisualState.SELECTED)["border-width"] == 4

    def test_hidden_style_hides(self):
        assert style_for(False, VisualState.HIDDEN) == {"display": "none"}
        assert style_for(False, VisualState.NONE)["display"] == "element"
