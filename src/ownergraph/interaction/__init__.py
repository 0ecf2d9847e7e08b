"""Interaction layer: input events, state, styles, menus and the reducer."""

from ownergraph.interaction.commands import Command
from ownergraph.interaction.context_menu import ContextMenu, MenuItem
from ownergraph.interaction.events import (
    BackgroundContextTap,
    BackgroundTap,
    ContextTap,
    DocumentClick,
    DoubleTap,
    FocusTarget,
    HighlightExpired,
    HoverEnter,
    HoverLeave,
    InputEvent,
    KeyPress,
    MenuSelect,
    PanelClick,
    Tap,
)
from ownergraph.interaction.keyboard import Shortcut, ShortcutAction, route_key
from ownergraph.interaction.reducer import InteractionContext, Transition, reduce
from ownergraph.interaction.selection import HiddenElementsLedger, InteractionState
from ownergraph.interaction.styles import VisualState, style_for, visual_state

__all__ = [
    # Input events
    "BackgroundContextTap",
    "BackgroundTap",
    "ContextTap",
    "DocumentClick",
    "DoubleTap",
    "FocusTarget",
    "HighlightExpired",
    "HoverEnter",
    "HoverLeave",
    "InputEvent",
    "KeyPress",
    "MenuSelect",
    "PanelClick",
    "Tap",
    # State
    "HiddenElementsLedger",
    "InteractionState",
    "VisualState",
    "style_for",
    "visual_state",
    # Menus and shortcuts
    "ContextMenu",
    "MenuItem",
    "Shortcut",
    "ShortcutAction",
    "route_key",
    # Reducer
    "Command",
    "InteractionContext",
    "Transition",
    "reduce",
]
