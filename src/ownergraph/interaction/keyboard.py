"""Keyboard shortcut routing.

Keys use DOM ``KeyboardEvent.key`` names. Shortcuts never fire while the
user is typing into a text field, text area or content-editable region.

    Arrow keys          pan (content moves in the arrow direction)
    + = PageUp          zoom in
    - PageDown          zoom out
    Space Home          reset zoom to 1.0 and recenter
    f F 0               fit all elements
    Escape              clear selection and close overlays
    Ctrl/Meta + A       select all

Apart from Ctrl/Meta+A, keys pressed with Ctrl or Meta held are left to the
host (browser zoom, find, ...).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ownergraph.interaction.events import KeyPress, is_multi_select, is_text_entry


class ShortcutAction(Enum):
    PAN_UP = "Pan up"
    PAN_DOWN = "Pan down"
    PAN_LEFT = "Pan left"
    PAN_RIGHT = "Pan right"
    ZOOM_IN = "Zoom in"
    ZOOM_OUT = "Zoom out"
    RESET_ZOOM = "Reset zoom"
    FIT = "Fit to screen"
    CLEAR_SELECTION = "Clear selection"
    SELECT_ALL = "Select all"


PAN_DIRECTIONS: dict[ShortcutAction, tuple[int, int]] = {
    ShortcutAction.PAN_UP: (0, -1),
    ShortcutAction.PAN_DOWN: (0, 1),
    ShortcutAction.PAN_LEFT: (-1, 0),
    ShortcutAction.PAN_RIGHT: (1, 0),
}

_PLAIN_KEYS: dict[str, ShortcutAction] = {
    "ArrowUp": ShortcutAction.PAN_UP,
    "ArrowDown": ShortcutAction.PAN_DOWN,
    "ArrowLeft": ShortcutAction.PAN_LEFT,
    "ArrowRight": ShortcutAction.PAN_RIGHT,
    "+": ShortcutAction.ZOOM_IN,
    "=": ShortcutAction.ZOOM_IN,
    "PageUp": ShortcutAction.ZOOM_IN,
    "-": ShortcutAction.ZOOM_OUT,
    "PageDown": ShortcutAction.ZOOM_OUT,
    " ": ShortcutAction.RESET_ZOOM,
    "Home": ShortcutAction.RESET_ZOOM,
    "f": ShortcutAction.FIT,
    "F": ShortcutAction.FIT,
    "0": ShortcutAction.FIT,
    "Escape": ShortcutAction.CLEAR_SELECTION,
}

_KEY_NAMES = {" ": "Space", "Escape": "Esc"}


@dataclass(frozen=True)
class Shortcut:
    action: ShortcutAction
    key: str

    @property
    def key_label(self) -> str:
        """Key as shown in the feedback toast."""
        if self.action is ShortcutAction.SELECT_ALL:
            return "Ctrl+A"
        return _KEY_NAMES.get(self.key, self.key)


def route_key(event: KeyPress) -> Shortcut | None:
    """Map a key event to a shortcut, or None if nothing should fire."""
    if is_text_entry(event.focus):
        return None
    if is_multi_select(event):
        if event.key in ("a", "A"):
            return Shortcut(ShortcutAction.SELECT_ALL, event.key)
        return None
    action = _PLAIN_KEYS.get(event.key)
    if action is None:
        return None
    return Shortcut(action, event.key)
