"""Pure interaction reducer: (state, input event) -> (next state, commands).

All decisions about selection, hover, highlight, overlays, menus and
shortcuts are made here. Nothing in this module touches the rendering engine
or the overlay host; the surface adapter executes the returned commands.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from ownergraph.config import SurfaceConfig
from ownergraph.events.types import (
    ElementsHiddenEvent,
    ElementTapEvent,
    SelectionChangedEvent,
    ShortcutEvent,
)
from ownergraph.graph import ElementGraph
from ownergraph.interaction import context_menu as menus
from ownergraph.interaction.commands import (
    Center,
    ClickPanel,
    CloseOverlay,
    Command,
    DismissOutside,
    Emit,
    Fit,
    OpenOverlay,
    PanBy,
    ResetZoom,
    Restyle,
    ScheduleHighlightRevert,
    StopPropagation,
    ZoomBy,
)
from ownergraph.interaction.context_menu import ContextMenu
from ownergraph.interaction.events import (
    BackgroundContextTap,
    BackgroundTap,
    ContextTap,
    DocumentClick,
    DoubleTap,
    HighlightExpired,
    HoverEnter,
    HoverLeave,
    InputEvent,
    KeyPress,
    MenuSelect,
    PanelClick,
    Tap,
    is_multi_select,
)
from ownergraph.interaction.keyboard import PAN_DIRECTIONS, Shortcut, ShortcutAction, route_key
from ownergraph.interaction.selection import (
    HiddenElementsLedger,
    InteractionState,
    clear_selection,
    end_highlight,
    hover,
    start_highlight,
    toggle,
    unhover,
    with_selection,
)
from ownergraph.overlays import (
    KeyboardToast,
    OverlayKind,
    clamp_menu_position,
    edge_info,
    expanded_details,
    node_info,
)

INFO_PANELS = (OverlayKind.NODE_INFO, OverlayKind.EDGE_INFO)


@dataclass(frozen=True)
class InteractionContext:
    """Read-only facts the reducer needs besides the state.

    Attributes:
        graph: Adjacency over the current element set
        config: Surface configuration (steps, paddings, viewport)
        open_menu: The context menu currently shown, if any
        surface_id: Stamped on emitted events
    """

    graph: ElementGraph
    config: SurfaceConfig = field(default_factory=SurfaceConfig)
    open_menu: ContextMenu | None = None
    surface_id: str = ""


@dataclass(frozen=True)
class Transition:
    state: InteractionState
    commands: tuple[Command, ...] = ()

    @property
    def propagation_stopped(self) -> bool:
        return any(isinstance(c, StopPropagation) for c in self.commands)


def reduce(state: InteractionState, event: InputEvent, context: InteractionContext) -> Transition:
    """Compute the next state and the side effects of one input event.

    Unknown element ids (stale events from a replaced element set) and
    hidden elements produce no change.
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unsupported input event: {type(event).__name__}")
    return handler(state, event, context)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _restyle(context: InteractionContext, *groups) -> Restyle:
    return Restyle(tuple(context.graph.ordered(i for group in groups for i in group)))


def _targetable(state: InteractionState, context: InteractionContext, element_id: str) -> bool:
    return element_id in context.graph and element_id not in state.hidden


def _selection_event(context: InteractionContext, selected: tuple[str, ...], cause: str) -> Emit:
    ordered = tuple(context.graph.ordered(selected))
    return Emit(SelectionChangedEvent(surface_id=context.surface_id, selected=ordered, cause=cause))


def _replace_selection(
    state: InteractionState,
    context: InteractionContext,
    selected: tuple[str, ...],
    cause: str,
) -> tuple[InteractionState, list[Command]]:
    """Swap the selection, restyling exactly the elements whose state changed."""
    before = state.selected
    if set(before) == set(selected):
        return with_selection(state, selected), []
    state = with_selection(state, selected)
    return state, [_restyle(context, set(before) ^ set(selected)), _selection_event(context, selected, cause)]


def _info_overlay(context: InteractionContext, element_id: str) -> OpenOverlay:
    element = context.graph.element(element_id)
    if element.is_node:
        return OpenOverlay(OverlayKind.NODE_INFO, node_info(element))
    return OpenOverlay(OverlayKind.EDGE_INFO, edge_info(element, context.graph))


def _open_menu(
    state: InteractionState,
    context: InteractionContext,
    target_id: str | None,
    x: float,
    y: float,
) -> OpenOverlay:
    target_type, items = menus.menu_items_for(context.graph, target_id, state.hidden)
    position = clamp_menu_position(
        (x, y),
        menus.estimate_menu_size(items),
        context.config.viewport,
        context.config.menu_margin,
    )
    menu = ContextMenu(target_type=target_type, target_id=target_id, position=position, items=items)
    return OpenOverlay(OverlayKind.CONTEXT_MENU, menu)


# ---------------------------------------------------------------------------
# Pointer events
# ---------------------------------------------------------------------------


def _on_hover_enter(state: InteractionState, event: HoverEnter, context: InteractionContext) -> Transition:
    if not _targetable(state, context, event.element_id):
        return Transition(state)
    return Transition(hover(state, event.element_id), (Restyle((event.element_id,)),))


def _on_hover_leave(state: InteractionState, event: HoverLeave, context: InteractionContext) -> Transition:
    if event.element_id not in context.graph:
        return Transition(state)
    return Transition(unhover(state, event.element_id), (Restyle((event.element_id,)),))


def _on_tap(state: InteractionState, event: Tap, context: InteractionContext) -> Transition:
    element_id = event.element_id
    if not _targetable(state, context, element_id):
        return Transition(state)

    multi = is_multi_select(event)
    commands: list[Command] = [StopPropagation()]

    state, token = start_highlight(state, element_id)
    commands.append(ScheduleHighlightRevert(element_id, token))

    before = state.selected
    after = toggle(before, element_id, multi)
    state = with_selection(state, after)
    commands.append(_restyle(context, [element_id], set(before) ^ set(after)))

    commands.append(DismissOutside())
    commands.append(_info_overlay(context, element_id))

    kind = "node" if context.graph.is_node(element_id) else "edge"
    commands.append(
        Emit(
            ElementTapEvent(
                surface_id=context.surface_id,
                element_id=element_id,
                element_kind=kind,
                multi_select=multi,
            )
        )
    )
    if before != after:
        commands.append(_selection_event(context, after, "tap"))
    return Transition(state, tuple(commands))


def _on_double_tap(state: InteractionState, event: DoubleTap, context: InteractionContext) -> Transition:
    if not _targetable(state, context, event.element_id):
        return Transition(state)
    element = context.graph.element(event.element_id)
    return Transition(
        state,
        (
            StopPropagation(),
            DismissOutside(),
            OpenOverlay(OverlayKind.EXPANDED_MODAL, expanded_details(element, context.graph)),
            Fit((element.id,), context.config.modal_padding),
        ),
    )


def _on_context_tap(state: InteractionState, event: ContextTap, context: InteractionContext) -> Transition:
    if not _targetable(state, context, event.element_id):
        return Transition(state)
    return Transition(
        state,
        (StopPropagation(), DismissOutside(), _open_menu(state, context, event.element_id, event.x, event.y)),
    )


def _on_background_tap(state: InteractionState, event: BackgroundTap, context: InteractionContext) -> Transition:
    before = state.selected
    state = clear_selection(state)
    commands: list[Command] = []
    if before:
        commands.append(_restyle(context, before))
    commands.append(DismissOutside())
    commands.extend(CloseOverlay(kind, "background-tap") for kind in INFO_PANELS)
    if before:
        commands.append(_selection_event(context, (), "background-tap"))
    return Transition(state, tuple(commands))


def _on_background_context_tap(
    state: InteractionState, event: BackgroundContextTap, context: InteractionContext
) -> Transition:
    return Transition(state, (DismissOutside(), _open_menu(state, context, None, event.x, event.y)))


def _on_highlight_expired(
    state: InteractionState, event: HighlightExpired, context: InteractionContext
) -> Transition:
    next_state = end_highlight(state, event.element_id, event.token)
    if next_state is state or event.element_id not in context.graph:
        return Transition(next_state)
    return Transition(next_state, (Restyle((event.element_id,)),))


# ---------------------------------------------------------------------------
# Overlay clicks
# ---------------------------------------------------------------------------


def _on_panel_click(state: InteractionState, event: PanelClick, context: InteractionContext) -> Transition:
    return Transition(state, (DismissOutside(source=event.kind), ClickPanel(event.kind, event.part)))


def _on_document_click(state: InteractionState, event: DocumentClick, context: InteractionContext) -> Transition:
    return Transition(state, (DismissOutside(),))


# ---------------------------------------------------------------------------
# Keyboard
# ---------------------------------------------------------------------------


def _clear_everything(state: InteractionState, context: InteractionContext) -> tuple[InteractionState, list[Command]]:
    """Escape: empty selection, both info panels, context menu and modal, atomically."""
    state, commands = _replace_selection(state, context, (), "escape")
    closes = [
        CloseOverlay(kind, "escape")
        for kind in (*INFO_PANELS, OverlayKind.CONTEXT_MENU, OverlayKind.EXPANDED_MODAL)
    ]
    # Selection events go last so overlay updates precede logging.
    restyles = [c for c in commands if isinstance(c, Restyle)]
    emits = [c for c in commands if isinstance(c, Emit)]
    return state, [*restyles, *closes, *emits]


def _on_key_press(state: InteractionState, event: KeyPress, context: InteractionContext) -> Transition:
    shortcut = route_key(event)
    if shortcut is None:
        return Transition(state)

    config = context.config
    action = shortcut.action
    commands: list[Command] = []

    if action in PAN_DIRECTIONS:
        dx, dy = PAN_DIRECTIONS[action]
        commands.append(PanBy(dx * config.pan_step, dy * config.pan_step))
    elif action is ShortcutAction.ZOOM_IN:
        commands.append(ZoomBy(config.zoom_step))
    elif action is ShortcutAction.ZOOM_OUT:
        commands.append(ZoomBy(1 / config.zoom_step))
    elif action is ShortcutAction.RESET_ZOOM:
        commands.append(ResetZoom())
    elif action is ShortcutAction.FIT:
        commands.append(Fit(None, config.fit_padding))
    elif action is ShortcutAction.CLEAR_SELECTION:
        state, commands = _clear_everything(state, context)
    elif action is ShortcutAction.SELECT_ALL:
        state, commands = _replace_selection(state, context, tuple(context.graph.ids()), "select-all")

    commands.insert(_logging_start(commands), _toast(shortcut))
    commands.append(Emit(ShortcutEvent(surface_id=context.surface_id, action=action.value, key=shortcut.key)))
    return Transition(state, tuple(commands))


def _toast(shortcut: Shortcut) -> OpenOverlay:
    return OpenOverlay(OverlayKind.KEYBOARD_TOAST, KeyboardToast(shortcut.action.value, shortcut.key_label))


def _logging_start(commands: list[Command]) -> int:
    """Index of the first Emit, so overlay commands are inserted before logging."""
    for i, command in enumerate(commands):
        if isinstance(command, Emit):
            return i
    return len(commands)


# ---------------------------------------------------------------------------
# Context menu items
# ---------------------------------------------------------------------------


def _on_menu_select(state: InteractionState, event: MenuSelect, context: InteractionContext) -> Transition:
    menu = context.open_menu
    item = menu.item(event.item_id) if menu is not None else None
    if item is None or not item.actionable:
        return Transition(state)

    action = _MENU_ACTIONS.get(item.id)
    if action is None:
        return Transition(state)

    state, commands = action(state, context, menu.target_id)
    commands.insert(_logging_start(commands), CloseOverlay(OverlayKind.CONTEXT_MENU, "item-selected"))
    return Transition(state, (DismissOutside(source=OverlayKind.CONTEXT_MENU), *commands))


MenuAction = Callable[[InteractionState, InteractionContext, Optional[str]], tuple[InteractionState, list[Command]]]


def _view_details(state, context, target_id):
    if not _targetable(state, context, target_id):
        return state, []
    return state, [_info_overlay(context, target_id)]


def _zoom_to_element(state, context, target_id):
    return state, [Fit((target_id,), context.config.fit_padding)]


def _select_connected(state, context, target_id):
    return _replace_selection(state, context, menus.connected_selection(context.graph, target_id), "select-connected")


def _select_source_target(state, context, target_id):
    return _replace_selection(
        state, context, menus.source_target_selection(context.graph, target_id), "select-source-target"
    )


def _hide(hide_fn):
    def action(state, context, target_id):
        ledger, affected = hide_fn(state.hidden, context.graph, target_id)
        if not affected:
            return state, []
        state = replace(state, hidden=ledger)
        return state, [
            _restyle(context, affected),
            Emit(ElementsHiddenEvent(surface_id=context.surface_id, element_ids=affected, hidden=True)),
        ]

    return action


def _show_all(state, context, target_id):
    restored = state.hidden.all_ids()
    if not restored:
        return state, []
    state = replace(state, hidden=HiddenElementsLedger())
    return state, [
        _restyle(context, restored),
        Emit(ElementsHiddenEvent(surface_id=context.surface_id, element_ids=restored, hidden=False)),
    ]


def _zoom_to_fit(state, context, target_id):
    return state, [Fit(None, context.config.fit_padding)]


def _center_graph(state, context, target_id):
    return state, [Center(None)]


def _clear_selections(state, context, target_id):
    return _replace_selection(state, context, (), "clear-selections")


_MENU_ACTIONS: dict[str, MenuAction] = {
    "view-details": _view_details,
    "zoom-to-node": _zoom_to_element,
    "select-connected": _select_connected,
    "hide-node": _hide(menus.hide_node),
    "view-edge-details": _view_details,
    "select-source-target": _select_source_target,
    "hide-edge": _hide(menus.hide_edge),
    "zoom-to-fit": _zoom_to_fit,
    "center-graph": _center_graph,
    "clear-selections": _clear_selections,
    "show-all": _show_all,
}


_HANDLERS: dict[type, Callable[[InteractionState, InputEvent, InteractionContext], Transition]] = {
    HoverEnter: _on_hover_enter,
    HoverLeave: _on_hover_leave,
    Tap: _on_tap,
    DoubleTap: _on_double_tap,
    ContextTap: _on_context_tap,
    BackgroundTap: _on_background_tap,
    BackgroundContextTap: _on_background_context_tap,
    HighlightExpired: _on_highlight_expired,
    PanelClick: _on_panel_click,
    DocumentClick: _on_document_click,
    KeyPress: _on_key_press,
    MenuSelect: _on_menu_select,
}
