"""GraphSurface: owns one rendering engine and runs interactions against it.

The surface is the only place where side effects happen. Input events go
through the pure reducer; the returned commands are executed here against the
engine, the overlay manager and the event dispatcher, in the order the
reducer produced them.

Lifecycle:
    surface = GraphSurface(ForceLayoutEngine)
    surface.set_data(nodes, edges)      # destroy old engine, build new one
    surface.handle(Tap("org-1"))        # route input
    surface.unmount()                   # release everything, idempotent
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable

from ownergraph.config import SurfaceConfig
from ownergraph.elements import RenderableElement, ValidationResult, validate_elements
from ownergraph.engine import EngineFactory, RenderEngine
from ownergraph.events import (
    EventDispatcher,
    EventProcessor,
    LoggingProcessor,
    SurfaceErrorEvent,
    SurfaceMountedEvent,
    SurfaceUnmountedEvent,
)
from ownergraph.exceptions import OwnerGraphError, RenderEngineInitError, SurfaceDestroyedError
from ownergraph.graph import ElementGraph
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
from ownergraph.interaction.events import BackgroundTap, HighlightExpired, InputEvent, Tap
from ownergraph.interaction.reducer import InteractionContext, reduce
from ownergraph.interaction.selection import InteractionState
from ownergraph.interaction.styles import style_for, visual_state
from ownergraph.overlays import OverlayHost, OverlayKind, OverlayManager
from ownergraph.timers import ManualScheduler, Scheduler, TimerGroup
from ownergraph.viz.error_view import ErrorPanel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceError:
    """Error state shown in place of the canvas.

    Attributes:
        message: Human-readable error message
        timestamp: Unix time the failure was observed
        exception: The typed error, when there is one
    """

    message: str
    timestamp: float
    exception: OwnerGraphError | None = None


@dataclass(frozen=True)
class HandleResult:
    """What one ``handle`` call did."""

    propagation_stopped: bool = False
    commands: tuple[Command, ...] = field(default_factory=tuple)


# Command type -> executor method name
_COMMAND_METHOD_MAP: dict[type, str] = {
    StopPropagation: "_exec_stop_propagation",
    ScheduleHighlightRevert: "_exec_schedule_highlight_revert",
    Restyle: "_exec_restyle",
    DismissOutside: "_exec_dismiss_outside",
    ClickPanel: "_exec_click_panel",
    OpenOverlay: "_exec_open_overlay",
    CloseOverlay: "_exec_close_overlay",
    PanBy: "_exec_pan_by",
    ZoomBy: "_exec_zoom_by",
    ResetZoom: "_exec_reset_zoom",
    Fit: "_exec_fit",
    Center: "_exec_center",
    Emit: "_exec_emit",
}


class GraphSurface:
    """A mounted, interactive view of one organizational ownership graph.

    Args:
        engine_factory: Builds a RenderEngine from validated elements. Called
            once per non-empty ``set_data``; may raise.
        config: Surface configuration. Defaults to ``SurfaceConfig()``.
        scheduler: Timer source for highlight reverts and auto-dismissals.
            Defaults to a ManualScheduler (timers fire only on ``advance``).
        overlay_host: Where overlay panels are attached.
        processors: Event processors. ``None`` installs a LoggingProcessor;
            pass ``[]`` to emit nothing.
        on_error: Called with a SurfaceError when the engine fails.
        surface_id: Stamped on every emitted event.

    Example:
        >>> from ownergraph.viz import ForceLayoutEngine
        >>> surface = GraphSurface(ForceLayoutEngine, processors=[])
        >>> _ = surface.set_data([{"id": "org-1", "type": "organization", "label": "Acme"}], [])
        >>> _ = surface.click("org-1")
        >>> surface.get_selected_elements()
        ['org-1']
        >>> surface.unmount()
    """

    def __init__(
        self,
        engine_factory: EngineFactory,
        config: SurfaceConfig | None = None,
        *,
        scheduler: Scheduler | None = None,
        overlay_host: OverlayHost | None = None,
        processors: list[EventProcessor] | None = None,
        on_error: Callable[[SurfaceError], Any] | None = None,
        surface_id: str | None = None,
    ) -> None:
        self._engine_factory = engine_factory
        self._config = config or SurfaceConfig()
        self._scheduler = scheduler if scheduler is not None else ManualScheduler()
        self._on_error = on_error
        self.surface_id = surface_id or uuid.uuid4().hex[:12]

        if processors is None:
            processors = [LoggingProcessor()]
        self._dispatcher = EventDispatcher(processors)
        self._overlays = OverlayManager(
            self._scheduler,
            overlay_host,
            self._config.timings,
            emit=self._dispatcher.emit,
            surface_id=self.surface_id,
        )
        self._timers = TimerGroup(self._scheduler)

        self._engine: RenderEngine | None = None
        self._elements: list[RenderableElement] = []
        self._graph = ElementGraph([])
        self._validation = ValidationResult()
        self._state = InteractionState()
        self._error: SurfaceError | None = None
        self._generation = 0
        self._destroyed = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> SurfaceConfig:
        return self._config

    @property
    def elements(self) -> list[RenderableElement]:
        """The validated element sequence currently rendered."""
        return list(self._elements)

    @property
    def graph(self) -> ElementGraph:
        return self._graph

    @property
    def validation(self) -> ValidationResult:
        """Result of the last ``set_data`` validation, dropped records included."""
        return self._validation

    @property
    def engine(self) -> RenderEngine | None:
        return self._engine

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def overlays(self) -> OverlayManager:
        return self._overlays

    @property
    def error(self) -> SurfaceError | None:
        return self._error

    @property
    def generation(self) -> int:
        """Number of times data was supplied (plus one after unmount)."""
        return self._generation

    @property
    def mounted(self) -> bool:
        return not self._destroyed

    @property
    def pending_timers(self) -> int:
        """Live timers owned by this surface, overlay timers included."""
        return len(self._timers) + self._overlays.pending_timers

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def set_data(self, nodes: Iterable[Any] | None, edges: Iterable[Any] | None) -> ValidationResult:
        """Replace the rendered graph.

        The previous engine is destroyed unconditionally and every timer and
        overlay tied to it is released before the new data is validated. A new
        engine is built only when at least one element survives validation.
        Engine construction failures become ``self.error``; they never raise.

        Returns:
            The validation result, including dropped records.
        """
        self._check_alive("set_data")
        self._generation += 1
        self._release(reason="data-replaced")
        self._state = InteractionState()
        self._error = None

        self._validation = validate_elements(nodes, edges)
        self._elements = self._validation.elements
        self._graph = ElementGraph(self._elements)

        if self._elements:
            self._engine = self._construct_engine()
            if self._engine is None:
                return self._validation

        self._dispatcher.emit(
            SurfaceMountedEvent(
                surface_id=self.surface_id,
                node_count=len(self._graph.node_ids()),
                edge_count=len(self._graph.edge_ids()),
                dropped_count=len(self._validation.dropped),
                generation=self._generation,
            )
        )
        return self._validation

    def unmount(self) -> None:
        """Destroy the engine, cancel timers and close overlays. Idempotent."""
        if self._destroyed:
            return
        self._destroyed = True
        self._generation += 1
        try:
            self._release(reason="unmount")
        finally:
            self._dispatcher.emit(SurfaceUnmountedEvent(surface_id=self.surface_id, generation=self._generation))
            self._dispatcher.shutdown()
            logger.debug("Surface %s unmounted", self.surface_id)

    def __enter__(self) -> GraphSurface:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unmount()

    def _release(self, reason: str) -> None:
        """Cancel timers, close overlays, destroy the engine (always)."""
        engine, self._engine = self._engine, None
        try:
            self._timers.cancel_all()
            self._overlays.close_all(reason=reason)
        finally:
            if engine is not None:
                engine.destroy()

    def _construct_engine(self) -> RenderEngine | None:
        try:
            return self._engine_factory(self._elements, self._config)
        except Exception as exc:
            error = RenderEngineInitError(exc, len(self._elements))
            logger.error("%s", error.message, exc_info=True)
            self._fail(error.message, error, type(exc).__name__)
            return None

    def report_engine_error(self, message: str) -> None:
        """Surface an error the engine reported after construction."""
        self._check_alive("report_engine_error")
        logger.error("Rendering engine error: %s", message)
        self._fail(message, None, "EngineError")

    def _fail(self, message: str, exception: OwnerGraphError | None, error_type: str) -> None:
        self._error = SurfaceError(message=message, timestamp=time.time(), exception=exception)
        self._dispatcher.emit(SurfaceErrorEvent(surface_id=self.surface_id, error=message, error_type=error_type))
        if self._on_error is not None:
            self._on_error(self._error)

    def render_error_panel(self) -> ErrorPanel | None:
        """The error view to show instead of the canvas, if in the error state."""
        if self._error is None:
            return None
        return ErrorPanel(message=self._error.message, timestamp=self._error.timestamp)

    def _check_alive(self, operation: str) -> None:
        if self._destroyed:
            raise SurfaceDestroyedError(operation)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle(self, event: InputEvent) -> HandleResult:
        """Route one input event through the reducer and execute its commands."""
        self._check_alive("handle")
        context = InteractionContext(
            graph=self._graph,
            config=self._config,
            open_menu=self._open_menu(),
            surface_id=self.surface_id,
        )
        transition = reduce(self._state, event, context)
        self._state = transition.state
        for command in transition.commands:
            getattr(self, _COMMAND_METHOD_MAP[type(command)])(command)
        return HandleResult(transition.propagation_stopped, transition.commands)

    def click(self, element_id: str | None = None, *, ctrl: bool = False, meta: bool = False) -> HandleResult:
        """Deliver a primary click the way the host's event bubbling would.

        The element handler runs first; the background handler only sees the
        click if the element handler did not stop propagation.
        """
        if element_id is None:
            return self.handle(BackgroundTap())
        result = self.handle(Tap(element_id, ctrl=ctrl, meta=meta))
        if result.propagation_stopped:
            return result
        background = self.handle(BackgroundTap())
        return HandleResult(background.propagation_stopped, result.commands + background.commands)

    def _open_menu(self):
        panel = self._overlays.get(OverlayKind.CONTEXT_MENU)
        return panel.payload if panel is not None else None

    # ------------------------------------------------------------------
    # Command execution
    # ------------------------------------------------------------------

    def _exec_stop_propagation(self, command: StopPropagation) -> None:
        pass

    def _exec_schedule_highlight_revert(self, command: ScheduleHighlightRevert) -> None:
        generation = self._generation

        def revert() -> None:
            self._revert_highlight(generation, command.element_id, command.token)

        self._timers.call_later(self._config.timings.highlight, revert)

    def _revert_highlight(self, generation: int, element_id: str, token: int) -> None:
        if self._destroyed or generation != self._generation:
            logger.debug("Skipping stale highlight revert for %s (generation %d)", element_id, generation)
            return
        self.handle(HighlightExpired(element_id, token))

    def _exec_restyle(self, command: Restyle) -> None:
        if self._engine is None:
            return
        for element_id in command.element_ids:
            style = style_for(self._graph.is_node(element_id), visual_state(self._state, element_id))
            self._engine.apply_style(element_id, style)

    def _exec_dismiss_outside(self, command: DismissOutside) -> None:
        self._overlays.click_outside(command.source)

    def _exec_click_panel(self, command: ClickPanel) -> None:
        self._overlays.click_panel(command.kind, command.part)

    def _exec_open_overlay(self, command: OpenOverlay) -> None:
        self._overlays.open(command.kind, command.payload)

    def _exec_close_overlay(self, command: CloseOverlay) -> None:
        self._overlays.close(command.kind, reason=command.reason)

    def _exec_pan_by(self, command: PanBy) -> None:
        if self._engine is not None:
            self._engine.pan_by(command.dx, command.dy)

    def _exec_zoom_by(self, command: ZoomBy) -> None:
        if self._engine is not None:
            self._engine.zoom_to(self._config.clamp_zoom(self._engine.zoom() * command.factor))

    def _exec_reset_zoom(self, command: ResetZoom) -> None:
        self._reset_viewport()

    def _exec_fit(self, command: Fit) -> None:
        if self._engine is not None:
            self._engine.fit(command.element_ids, command.padding)

    def _exec_center(self, command: Center) -> None:
        if self._engine is not None:
            self._engine.center(command.element_ids)

    def _exec_emit(self, command: Emit) -> None:
        self._dispatcher.emit(command.event)

    def _reset_viewport(self) -> None:
        if self._engine is not None:
            self._engine.zoom_to(1.0)
            self._engine.center()

    # ------------------------------------------------------------------
    # Imperative operations
    # ------------------------------------------------------------------

    def zoom_to_fit(self) -> None:
        self._check_alive("zoom_to_fit")
        self._exec_fit(Fit(None, self._config.fit_padding))

    def center_graph(self) -> None:
        self._check_alive("center_graph")
        self._exec_center(Center(None))

    def reset_zoom(self) -> None:
        """Zoom to 1.0 and recenter on the whole graph."""
        self._check_alive("reset_zoom")
        self._reset_viewport()

    def zoom_to_node(self, node_id: str) -> None:
        """Fit the viewport around one element. Unknown ids are ignored."""
        self._check_alive("zoom_to_node")
        if node_id not in self._graph:
            logger.debug("zoom_to_node: unknown element %r", node_id)
            return
        self._exec_fit(Fit((node_id,), self._config.fit_padding))

    def get_selected_elements(self) -> list[str]:
        """Selected ids in element order."""
        self._check_alive("get_selected_elements")
        return self._graph.ordered(self._state.selected)

    def visual_states(self, element_ids: Sequence[str] | None = None) -> dict[str, str]:
        """Resolved visual state per element, by state name."""
        ids = element_ids if element_ids is not None else self._graph.ids()
        return {element_id: visual_state(self._state, element_id).value for element_id in ids}
