"""Event processor base classes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ownergraph.events.types import (
        ElementsHiddenEvent,
        ElementTapEvent,
        Event,
        OverlayClosedEvent,
        OverlayOpenedEvent,
        SelectionChangedEvent,
        ShortcutEvent,
        SurfaceErrorEvent,
        SurfaceMountedEvent,
        SurfaceUnmountedEvent,
    )


# Mapping from event class name to handler method name.
_EVENT_METHOD_MAP: dict[str, str] = {
    "SurfaceMountedEvent": "on_surface_mounted",
    "SurfaceErrorEvent": "on_surface_error",
    "SurfaceUnmountedEvent": "on_surface_unmounted",
    "ElementTapEvent": "on_element_tap",
    "SelectionChangedEvent": "on_selection_changed",
    "OverlayOpenedEvent": "on_overlay_opened",
    "OverlayClosedEvent": "on_overlay_closed",
    "ShortcutEvent": "on_shortcut",
    "ElementsHiddenEvent": "on_elements_hidden",
}


class EventProcessor:
    """Base class for event consumers.

    Subclass and override ``on_event`` to receive all events,
    or use ``TypedEventProcessor`` for per-type dispatch.
    """

    def on_event(self, event: Event) -> None:
        """Called for every event. Override in subclasses."""

    def shutdown(self) -> None:
        """Called once when the surface is unmounted. Override to flush buffers."""


class TypedEventProcessor(EventProcessor):
    """Dispatches ``on_event`` to typed handler methods automatically.

    Override any of the ``on_*`` methods below to handle specific event types.
    Unhandled event types are silently ignored.
    """

    def on_event(self, event: Event) -> None:
        method_name = _EVENT_METHOD_MAP.get(type(event).__name__)
        if method_name is not None:
            method = getattr(self, method_name, None)
            if method is not None:
                method(event)

    def on_surface_mounted(self, event: SurfaceMountedEvent) -> None: ...
    def on_surface_error(self, event: SurfaceErrorEvent) -> None: ...
    def on_surface_unmounted(self, event: SurfaceUnmountedEvent) -> None: ...
    def on_element_tap(self, event: ElementTapEvent) -> None: ...
    def on_selection_changed(self, event: SelectionChangedEvent) -> None: ...
    def on_overlay_opened(self, event: OverlayOpenedEvent) -> None: ...
    def on_overlay_closed(self, event: OverlayClosedEvent) -> None: ...
    def on_shortcut(self, event: ShortcutEvent) -> None: ...
    def on_elements_hidden(self, event: ElementsHiddenEvent) -> None: ...


class LoggingProcessor(TypedEventProcessor):
    """Writes interaction events to the standard ``logging`` tree.

    Clicks, selections and shortcuts log at INFO; overlay churn at DEBUG;
    engine failures at ERROR.
    """

    def __init__(self, logger_name: str = "ownergraph.interaction") -> None:
        self._logger = logging.getLogger(logger_name)

    def on_surface_mounted(self, event: SurfaceMountedEvent) -> None:
        self._logger.info(
            "Surface %s rendered %d nodes, %d edges (%d dropped)",
            event.surface_id,
            event.node_count,
            event.edge_count,
            event.dropped_count,
        )

    def on_surface_error(self, event: SurfaceErrorEvent) -> None:
        self._logger.error("Surface %s failed: %s (%s)", event.surface_id, event.error, event.error_type)

    def on_element_tap(self, event: ElementTapEvent) -> None:
        suffix = " (Ctrl+Click)" if event.multi_select else ""
        self._logger.info("%s clicked: %s%s", event.element_kind.capitalize(), event.element_id, suffix)

    def on_selection_changed(self, event: SelectionChangedEvent) -> None:
        self._logger.info("Selection after %s: %d element(s)", event.cause, len(event.selected))

    def on_overlay_opened(self, event: OverlayOpenedEvent) -> None:
        self._logger.debug("Overlay %s opened (replaced=%s)", event.kind, event.replaced)

    def on_overlay_closed(self, event: OverlayClosedEvent) -> None:
        self._logger.debug("Overlay %s closed: %s", event.kind, event.reason)

    def on_shortcut(self, event: ShortcutEvent) -> None:
        self._logger.info("Shortcut %s (%s)", event.action, event.key)

    def on_elements_hidden(self, event: ElementsHiddenEvent) -> None:
        verb = "Hid" if event.hidden else "Restored"
        self._logger.info("%s %d element(s)", verb, len(event.element_ids))
