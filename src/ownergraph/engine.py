"""Interface between the surface adapter and a concrete rendering engine.

The engine owns layout and drawing; the surface only tells it what to show.
Anything satisfying ``RenderEngine`` can be plugged in through an
``EngineFactory``. ``ownergraph.viz.engine.ForceLayoutEngine`` is the built-in
headless implementation.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ownergraph.config import SurfaceConfig
    from ownergraph.elements import RenderableElement


@runtime_checkable
class RenderEngine(Protocol):
    """Operations the surface adapter performs on a live engine instance.

    Viewport operations use the engine's own viewport math. Zoom levels passed
    in are already clamped by the caller.
    """

    def destroy(self) -> None:
        """Release the instance. Must be safe to call more than once."""
        ...

    def apply_style(self, element_id: str, style: Mapping[str, Any]) -> None:
        """Replace the per-element style override of one element."""
        ...

    def zoom(self) -> float:
        """Current zoom level."""
        ...

    def zoom_to(self, level: float, center: tuple[float, float] | None = None) -> None:
        """Set the zoom level, keeping the rendered point ``center`` fixed."""
        ...

    def pan_by(self, dx: float, dy: float) -> None:
        """Move the content by (dx, dy) rendered pixels."""
        ...

    def fit(self, element_ids: Sequence[str] | None, padding: float) -> None:
        """Zoom and pan so the given elements (all if None) fill the viewport."""
        ...

    def center(self, element_ids: Sequence[str] | None = None) -> None:
        """Pan so the given elements (all if None) are centred, zoom unchanged."""
        ...


EngineFactory = Callable[["Sequence[RenderableElement]", "SurfaceConfig"], RenderEngine]
"""Builds an engine for a non-empty element sequence. May raise."""
