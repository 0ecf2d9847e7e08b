"""Surface configuration and project-level overrides.

Defaults are the fixed constants of the rendering surface. A project can
override them in the ``[tool.ownergraph]`` section of its pyproject.toml::

    [tool.ownergraph]
    min_zoom = 0.2
    max_zoom = 4.0

    [tool.ownergraph.timings]
    info_panel = 5.0

    [tool.ownergraph.layout]
    seed = 7
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ViewportSize:
    """Visible area of the rendering surface, in pixels."""

    width: float = 1280.0
    height: float = 800.0


@dataclass(frozen=True)
class LayoutConfig:
    """Force-directed layout parameters handed to the engine unchanged."""

    iterations: int = 100
    seed: int = 42
    ideal_edge_length: float = 100.0
    node_spacing: float = 70.0  # largest node diameter


@dataclass(frozen=True)
class InteractionTimings:
    """Auto-dismiss and revert delays, in seconds."""

    highlight: float = 0.8
    info_panel: float = 10.0
    toast: float = 1.5


@dataclass(frozen=True)
class SurfaceConfig:
    """Everything a GraphSurface needs besides its data.

    Attributes:
        min_zoom: Lower zoom bound
        max_zoom: Upper zoom bound
        pan_step: Pixels moved per arrow key
        zoom_step: Multiplicative zoom factor per zoom key
        fit_padding: Padding used by fit-to-elements operations
        modal_padding: Padding used when the expanded modal reframes the view
        menu_margin: Gap kept between a clamped context menu and the viewport edge
    """

    min_zoom: float = 0.1
    max_zoom: float = 3.0
    pan_step: float = 50.0
    zoom_step: float = 1.2
    fit_padding: float = 50.0
    modal_padding: float = 100.0
    menu_margin: float = 10.0
    viewport: ViewportSize = field(default_factory=ViewportSize)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    timings: InteractionTimings = field(default_factory=InteractionTimings)

    def clamp_zoom(self, level: float) -> float:
        """Clamp a zoom level to [min_zoom, max_zoom]."""
        return max(self.min_zoom, min(self.max_zoom, level))


_SECTIONS = {
    "viewport": ViewportSize,
    "layout": LayoutConfig,
    "timings": InteractionTimings,
}


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def config_from_dict(section: dict[str, Any]) -> SurfaceConfig:
    """Build a SurfaceConfig from a ``[tool.ownergraph]``-shaped mapping.

    Unknown keys raise ValueError so typos don't silently fall back to defaults.
    """
    config = SurfaceConfig()
    top_level = {f.name for f in fields(SurfaceConfig)} - set(_SECTIONS)
    overrides: dict[str, Any] = {}

    for key, value in section.items():
        if key in _SECTIONS:
            overrides[key] = _build_section(key, value)
        elif key in top_level:
            overrides[key] = value
        else:
            raise ValueError(f"Unknown [tool.ownergraph] key: '{key}'")

    config = replace(config, **overrides)
    if config.min_zoom <= 0 or config.min_zoom > config.max_zoom:
        raise ValueError(
            f"Invalid zoom bounds: min_zoom={config.min_zoom}, max_zoom={config.max_zoom}"
        )
    return config


def _build_section(name: str, values: dict[str, Any]) -> Any:
    cls = _SECTIONS[name]
    allowed = {f.name for f in fields(cls)}
    unknown = set(values) - allowed
    if unknown:
        raise ValueError(f"Unknown [tool.ownergraph.{name}] key(s): {', '.join(sorted(unknown))}")
    return cls(**values)


def load_config(start: Path | None = None) -> SurfaceConfig:
    """Load [tool.ownergraph] from the nearest pyproject.toml.

    Returns the default config if no pyproject.toml or no [tool.ownergraph] section.
    """
    path = find_pyproject(start)
    if path is None:
        return SurfaceConfig()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return SurfaceConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("ownergraph", {})
    if not section:
        return SurfaceConfig()

    return config_from_dict(section)
