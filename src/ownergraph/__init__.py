"""Ownergraph - interactive rendering core for organizational ownership graphs."""

from ownergraph.config import (
    InteractionTimings,
    LayoutConfig,
    SurfaceConfig,
    ViewportSize,
    load_config,
)
from ownergraph.elements import (
    EdgeElement,
    NodeElement,
    Position,
    RenderableElement,
    ValidationResult,
    create_elements,
    validate_elements,
)
from ownergraph.engine import EngineFactory, RenderEngine
from ownergraph.events import (
    BaseEvent,
    Event,
    EventDispatcher,
    EventProcessor,
    LoggingProcessor,
    TypedEventProcessor,
)
from ownergraph.exceptions import (
    DataValidationError,
    OverlaySurfaceUnavailableError,
    OwnerGraphError,
    ReferentialIntegrityError,
    RenderEngineInitError,
    SurfaceDestroyedError,
)
from ownergraph.graph import ElementGraph
from ownergraph.interaction import (
    BackgroundContextTap,
    BackgroundTap,
    ContextTap,
    DocumentClick,
    DoubleTap,
    FocusTarget,
    HoverEnter,
    HoverLeave,
    InteractionState,
    KeyPress,
    MenuSelect,
    PanelClick,
    Tap,
)
from ownergraph.overlays import (
    HeadlessOverlayHost,
    InMemoryOverlayHost,
    OverlayKind,
    OverlayManager,
    PanelPart,
)
from ownergraph.surface import GraphSurface, HandleResult, SurfaceError
from ownergraph.timers import AsyncioScheduler, ManualScheduler

__version__ = "0.1.0"

__all__ = [
    # Surface
    "GraphSurface",
    "HandleResult",
    "SurfaceError",
    "RenderEngine",
    "EngineFactory",
    # Elements
    "EdgeElement",
    "ElementGraph",
    "NodeElement",
    "Position",
    "RenderableElement",
    "ValidationResult",
    "create_elements",
    "validate_elements",
    # Input events
    "BackgroundContextTap",
    "BackgroundTap",
    "ContextTap",
    "DocumentClick",
    "DoubleTap",
    "FocusTarget",
    "HoverEnter",
    "HoverLeave",
    "KeyPress",
    "MenuSelect",
    "PanelClick",
    "Tap",
    "InteractionState",
    # Overlays
    "HeadlessOverlayHost",
    "InMemoryOverlayHost",
    "OverlayKind",
    "OverlayManager",
    "PanelPart",
    # Timers
    "AsyncioScheduler",
    "ManualScheduler",
    # Events
    "BaseEvent",
    "Event",
    "EventDispatcher",
    "EventProcessor",
    "LoggingProcessor",
    "TypedEventProcessor",
    # Config
    "InteractionTimings",
    "LayoutConfig",
    "SurfaceConfig",
    "ViewportSize",
    "load_config",
    # Exceptions
    "DataValidationError",
    "OverlaySurfaceUnavailableError",
    "OwnerGraphError",
    "ReferentialIntegrityError",
    "RenderEngineInitError",
    "SurfaceDestroyedError",
]
