"""Exceptions for the ownergraph rendering and interaction core."""

from __future__ import annotations

from typing import Any


class OwnerGraphError(Exception):
    """Base class for every error raised or recorded by ownergraph."""


class DataValidationError(OwnerGraphError):
    """A node or edge record failed structural validation.

    Never raised by the validator itself: instances are recorded next to the
    dropped record so callers can report them. A partial graph is still a
    valid result.

    Attributes:
        kind: "node" or "edge"
        record_id: The record's id as given (may be empty or missing)
        reasons: Which checks failed
        message: Human-readable error message
    """

    def __init__(
        self,
        kind: str,
        record_id: Any,
        reasons: list[str],
        message: str | None = None,
    ) -> None:
        self.kind = kind
        self.record_id = record_id
        self.reasons = reasons
        self.message = message or self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        reasons = ", ".join(self.reasons)
        return f"Invalid {self.kind} {self.record_id!r}: {reasons}"


class ReferentialIntegrityError(OwnerGraphError):
    """An edge references a node that is not in the validated node set.

    Recorded (not raised) when the edge is dropped.

    Attributes:
        edge_id: The dropped edge
        missing: Endpoint ids that are not valid nodes
        message: Human-readable error message
    """

    def __init__(
        self,
        edge_id: str,
        missing: list[str],
        message: str | None = None,
    ) -> None:
        self.edge_id = edge_id
        self.missing = missing
        self.message = message or self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        missing_str = ", ".join(f"'{m}'" for m in self.missing)
        return f"Edge '{self.edge_id}' references invalid node(s): {missing_str}"


class RenderEngineInitError(OwnerGraphError):
    """The rendering engine failed while being constructed.

    Built at the surface boundary from the engine's exception and surfaced to
    the caller as an error state. The original exception is the ``__cause__``.

    Attributes:
        element_count: Number of elements the engine was given
        message: Human-readable error message
    """

    def __init__(self, cause: BaseException, element_count: int) -> None:
        self.element_count = element_count
        self.message = f"Failed to initialize rendering engine: {cause}"
        super().__init__(self.message)
        self.__cause__ = cause


class OverlaySurfaceUnavailableError(OwnerGraphError):
    """The host environment has no surface an overlay can attach to.

    Raised by overlay hosts; the overlay manager turns it into a no-op.
    """


class SurfaceDestroyedError(OwnerGraphError):
    """An operation was attempted on a surface after it was unmounted."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f"Cannot run '{operation}': the graph surface has been unmounted. "
            f"Create a new GraphSurface to render again."
        )
