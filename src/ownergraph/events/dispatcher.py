"""Fan-out of surface events to the registered processors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ownergraph.events.processor import EventProcessor

if TYPE_CHECKING:
    from ownergraph.events.types import Event

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Delivers each event to every processor, in registration order.

    Delivery is best-effort: a processor that raises is logged and skipped so
    a broken observer never breaks an interaction. ``strict=True`` makes
    processor errors propagate instead, which is what tests want.

    Once ``shutdown`` has run the dispatcher is closed: later events are
    dropped, since the surface that produced them is gone.
    """

    def __init__(
        self,
        processors: list[EventProcessor] | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self._processors: list[EventProcessor] = list(processors or ())
        self._strict = strict
        self._closed = False

    @property
    def active(self) -> bool:
        """True while open and with at least one processor registered."""
        return not self._closed and bool(self._processors)

    @property
    def closed(self) -> bool:
        return self._closed

    def add(self, processor: EventProcessor) -> None:
        """Register another processor; it sees events emitted from now on."""
        if self._closed:
            raise RuntimeError("Cannot add a processor to a dispatcher that was shut down")
        self._processors.append(processor)

    def emit(self, event: Event) -> None:
        if self._closed:
            logger.debug("Dropping %s emitted after shutdown", type(event).__name__)
            return
        for processor in self._processors:
            self._call(processor, "on_event", event)

    def shutdown(self) -> None:
        """Close the dispatcher and let every processor flush.

        In strict mode all processors are still shut down; the first error is
        re-raised afterwards.
        """
        if self._closed:
            return
        self._closed = True
        first_error: Exception | None = None
        for processor in self._processors:
            try:
                self._call(processor, "shutdown")
            except Exception as exc:
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def _call(self, processor: EventProcessor, method: str, *args: object) -> None:
        try:
            getattr(processor, method)(*args)
        except Exception:
            if self._strict:
                raise
            target = type(args[0]).__name__ if args else "shutdown"
            logger.warning("EventProcessor %r failed on %s", processor, target, exc_info=True)
