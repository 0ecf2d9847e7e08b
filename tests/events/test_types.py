"""Tests for event types, processor interfaces and the dispatcher."""

from __future__ import annotations

import logging

import pytest

from ownergraph.events import (
    EventDispatcher,
    EventProcessor,
    LoggingProcessor,
    TypedEventProcessor,
)
from ownergraph.events.types import (
    ElementsHiddenEvent,
    ElementTapEvent,
    OverlayClosedEvent,
    OverlayOpenedEvent,
    SelectionChangedEvent,
    ShortcutEvent,
    SurfaceErrorEvent,
    SurfaceMountedEvent,
    SurfaceUnmountedEvent,
)

ALL_EVENT_TYPES = (
    SurfaceMountedEvent,
    SurfaceErrorEvent,
    SurfaceUnmountedEvent,
    ElementTapEvent,
    SelectionChangedEvent,
    OverlayOpenedEvent,
    OverlayClosedEvent,
    ShortcutEvent,
    ElementsHiddenEvent,
)

# ---------------------------------------------------------------------------
# Event immutability
# ---------------------------------------------------------------------------


class TestEventImmutability:
    def test_frozen_prevents_mutation(self):
        event = ElementTapEvent(surface_id="s1", element_id="org-1")
        with pytest.raises(AttributeError):
            event.element_id = "other"  # type: ignore[misc]

    def test_default_fields(self):
        event = SelectionChangedEvent(surface_id="s1")
        assert event.selected == ()
        assert event.span_id  # auto-generated
        assert event.timestamp > 0

    def test_all_event_types_constructible(self):
        """Every event type can be instantiated with just surface_id."""
        for cls in ALL_EVENT_TYPES:
            e = cls(surface_id="s1")
            assert e.surface_id == "s1"

    def test_span_ids_unique(self):
        assert ShortcutEvent().span_id != ShortcutEvent().span_id


# ---------------------------------------------------------------------------
# TypedEventProcessor dispatch
# ---------------------------------------------------------------------------


class _Recorder(TypedEventProcessor):
    """Records which handler methods were called."""

    def __init__(self):
        self.calls: list[str] = []

    def on_element_tap(self, event):
        self.calls.append("on_element_tap")

    def on_selection_changed(self, event):
        self.calls.append("on_selection_changed")

    def on_shortcut(self, event):
        self.calls.append("on_shortcut")


class TestTypedEventProcessor:
    def test_dispatches_by_type(self):
        recorder = _Recorder()
        recorder.on_event(ElementTapEvent())
        recorder.on_event(SelectionChangedEvent())
        recorder.on_event(ShortcutEvent())
        assert recorder.calls == ["on_element_tap", "on_selection_changed", "on_shortcut"]

    def test_unhandled_types_ignored(self):
        recorder = _Recorder()
        recorder.on_event(OverlayOpenedEvent())
        assert recorder.calls == []

    def test_every_event_type_has_a_handler(self):
        processor = TypedEventProcessor()
        for cls in ALL_EVENT_TYPES:
            processor.on_event(cls())


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class _Exploding(EventProcessor):
    def on_event(self, event):
        raise RuntimeError("boom")

    def shutdown(self):
        raise RuntimeError("shutdown boom")


class _Collector(EventProcessor):
    def __init__(self):
        self.events = []
        self.shutdown_called = False

    def on_event(self, event):
        self.events.append(event)

    def shutdown(self):
        self.shutdown_called = True


class TestEventDispatcher:
    def test_fans_out_in_order(self):
        a, b = _Collector(), _Collector()
        dispatcher = EventDispatcher([a, b])
        event = ShortcutEvent(action="Zoom in", key="+")

        dispatcher.emit(event)
        assert a.events == [event]
        assert b.events == [event]
        assert dispatcher.active

    def test_inactive_without_processors(self):
        assert not EventDispatcher().active

    def test_failing_processor_is_logged_not_raised(self, caplog):
        collector = _Collector()
        dispatcher = EventDispatcher([_Exploding(), collector])

        with caplog.at_level(logging.WARNING, logger="ownergraph.events.dispatcher"):
            dispatcher.emit(ShortcutEvent())
            dispatcher.shutdown()

        assert len(collector.events) == 1
        assert collector.shutdown_called
        assert "failed on ShortcutEvent" in caplog.text
        assert "failed on shutdown" in caplog.text

    def test_strict_mode_raises(self):
        dispatcher = EventDispatcher([_Exploding()], strict=True)
        with pytest.raises(RuntimeError, match="boom"):
            dispatcher.emit(ShortcutEvent())
        with pytest.raises(RuntimeError, match="shutdown boom"):
            dispatcher.shutdown()

    def test_strict_shutdown_still_reaches_every_processor(self):
        collector = _Collector()
        dispatcher = EventDispatcher([_Exploding(), collector], strict=True)
        with pytest.raises(RuntimeError, match="shutdown boom"):
            dispatcher.shutdown()
        assert collector.shutdown_called

    def test_closed_after_shutdown(self):
        collector = _Collector()
        dispatcher = EventDispatcher([collector])
        dispatcher.shutdown()
        dispatcher.shutdown()

        dispatcher.emit(ShortcutEvent())
        assert collector.events == []
        assert dispatcher.closed
        assert not dispatcher.active
        with pytest.raises(RuntimeError, match="shut down"):
            dispatcher.add(_Collector())

    def test_add_processor(self):
        late = _Collector()
        dispatcher = EventDispatcher()
        dispatcher.emit(ShortcutEvent())
        dispatcher.add(late)
        dispatcher.emit(ShortcutEvent(key="f"))
        assert [e.key for e in late.events] == ["f"]


# ---------------------------------------------------------------------------
# LoggingProcessor
# ---------------------------------------------------------------------------


class TestLoggingProcessor:
    def test_tap_with_modifier(self, caplog):
        processor = LoggingProcessor()
        with caplog.at_level(logging.INFO, logger="ownergraph.interaction"):
            processor.on_event(ElementTapEvent(element_id="org-1", element_kind="node", multi_select=True))
        assert "Node clicked: org-1 (Ctrl+Click)" in caplog.text

    def test_error_logged_at_error(self, caplog):
        processor = LoggingProcessor(logger_name="custom")
        with caplog.at_level(logging.ERROR, logger="custom"):
            processor.on_event(SurfaceErrorEvent(error="bad", error_type="RuntimeError"))
        assert caplog.records[-1].levelno == logging.ERROR

    def test_overlay_churn_is_debug(self, caplog):
        processor = LoggingProcessor()
        with caplog.at_level(logging.INFO, logger="ownergraph.interaction"):
            processor.on_event(OverlayClosedEvent(kind="node-info", reason="timeout"))
        assert caplog.text == ""
