"""Shared fixtures: sample ownership graphs, a recording engine, event capture."""

from __future__ import annotations

import pytest

from ownergraph.config import SurfaceConfig
from ownergraph.events import EventProcessor
from ownergraph.overlays import InMemoryOverlayHost
from ownergraph.surface import GraphSurface
from ownergraph.timers import ManualScheduler

# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


def org_graph() -> tuple[list[dict], list[dict]]:
    """Acme org owning two repos, one team member of the org, one user in the team."""
    nodes = [
        {"id": "org-1", "type": "organization", "label": "Acme", "data": {"login": "acme"}},
        {"id": "repo-1", "type": "repository", "label": "api", "data": {"name": "api", "stars": 12}},
        {"id": "repo-2", "type": "repository", "label": "web", "data": {"name": "web"}},
        {"id": "team-1", "type": "team", "label": "Platform", "data": {}},
        {"id": "user-1", "type": "user", "label": "", "data": {"login": "octocat"}},
    ]
    edges = [
        {"id": "e1", "source": "org-1", "target": "repo-1", "type": "owns", "label": "owns"},
        {"id": "e2", "source": "org-1", "target": "repo-2", "type": "owns", "label": "owns"},
        {"id": "e3", "source": "team-1", "target": "org-1", "type": "member_of", "label": ""},
        {"id": "e4", "source": "user-1", "target": "team-1", "type": "member_of", "label": "member"},
        {"id": "e5", "source": "team-1", "target": "repo-1", "type": "codeowner", "label": "codeowner"},
    ]
    return nodes, edges


@pytest.fixture
def graph_records():
    return org_graph()


# ---------------------------------------------------------------------------
# Engine and processor doubles
# ---------------------------------------------------------------------------


class RecordingEngine:
    """RenderEngine double that records every call it receives."""

    instances: list[RecordingEngine] = []

    def __init__(self, elements, config: SurfaceConfig):
        self.elements = list(elements)
        self.config = config
        self.styles: dict[str, dict] = {}
        self.calls: list[tuple] = []
        self.level = 1.0
        self.destroyed = False
        RecordingEngine.instances.append(self)

    def destroy(self):
        self.destroyed = True
        self.calls.append(("destroy",))

    def apply_style(self, element_id, style):
        assert not self.destroyed, "apply_style after destroy"
        self.styles[element_id] = dict(style)

    def zoom(self):
        return self.level

    def zoom_to(self, level, center=None):
        self.level = level
        self.calls.append(("zoom_to", level))

    def pan_by(self, dx, dy):
        self.calls.append(("pan_by", dx, dy))

    def fit(self, element_ids, padding):
        self.calls.append(("fit", None if element_ids is None else tuple(element_ids), padding))

    def center(self, element_ids=None):
        self.calls.append(("center", element_ids))


class FailingEngine:
    """Engine factory that always raises during construction."""

    def __init__(self, elements, config):
        raise RuntimeError("WebGL context lost")


class ListProcessor(EventProcessor):
    """Collects all events for assertion."""

    def __init__(self):
        self.events: list = []
        self.shutdown_called = False

    def on_event(self, event):
        self.events.append(event)

    def shutdown(self):
        self.shutdown_called = True

    def of_type(self, cls):
        return [e for e in self.events if isinstance(e, cls)]


@pytest.fixture(autouse=True)
def _reset_engine_instances():
    RecordingEngine.instances = []
    yield
    RecordingEngine.instances = []


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def host():
    return InMemoryOverlayHost()


@pytest.fixture
def events():
    return ListProcessor()


@pytest.fixture
def surface(scheduler, host, events, graph_records):
    """A mounted surface over the sample org graph, driven by a manual clock."""
    s = GraphSurface(
        RecordingEngine,
        scheduler=scheduler,
        overlay_host=host,
        processors=[events],
        surface_id="test-surface",
    )
    s.set_data(*graph_records)
    yield s
    s.unmount()
