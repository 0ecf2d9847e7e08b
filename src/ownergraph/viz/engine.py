"""Headless force-directed rendering engine backed by NetworkX.

Positions come from ``networkx.spring_layout`` (Fruchterman-Reingold), run for
a fixed number of iterations with a fixed seed so the same input always lays
out the same way. The engine keeps a viewport (zoom + pan) and per-element
style overrides, which is all the surface adapter drives.

Coordinates:
    rendered = model * zoom + pan
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

import networkx as nx

from ownergraph.config import SurfaceConfig
from ownergraph.elements import EdgeElement, NodeElement, RenderableElement

Point = tuple[float, float]
GOLDEN_ANGLE = 2.399963


class ForceLayoutEngine:
    """Lays out a validated element sequence and tracks its viewport.

    Construction runs the layout and fits every element into the viewport.
    It raises ValueError on an empty sequence; the surface never constructs an
    engine for an empty graph.
    """

    def __init__(self, elements: Sequence[RenderableElement], config: SurfaceConfig) -> None:
        nodes = [el for el in elements if isinstance(el, NodeElement)]
        if not nodes:
            raise ValueError("ForceLayoutEngine needs at least one node")

        self._config = config
        self._edges = {el.id: el for el in elements if isinstance(el, EdgeElement)}
        self._positions = compute_layout(nodes, list(self._edges.values()), config)
        self._styles: dict[str, dict[str, Any]] = {el.id: {} for el in elements}
        self._zoom = 1.0
        self._pan: Point = (0.0, 0.0)
        self._destroyed = False
        self.fit(None, config.fit_padding)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self) -> None:
        self._destroyed = True
        self._styles.clear()

    def _check_alive(self) -> None:
        if self._destroyed:
            raise RuntimeError("ForceLayoutEngine used after destroy()")

    # ------------------------------------------------------------------
    # Styles
    # ------------------------------------------------------------------

    def apply_style(self, element_id: str, style: Mapping[str, Any]) -> None:
        self._check_alive()
        if element_id in self._styles:
            self._styles[element_id] = dict(style)

    def style(self, element_id: str) -> dict[str, Any]:
        """Current style override of an element (empty if never styled)."""
        return dict(self._styles.get(element_id, {}))

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def positions(self) -> dict[str, Point]:
        """Model-space position of every node."""
        return dict(self._positions)

    def rendered_position(self, node_id: str) -> Point:
        x, y = self._positions[node_id]
        return (x * self._zoom + self._pan[0], y * self._zoom + self._pan[1])

    def pan(self) -> Point:
        return self._pan

    def zoom(self) -> float:
        return self._zoom

    def zoom_to(self, level: float, center: Point | None = None) -> None:
        self._check_alive()
        level = self._config.clamp_zoom(level)
        cx, cy = center if center is not None else self._viewport_center()
        ratio = level / self._zoom
        self._pan = (cx - (cx - self._pan[0]) * ratio, cy - (cy - self._pan[1]) * ratio)
        self._zoom = level

    def pan_by(self, dx: float, dy: float) -> None:
        self._check_alive()
        self._pan = (self._pan[0] + dx, self._pan[1] + dy)

    def fit(self, element_ids: Sequence[str] | None, padding: float) -> None:
        self._check_alive()
        box = self._bounding_box(element_ids)
        if box is None:
            return
        min_x, min_y, max_x, max_y = box
        viewport = self._config.viewport
        width = max(max_x - min_x, 1.0)
        height = max(max_y - min_y, 1.0)
        zoom = min(
            (viewport.width - 2 * padding) / width,
            (viewport.height - 2 * padding) / height,
        )
        self._zoom = self._config.clamp_zoom(zoom)
        self._center_on(box)

    def center(self, element_ids: Sequence[str] | None = None) -> None:
        self._check_alive()
        box = self._bounding_box(element_ids)
        if box is not None:
            self._center_on(box)

    def _center_on(self, box: tuple[float, float, float, float]) -> None:
        min_x, min_y, max_x, max_y = box
        vx, vy = self._viewport_center()
        mid_x, mid_y = (min_x + max_x) / 2, (min_y + max_y) / 2
        self._pan = (vx - mid_x * self._zoom, vy - mid_y * self._zoom)

    def _viewport_center(self) -> Point:
        return (self._config.viewport.width / 2, self._config.viewport.height / 2)

    def _bounding_box(self, element_ids: Sequence[str] | None) -> tuple[float, float, float, float] | None:
        """Model-space box around the given elements, node size included."""
        if element_ids is None:
            node_ids = list(self._positions)
        else:
            node_ids = []
            for element_id in element_ids:
                if element_id in self._positions:
                    node_ids.append(element_id)
                elif element_id in self._edges:
                    edge = self._edges[element_id]
                    node_ids.extend((edge.source, edge.target))
        if not node_ids:
            return None

        radius = self._config.layout.node_spacing / 2
        xs = [self._positions[n][0] for n in node_ids]
        ys = [self._positions[n][1] for n in node_ids]
        return (min(xs) - radius, min(ys) - radius, max(xs) + radius, max(ys) + radius)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def compute_layout(
    nodes: Sequence[NodeElement],
    edges: Sequence[EdgeElement],
    config: SurfaceConfig,
) -> dict[str, Point]:
    """Run the force-directed layout and spread the result so nodes don't overlap.

    Nodes that carry a position are pinned there and only the free nodes are
    moved apart. When nothing is pinned the whole layout is rescaled. Either
    way every pair involving a free node ends up at least ``node_spacing``
    apart.
    """
    layout = config.layout
    G = nx.Graph()
    G.add_nodes_from(node.id for node in nodes)
    G.add_edges_from((edge.source, edge.target) for edge in edges)

    pinned = {node.id: (node.position.x, node.position.y) for node in nodes if node.position}

    if len(G) == 1:
        only = nodes[0]
        return {only.id: pinned.get(only.id, (0.0, 0.0))}

    if pinned:
        raw = nx.spring_layout(
            G,
            k=layout.ideal_edge_length,
            pos=pinned,
            fixed=list(pinned),
            iterations=layout.iterations,
            seed=layout.seed,
        )
        positions = {node_id: (float(p[0]), float(p[1])) for node_id, p in raw.items()}
        return _spread_around_pinned(positions, list(pinned), layout.node_spacing)

    raw = nx.spring_layout(
        G,
        iterations=layout.iterations,
        seed=layout.seed,
        scale=layout.ideal_edge_length * math.sqrt(len(G)) / 2,
    )
    positions = {node_id: (float(p[0]), float(p[1])) for node_id, p in raw.items()}
    return _spread(positions, layout.node_spacing)


def _spread(positions: dict[str, Point], spacing: float) -> dict[str, Point]:
    """Scale positions about the origin so the closest pair is ``spacing`` apart."""
    closest = min_pair_distance(list(positions.values()))
    if closest >= spacing:
        return positions
    # Coincident points can't be separated by scaling; nudge them apart first.
    if closest == 0.0:
        positions = _jitter_coincident(positions, spacing)
        closest = min_pair_distance(list(positions.values()))
    factor = spacing / closest
    return {node_id: (x * factor, y * factor) for node_id, (x, y) in positions.items()}


def _spread_around_pinned(positions: dict[str, Point], pinned: list[str], spacing: float) -> dict[str, Point]:
    """Move only the free nodes until every pair involving one is ``spacing`` apart.

    Free nodes are first scaled away from the centroid of the pinned nodes,
    which keeps the shape of the layout. Whatever still collides is then
    walked outward on a golden-angle spiral around its own position until it
    clears every node already placed. Pinned nodes never move.
    """
    pinned_set = set(pinned)
    free = [node_id for node_id in positions if node_id not in pinned_set]
    if not free:
        return positions

    cx = sum(positions[n][0] for n in pinned) / len(pinned)
    cy = sum(positions[n][1] for n in pinned) / len(pinned)
    closest = min(
        (
            math.dist(positions[a], positions[b])
            for i, a in enumerate(free)
            for b in [*free[i + 1 :], *pinned]
        ),
        default=math.inf,
    )
    if 0.0 < closest < spacing:
        factor = spacing / closest
        for node_id in free:
            x, y = positions[node_id]
            positions[node_id] = (cx + (x - cx) * factor, cy + (y - cy) * factor)

    placed = [positions[n] for n in pinned]
    for node_id in free:
        origin = point = positions[node_id]
        step = 0
        while any(math.dist(point, other) < spacing for other in placed):
            step += 1
            angle = step * GOLDEN_ANGLE
            radius = spacing * math.sqrt(step)
            point = (origin[0] + radius * math.cos(angle), origin[1] + radius * math.sin(angle))
        positions[node_id] = point
        placed.append(point)
    return positions


def _jitter_coincident(positions: dict[str, Point], spacing: float) -> dict[str, Point]:
    seen: dict[Point, int] = {}
    result = {}
    for node_id, point in positions.items():
        count = seen.get(point, 0)
        seen[point] = count + 1
        angle = count * GOLDEN_ANGLE
        offset = spacing * math.sqrt(count)
        result[node_id] = (point[0] + offset * math.cos(angle), point[1] + offset * math.sin(angle))
    return result


def min_pair_distance(points: list[Point]) -> float:
    """Smallest distance between two points (inf for fewer than two points).

    Sweep over x-sorted points, skipping pairs whose x gap already exceeds
    the best distance found.
    """
    ordered = sorted(points)
    best = math.inf
    for i, (x1, y1) in enumerate(ordered):
        for x2, y2 in ordered[i + 1 :]:
            if x2 - x1 >= best:
                break
            best = min(best, math.hypot(x2 - x1, y2 - y1))
    return best
