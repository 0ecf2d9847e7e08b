"""Validation and transformation of raw node/edge records into renderable elements.

Input records come from an untrusted data-fetch collaborator. They may be
mappings (decoded JSON) or objects exposing the same attributes, including the
elements produced here, so validating validated output changes nothing.

Invalid records are dropped, never repaired, and never fatal: each drop is
logged and recorded in the ValidationResult next to the error describing it.

Duplicate ids follow a last-wins policy: a later record with an id already seen
replaces the earlier element in place, and a warning is logged.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from ownergraph.exceptions import DataValidationError, ReferentialIntegrityError

logger = logging.getLogger(__name__)

SHORT_ID_LENGTH = 8


@dataclass(frozen=True)
class Position:
    """2D coordinate in model space."""

    x: float
    y: float


@dataclass(frozen=True)
class NodeElement:
    """A validated node, ready to be rendered.

    Attributes:
        id: Trimmed, non-empty id
        type: Node type (organization, repository, team, user, topic, ...)
        label: Display label after the fallback chain
        data: Opaque record data, copied
        position: Optional fixed position
    """

    id: str
    type: str
    label: str
    data: dict[str, Any] = field(default_factory=dict, hash=False)
    position: Position | None = None

    @property
    def is_node(self) -> bool:
        return True


@dataclass(frozen=True)
class EdgeElement:
    """A validated edge whose endpoints are validated nodes."""

    id: str
    source: str
    target: str
    type: str
    label: str = ""

    @property
    def is_node(self) -> bool:
        return False


RenderableElement = Union[NodeElement, EdgeElement]


@dataclass(frozen=True)
class DroppedRecord:
    """An input record that did not make it into the element set."""

    record: Any
    error: DataValidationError | ReferentialIntegrityError


@dataclass
class ValidationResult:
    """Output of validate_elements.

    Attributes:
        nodes: Valid node elements, input order
        edges: Valid edge elements, input order
        dropped: Every rejected record with the reason it was rejected
    """

    nodes: list[NodeElement] = field(default_factory=list)
    edges: list[EdgeElement] = field(default_factory=list)
    dropped: list[DroppedRecord] = field(default_factory=list)

    @property
    def elements(self) -> list[RenderableElement]:
        """All nodes, then all edges. Empty when there are no valid nodes."""
        if not self.nodes:
            return []
        return [*self.nodes, *self.edges]

    def __len__(self) -> int:
        return len(self.elements)


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------


def _get(record: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an attribute-style record."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _trimmed(value: Any) -> str | None:
    """Return the stripped string, or None if value isn't a non-blank string."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def display_label(record: Any) -> str:
    """Derive the label a node is displayed with.

    Order: explicit non-empty label, ``data["name"]``, ``data["login"]``,
    then ``"{type} {short id}"`` where the id is cut to 8 characters and
    suffixed with "..." only when it was longer.
    """
    explicit = _get(record, "label")
    if _trimmed(explicit) is not None:
        return explicit

    data = _get(record, "data")
    if isinstance(data, Mapping):
        for key in ("name", "login"):
            candidate = _trimmed(data.get(key))
            if candidate is not None:
                return candidate

    node_id = str(_get(record, "id", "")).strip()
    short_id = node_id[:SHORT_ID_LENGTH] + "..." if len(node_id) > SHORT_ID_LENGTH else node_id
    return f"{_get(record, 'type')} {short_id}"


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


def _node_problems(record: Any) -> list[str]:
    problems = []
    if _trimmed(_get(record, "id")) is None:
        problems.append("id must be a non-empty string")
    node_type = _get(record, "type")
    if not isinstance(node_type, str) or not node_type:
        problems.append("type must be a non-empty string")
    return problems


def _position(record: Any) -> Position | None:
    raw = _get(record, "position")
    if raw is None:
        return None
    x, y = _get(raw, "x"), _get(raw, "y")
    if _is_finite_number(x) and _is_finite_number(y):
        return Position(float(x), float(y))
    logger.warning("Ignoring malformed position on node %r: %r", _get(record, "id"), raw)
    return None


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _to_node_element(record: Any) -> NodeElement:
    data = _get(record, "data")
    return NodeElement(
        id=_get(record, "id").strip(),
        type=_get(record, "type"),
        label=display_label(record),
        data=dict(data) if isinstance(data, Mapping) else {},
        position=_position(record),
    )


def validate_nodes(
    nodes: Iterable[Any] | None,
    result: ValidationResult | None = None,
) -> ValidationResult:
    """Validate node records into ``result.nodes`` (last write wins on duplicates)."""
    result = result if result is not None else ValidationResult()
    by_id: dict[str, NodeElement] = {}

    for record in nodes or ():
        problems = _node_problems(record)
        if problems:
            error = DataValidationError("node", _get(record, "id"), problems)
            logger.warning("Filtering out node with invalid properties: %s", error)
            result.dropped.append(DroppedRecord(record, error))
            continue
        element = _to_node_element(record)
        if element.id in by_id:
            logger.warning("Duplicate node id '%s': later record replaces earlier one", element.id)
        by_id[element.id] = element

    result.nodes = list(by_id.values())
    return result


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------


def _edge_problems(record: Any) -> list[str]:
    problems = []
    for name in ("id", "source", "target"):
        if _trimmed(_get(record, name)) is None:
            problems.append(f"{name} must be a non-empty string")
    if not _get(record, "type"):
        problems.append("type is required")
    return problems


def _to_edge_element(record: Any) -> EdgeElement:
    label = _get(record, "label")
    return EdgeElement(
        id=_get(record, "id").strip(),
        source=_get(record, "source").strip(),
        target=_get(record, "target").strip(),
        type=str(_get(record, "type")),
        label=label if isinstance(label, str) else "",
    )


def validate_edges(
    edges: Iterable[Any] | None,
    valid_node_ids: set[str],
    result: ValidationResult | None = None,
) -> ValidationResult:
    """Validate edge records against an already-validated node id set.

    Nodes and edges share one id namespace: an edge whose id is already a
    node id is dropped, since the node may be the endpoint of other edges.
    Among edges, the later record wins.
    """
    result = result if result is not None else ValidationResult()
    by_id: dict[str, EdgeElement] = {}

    for record in edges or ():
        problems = _edge_problems(record)
        if problems:
            error = DataValidationError("edge", _get(record, "id"), problems)
            logger.warning("Filtering out edge with invalid properties: %s", error)
            result.dropped.append(DroppedRecord(record, error))
            continue

        element = _to_edge_element(record)
        if element.id in valid_node_ids:
            error = DataValidationError("edge", element.id, [f"id '{element.id}' is already used by a node"])
            logger.warning("Filtering out edge with invalid properties: %s", error)
            result.dropped.append(DroppedRecord(record, error))
            continue

        missing = [
            endpoint
            for endpoint in (element.source, element.target)
            if endpoint not in valid_node_ids
        ]
        if missing:
            integrity_error = ReferentialIntegrityError(element.id, list(dict.fromkeys(missing)))
            logger.warning("Filtering out edge %s: references invalid node(s)", element.id)
            result.dropped.append(DroppedRecord(record, integrity_error))
            continue

        if element.id in by_id:
            logger.warning("Duplicate edge id '%s': later record replaces earlier one", element.id)
        by_id[element.id] = element

    result.edges = list(by_id.values())
    return result


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def validate_elements(
    nodes: Iterable[Any] | None,
    edges: Iterable[Any] | None,
) -> ValidationResult:
    """Validate both record sequences and keep track of what was dropped."""
    result = validate_nodes(nodes)
    if not result.nodes:
        logger.warning("No valid nodes after transformation")
    validate_edges(edges, {node.id for node in result.nodes}, result)

    if result.nodes:
        logger.info(
            "Created %d elements: %d nodes, %d edges",
            len(result.nodes) + len(result.edges),
            len(result.nodes),
            len(result.edges),
        )
    return result


def create_elements(
    nodes: Iterable[Any] | None,
    edges: Iterable[Any] | None,
) -> list[RenderableElement]:
    """Turn raw node/edge records into the renderable element sequence.

    Args:
        nodes: Node records (mappings or objects with id/type/label/data/position)
        edges: Edge records (mappings or objects with id/source/target/type/label)

    Returns:
        All valid nodes followed by all valid edges. Every edge's endpoints are
        in the node set. Empty if no node is valid.

    Example:
        >>> create_elements([{"id": "org-1", "type": "organization", "label": "Acme"}], [])
        [NodeElement(id='org-1', type='organization', label='Acme', data={}, position=None)]
    """
    return validate_elements(nodes, edges).elements


def split_elements(
    elements: Iterable[RenderableElement],
) -> tuple[list[NodeElement], list[EdgeElement]]:
    """Separate an element sequence back into its nodes and edges."""
    nodes: list[NodeElement] = []
    edges: list[EdgeElement] = []
    for element in elements:
        (nodes if element.is_node else edges).append(element)
    return nodes, edges
