"""Adjacency view over a validated element sequence."""

from __future__ import annotations

from collections.abc import Sequence

import networkx as nx

from ownergraph.elements import EdgeElement, NodeElement, RenderableElement


class ElementGraph:
    """NetworkX-backed lookup structure for the interaction layer.

    Wraps a MultiDiGraph whose nodes are node-element ids and whose edges are
    keyed by edge-element id, so parallel relationships between the same two
    nodes (e.g. ``owns`` and ``codeowner``) stay distinct.

    Attributes:
        elements: The validated element sequence, in render order
    """

    def __init__(self, elements: Sequence[RenderableElement]) -> None:
        self.elements = list(elements)
        self._by_id: dict[str, RenderableElement] = {el.id: el for el in self.elements}
        if len(self._by_id) != len(self.elements):
            raise ValueError("Element ids must be unique across nodes and edges; validate records first")
        self._order = {element_id: i for i, element_id in enumerate(self._by_id)}
        self._nx_graph = self._build_graph(self.elements)

    @staticmethod
    def _build_graph(elements: Sequence[RenderableElement]) -> nx.MultiDiGraph:
        G = nx.MultiDiGraph()
        for el in elements:
            if isinstance(el, NodeElement):
                G.add_node(el.id, element=el)
        for el in elements:
            if isinstance(el, EdgeElement):
                G.add_edge(el.source, el.target, key=el.id, element=el)
        return G

    @property
    def nx_graph(self) -> nx.MultiDiGraph:
        """The underlying NetworkX graph (read-only by convention)."""
        return self._nx_graph

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def element(self, element_id: str) -> RenderableElement | None:
        return self._by_id.get(element_id)

    def is_node(self, element_id: str) -> bool:
        return isinstance(self._by_id.get(element_id), NodeElement)

    def is_edge(self, element_id: str) -> bool:
        return isinstance(self._by_id.get(element_id), EdgeElement)

    def ids(self) -> list[str]:
        """Every element id in render order (nodes first)."""
        return list(self._by_id)

    def node_ids(self) -> list[str]:
        return [i for i, el in self._by_id.items() if isinstance(el, NodeElement)]

    def edge_ids(self) -> list[str]:
        return [i for i, el in self._by_id.items() if isinstance(el, EdgeElement)]

    def ordered(self, element_ids) -> list[str]:
        """Sort ids by render order, dropping unknown ones."""
        known = [i for i in element_ids if i in self._order]
        return sorted(dict.fromkeys(known), key=self._order.__getitem__)

    def endpoints(self, edge_id: str) -> tuple[str, str] | None:
        el = self._by_id.get(edge_id)
        if not isinstance(el, EdgeElement):
            return None
        return el.source, el.target

    def incoming(self, node_id: str) -> list[EdgeElement]:
        """Edges whose target is node_id, in render order."""
        if not self.is_node(node_id):
            return []
        edges = [data["element"] for _, _, data in self._nx_graph.in_edges(node_id, data=True)]
        return self._sorted_edges(edges)

    def outgoing(self, node_id: str) -> list[EdgeElement]:
        """Edges whose source is node_id, in render order."""
        if not self.is_node(node_id):
            return []
        edges = [data["element"] for _, _, data in self._nx_graph.out_edges(node_id, data=True)]
        return self._sorted_edges(edges)

    def connected_edges(self, node_id: str) -> list[str]:
        """Ids of every edge touching node_id (self-loops counted once)."""
        edges = self.outgoing(node_id) + self.incoming(node_id)
        return self.ordered(edge.id for edge in edges)

    def neighborhood(self, node_id: str) -> list[str]:
        """The node, its touching edges, and every node one of those edges reaches."""
        if not self.is_node(node_id):
            return []
        ids = [node_id]
        for edge_id in self.connected_edges(node_id):
            source, target = self.endpoints(edge_id)
            ids.extend((edge_id, source, target))
        return self.ordered(ids)

    def _sorted_edges(self, edges: list[EdgeElement]) -> list[EdgeElement]:
        return sorted({e.id: e for e in edges}.values(), key=lambda e: self._order[e.id])
