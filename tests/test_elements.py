"""Tests for record validation and element transformation."""

from __future__ import annotations

import logging

import pytest

from ownergraph.elements import (
    EdgeElement,
    NodeElement,
    Position,
    create_elements,
    display_label,
    split_elements,
    validate_elements,
)
from ownergraph.exceptions import DataValidationError, ReferentialIntegrityError

from conftest import org_graph


def _node(id="n1", type="user", label="N", **extra):
    return {"id": id, "type": type, "label": label, **extra}


def _edge(id="e1", source="n1", target="n2", type="owns", label="owns"):
    return {"id": id, "source": source, "target": target, "type": type, "label": label}


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_single_organization(self):
        elements = create_elements([{"id": "org-1", "type": "organization", "label": "Acme"}], [])

        assert len(elements) == 1
        assert elements[0] == NodeElement(id="org-1", type="organization", label="Acme")

    def test_blank_id_is_filtered_and_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ownergraph.elements"):
            elements = create_elements([{"id": "", "type": "user"}], [])

        assert elements == []
        assert "Filtering out node with invalid properties" in caplog.text
        assert "No valid nodes after transformation" in caplog.text

    def test_dangling_edge_dropped_node_kept(self):
        result = validate_elements(
            [{"id": "org-1", "type": "organization", "label": "Acme"}],
            [{"id": "e1", "source": "missing", "target": "org-1", "type": "owns", "label": "owns"}],
        )

        assert [n.id for n in result.nodes] == ["org-1"]
        assert result.edges == []
        assert len(result.dropped) == 1
        error = result.dropped[0].error
        assert isinstance(error, ReferentialIntegrityError)
        assert error.edge_id == "e1"
        assert error.missing == ["missing"]


# ---------------------------------------------------------------------------
# Node validation
# ---------------------------------------------------------------------------


class TestNodeValidation:
    @pytest.mark.parametrize(
        "record",
        [
            {"type": "user"},
            {"id": "   ", "type": "user"},
            {"id": 42, "type": "user"},
            {"id": "n1"},
            {"id": "n1", "type": ""},
            {"id": "n1", "type": None},
        ],
    )
    def test_invalid_nodes_dropped(self, record):
        result = validate_elements([record], [])

        assert result.nodes == []
        assert len(result.dropped) == 1
        assert isinstance(result.dropped[0].error, DataValidationError)
        assert result.dropped[0].record is record

    def test_id_is_trimmed(self):
        result = validate_elements([_node(id="  n1  ")], [])
        assert result.nodes[0].id == "n1"

    def test_data_is_copied(self):
        data = {"name": "api"}
        (node,) = create_elements([_node(data=data)], [])

        data["name"] = "changed"
        assert node.data == {"name": "api"}

    def test_position_kept(self):
        (node,) = create_elements([_node(position={"x": 10, "y": -5.5})], [])
        assert node.position == Position(10.0, -5.5)

    @pytest.mark.parametrize("position", [{"x": "10", "y": 0}, {"x": float("nan"), "y": 0}, {"x": 1}, {"x": True, "y": 0}])
    def test_malformed_position_ignored(self, position):
        (node,) = create_elements([_node(position=position)], [])
        assert node.position is None

    def test_attribute_style_records(self):
        class Record:
            id = "n1"
            type = "team"
            label = "Platform"
            data = {"slug": "platform"}

        (node,) = create_elements([Record()], [])
        assert node.label == "Platform"
        assert node.data == {"slug": "platform"}

    def test_none_inputs(self):
        result = validate_elements(None, None)
        assert result.elements == []
        assert result.dropped == []


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


class TestDisplayLabel:
    def test_explicit_label(self):
        assert display_label(_node(label="Acme")) == "Acme"

    def test_falls_back_to_name(self):
        assert display_label(_node(label="", data={"name": "api", "login": "x"})) == "api"

    def test_falls_back_to_login(self):
        assert display_label(_node(label="  ", data={"login": "octocat"})) == "octocat"

    def test_falls_back_to_type_and_short_id(self):
        record = {"id": "abcdef123456", "type": "user", "label": ""}
        assert display_label(record) == "user abcdef12..."

    def test_short_id_not_suffixed(self):
        record = {"id": "abc", "type": "topic"}
        assert display_label(record) == "topic abc"

    def test_explicit_label_kept_as_given(self):
        assert display_label(_node(label=" Acme ")) == " Acme "


# ---------------------------------------------------------------------------
# Edge validation
# ---------------------------------------------------------------------------


class TestEdgeValidation:
    def test_missing_fields_dropped(self):
        result = validate_elements(
            [_node("n1"), _node("n2")],
            [{"id": "e1", "source": "n1", "target": "", "type": "owns"}, {"id": "e2", "source": "n1", "target": "n2"}],
        )

        assert result.edges == []
        assert [type(d.error) for d in result.dropped] == [DataValidationError, DataValidationError]

    def test_endpoints_checked_after_trim(self):
        result = validate_elements([_node("n1"), _node("n2")], [_edge(source=" n1 ", target="n2\n")])

        assert result.edges == [EdgeElement(id="e1", source="n1", target="n2", type="owns", label="owns")]

    def test_edge_to_invalid_node_dropped(self):
        result = validate_elements([_node("n1"), {"id": "n2"}], [_edge()])

        assert result.edges == []
        integrity = [d.error for d in result.dropped if isinstance(d.error, ReferentialIntegrityError)]
        assert integrity[0].missing == ["n2"]

    def test_no_nodes_means_no_elements(self):
        result = validate_elements([], [_edge()])
        assert result.elements == []
        assert len(result) == 0

    def test_missing_label_becomes_empty(self):
        record = _edge()
        del record["label"]
        result = validate_elements([_node("n1"), _node("n2")], [record])
        assert result.edges[0].label == ""


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestProperties:
    def test_every_edge_endpoint_is_a_node(self):
        nodes, edges = org_graph()
        edges = edges + [_edge("bad-1", "org-1", "ghost"), _edge("bad-2", "", "org-1")]
        nodes = nodes + [{"id": "", "type": "user"}]

        elements = create_elements(nodes, edges)
        node_ids = {el.id for el in elements if el.is_node}
        for el in elements:
            if not el.is_node:
                assert el.source in node_ids
                assert el.target in node_ids

    def test_revalidating_output_is_a_noop(self):
        elements = create_elements(*org_graph())
        nodes, edges = split_elements(elements)

        again = validate_elements(nodes, edges)

        assert again.elements == elements
        assert again.dropped == []

    def test_nodes_precede_edges(self):
        elements = create_elements(*org_graph())
        kinds = [el.is_node for el in elements]
        assert kinds == sorted(kinds, reverse=True)


# ---------------------------------------------------------------------------
# Duplicate ids
# ---------------------------------------------------------------------------


class TestDuplicateIds:
    def test_later_node_wins_in_first_position(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ownergraph.elements"):
            result = validate_elements([_node("a", label="first"), _node("b"), _node("a", label="second")], [])

        assert [(n.id, n.label) for n in result.nodes] == [("a", "second"), ("b", "N")]
        assert "Duplicate node id 'a'" in caplog.text

    def test_later_edge_wins(self):
        result = validate_elements(
            [_node("n1"), _node("n2")],
            [_edge(label="first"), _edge(label="second")],
        )
        assert [e.label for e in result.edges] == ["second"]

    def test_edge_cannot_reuse_node_id(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ownergraph.elements"):
            result = validate_elements(
                [_node("a"), _node("b"), _node("x", label="X")],
                [_edge(id="x", source="a", target="b")],
            )

        assert [n.id for n in result.nodes] == ["a", "b", "x"]
        assert result.edges == []
        (dropped,) = result.dropped
        assert isinstance(dropped.error, DataValidationError)
        assert dropped.error.reasons == ["id 'x' is already used by a node"]
        assert "already used by a node" in caplog.text


class TestSummaryLog:
    def test_creation_summary_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="ownergraph.elements"):
            create_elements(*org_graph())

        assert "Created 10 elements: 5 nodes, 5 edges" in caplog.text
