"""Integration tests for the check and layout commands.

Uses CliRunner to test command output without subprocess overhead.
"""

import json
import logging

import pytest

typer = pytest.importorskip("typer")

from typer.testing import CliRunner  # noqa: E402

from ownergraph.cli import create_app  # noqa: E402

from conftest import org_graph  # noqa: E402

runner_cli = CliRunner()


@pytest.fixture
def app():
    return create_app()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_package_logger():
    package_logger = logging.getLogger("ownergraph")
    handlers, level = list(package_logger.handlers), package_logger.level
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)


def _write(tmp_path, payload, name="graph.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload))
    return str(path)


@pytest.fixture
def graph_file(tmp_path):
    nodes, edges = org_graph()
    return _write(tmp_path, {"nodes": nodes, "edges": edges})


@pytest.fixture
def dirty_file(tmp_path):
    nodes, edges = org_graph()
    nodes.append({"id": "", "type": "user"})
    edges.append({"id": "e9", "source": "org-1", "target": "ghost", "type": "owns", "label": ""})
    return _write(tmp_path, {"nodes": nodes, "edges": edges}, name="dirty.json")


class TestCheck:
    def test_clean_graph(self, app, graph_file):
        result = runner_cli.invoke(app, ["check", graph_file])
        assert result.exit_code == 0
        assert "5 nodes | 5 edges | 0 dropped" in result.output

    def test_dropped_records_listed(self, app, dirty_file):
        result = runner_cli.invoke(app, ["check", dirty_file])
        assert result.exit_code == 0
        assert "2 dropped" in result.output
        assert "Dropped records" in result.output
        assert "e9" in result.output

    def test_strict_fails_on_drops(self, app, dirty_file, graph_file):
        assert runner_cli.invoke(app, ["check", dirty_file, "--strict"]).exit_code == 1
        assert runner_cli.invoke(app, ["check", graph_file, "--strict"]).exit_code == 0

    def test_json(self, app, dirty_file):
        result = runner_cli.invoke(app, ["check", dirty_file, "--json"])
        assert result.exit_code == 0

        envelope = json.loads(result.output)
        assert envelope["schema_version"] == 1
        assert envelope["command"] == "check"
        data = envelope["data"]
        assert (data["node_count"], data["edge_count"], data["element_count"]) == (5, 5, 10)
        reasons = {row["id"]: row["reason"] for row in data["dropped"]}
        assert reasons["e9"] == "missing node(s): ghost"
        assert "id must be a non-empty string" in reasons[""]

    def test_api_envelope_unwrapped(self, app, tmp_path):
        nodes, edges = org_graph()
        path = _write(tmp_path, {"success": True, "data": {"nodes": nodes, "edges": edges}})
        result = runner_cli.invoke(app, ["check", path, "--json"])
        assert json.loads(result.output)["data"]["node_count"] == 5

    def test_no_valid_nodes(self, app, tmp_path):
        path = _write(tmp_path, {"nodes": [], "edges": []})
        result = runner_cli.invoke(app, ["check", path])
        assert result.exit_code == 0
        assert "empty canvas" in result.output

    def test_missing_file(self, app):
        result = runner_cli.invoke(app, ["check", "nope.json"])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_json(self, app, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{nodes:")
        result = runner_cli.invoke(app, ["check", str(path)])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_nodes_must_be_list(self, app, tmp_path):
        path = _write(tmp_path, {"nodes": {"id": "x"}, "edges": []})
        result = runner_cli.invoke(app, ["check", path])
        assert result.exit_code == 1


class TestLayout:
    def test_json_positions(self, app, graph_file):
        result = runner_cli.invoke(app, ["layout", graph_file, "--json"])
        assert result.exit_code == 0

        data = json.loads(result.output)["data"]
        assert set(data["positions"]) == {"org-1", "repo-1", "repo-2", "team-1", "user-1"}
        assert 0.1 <= data["zoom"] <= 3.0

    def test_seed_is_deterministic(self, app, graph_file):
        first = runner_cli.invoke(app, ["layout", graph_file, "--json", "--seed", "7"])
        second = runner_cli.invoke(app, ["layout", graph_file, "--json", "--seed", "7"])
        assert json.loads(first.output)["data"] == json.loads(second.output)["data"]

    def test_table(self, app, graph_file):
        result = runner_cli.invoke(app, ["layout", graph_file])
        assert result.exit_code == 0
        assert "Layout: 5 nodes" in result.output
        assert "Node positions" in result.output

    def test_output_file(self, app, graph_file, tmp_path):
        target = tmp_path / "layout.json"
        result = runner_cli.invoke(app, ["layout", graph_file, "--json", "--output", str(target)])
        assert result.exit_code == 0
        assert json.loads(target.read_text())["command"] == "layout"

    def test_empty_graph(self, app, tmp_path):
        path = _write(tmp_path, {"nodes": [], "edges": []})
        result = runner_cli.invoke(app, ["layout", path])
        assert result.exit_code == 0
        assert "No valid nodes" in result.output

    def test_config_seed_from_pyproject(self, app, graph_file, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[tool.ownergraph.layout]\nseed = 7\n")
        from_config = runner_cli.invoke(app, ["layout", graph_file, "--json"])
        explicit = runner_cli.invoke(app, ["layout", graph_file, "--json", "--seed", "7"])
        assert json.loads(from_config.output)["data"] == json.loads(explicit.output)["data"]


class TestVerbose:
    def test_validation_warnings_hidden_by_default(self, app, dirty_file):
        result = runner_cli.invoke(app, ["check", dirty_file])
        assert "Filtering out" not in result.output

    def test_verbose_shows_validation_warnings(self, app, dirty_file):
        result = runner_cli.invoke(app, ["--verbose", "check", dirty_file])
        assert result.exit_code == 0
        assert "Filtering out edge e9" in result.output
