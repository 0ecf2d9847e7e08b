"""Tests for CLI formatting utilities."""

import json

from ownergraph.cli._format import SCHEMA_VERSION, json_envelope, print_json, print_table, truncate_value


class TestTruncateValue:
    def test_short_string(self):
        assert truncate_value("org-1") == "org-1"

    def test_long_string(self):
        result = truncate_value("x" * 100, max_chars=10)
        assert result == "x" * 10 + "…"

    def test_non_string_is_json(self):
        assert truncate_value({"a": 1}) == '{"a": 1}'
        assert truncate_value(None) == "null"


class TestJsonEnvelope:
    def test_structure(self):
        envelope = json_envelope("check", {"node_count": 3})
        assert envelope["schema_version"] == SCHEMA_VERSION
        assert envelope["command"] == "check"
        assert envelope["data"] == {"node_count": 3}
        assert "generated_at" in envelope

    def test_print_json_to_file(self, tmp_path, capsys):
        target = tmp_path / "out.json"
        print_json("layout", {"zoom": 1.0}, str(target))

        assert json.loads(target.read_text())["data"] == {"zoom": 1.0}
        assert "Wrote layout output" in capsys.readouterr().out


class TestPrintTable:
    def test_empty_rows_prints_nothing(self, capsys):
        print_table("Dropped records", ["Kind", "Id"], [])
        assert capsys.readouterr().out == ""

    def test_renders_title_and_cells(self, capsys):
        print_table("Node positions", ["Node", "X"], [["org-1", "12.0"]], numeric=("X",))
        out = capsys.readouterr().out
        assert "Node positions" in out
        assert "org-1" in out
        assert "12.0" in out
