"""Graph CLI commands: check, layout."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from ownergraph.cli._format import print_json, print_table, truncate_value
from ownergraph.config import load_config
from ownergraph.elements import ValidationResult, validate_elements
from ownergraph.exceptions import DataValidationError
from ownergraph.overlays import HeadlessOverlayHost
from ownergraph.surface import GraphSurface
from ownergraph.viz import ForceLayoutEngine


def load_payload(path: str) -> tuple[list[Any], list[Any]]:
    """Read ``{"nodes": [...], "edges": [...]}`` or the API envelope ``{"data": {...}}``."""
    file = Path(path)
    if not file.is_file():
        print(f"Error: File not found: '{path}'")
        raise typer.Exit(1)

    try:
        payload = json.loads(file.read_text())
    except json.JSONDecodeError as e:
        print(f"Error: '{path}' is not valid JSON: {e}")
        raise typer.Exit(1) from e

    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    if not isinstance(payload, dict):
        print(f"Error: Expected a JSON object with 'nodes' and 'edges', got {type(payload).__name__}")
        raise typer.Exit(1)

    nodes = payload.get("nodes") or []
    edges = payload.get("edges") or []
    if not isinstance(nodes, list) or not isinstance(edges, list):
        print("Error: 'nodes' and 'edges' must be JSON arrays")
        raise typer.Exit(1)
    return nodes, edges


def _dropped_rows(result: ValidationResult) -> list[dict[str, Any]]:
    rows = []
    for dropped in result.dropped:
        error = dropped.error
        if isinstance(error, DataValidationError):
            rows.append({"kind": error.kind, "id": error.record_id, "reason": "; ".join(error.reasons)})
        else:
            rows.append({"kind": "edge", "id": error.edge_id, "reason": f"missing node(s): {', '.join(error.missing)}"})
    return rows


def register_commands(app: typer.Typer) -> None:
    """Register `check` and `layout` as top-level commands on the app."""

    @app.command("check")
    def check_cmd(
        file: Annotated[str, typer.Argument(help="Graph JSON file")],
        strict: Annotated[bool, typer.Option("--strict", help="Exit with code 1 if any record was dropped")] = False,
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
    ):
        """Validate a graph file and report the records that would be dropped."""
        nodes, edges = load_payload(file)
        result = validate_elements(nodes, edges)
        dropped = _dropped_rows(result)

        if as_json:
            data = {
                "node_count": len(result.nodes),
                "edge_count": len(result.edges) if result.nodes else 0,
                "element_count": len(result),
                "dropped": dropped,
            }
            print_json("check", data, output)
        else:
            print(
                f"\nGraph: {len(result.nodes)} nodes | {len(result.edges)} edges | {len(dropped)} dropped\n"
            )
            if not result.nodes:
                print("  No valid nodes: the surface will show an empty canvas.\n")
            rows = [[row["kind"], truncate_value(row["id"] or "—"), row["reason"]] for row in dropped]
            print_table("Dropped records", ["Kind", "Id", "Reason"], rows)

        if strict and dropped:
            raise typer.Exit(1)

    @app.command("layout")
    def layout_cmd(
        file: Annotated[str, typer.Argument(help="Graph JSON file")],
        seed: Annotated[int | None, typer.Option("--seed", help="Layout seed (overrides config)")] = None,
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
    ):
        """Lay out a graph with the built-in force-directed engine and print node positions."""
        from dataclasses import replace

        nodes, edges = load_payload(file)
        config = load_config()
        if seed is not None:
            config = replace(config, layout=replace(config.layout, seed=seed))

        with GraphSurface(
            ForceLayoutEngine,
            config,
            overlay_host=HeadlessOverlayHost(),
            processors=[],
        ) as surface:
            surface.set_data(nodes, edges)

            if surface.error is not None:
                print(str(surface.render_error_panel()))
                raise typer.Exit(1)

            engine = surface.engine
            positions = engine.positions() if engine is not None else {}
            node_types = {el.id: el.type for el in surface.elements if el.is_node}

            if as_json:
                data = {
                    "zoom": engine.zoom() if engine is not None else None,
                    "positions": {node_id: {"x": x, "y": y} for node_id, (x, y) in positions.items()},
                }
                print_json("layout", data, output)
                return

            if not positions:
                print("\n  No valid nodes to lay out.")
                return

            print(f"\nLayout: {len(positions)} nodes | zoom {engine.zoom():.2f}\n")
            rows = [
                [node_id, node_types.get(node_id, "—"), f"{x:.1f}", f"{y:.1f}"]
                for node_id, (x, y) in positions.items()
            ]
            print_table("Node positions", ["Node", "Type", "X", "Y"], rows, numeric=("X", "Y"))
