"""`ownergraph` command: validate graph payloads and preview their layout.

Needs the ``cli`` extra (``pip install 'ownergraph[cli]'``).

    ownergraph check FILE     list records validation would drop
    ownergraph layout FILE    run the force layout headlessly, print positions

Validation warnings are only shown with ``--verbose``.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _require_typer() -> None:
    try:
        import typer  # noqa: F401
    except ImportError:
        print("Error: the CLI needs typer. Install with: pip install 'ownergraph[cli]'", file=sys.stderr)
        raise SystemExit(1) from None


def configure_logging(verbose: bool) -> None:
    """Route ``ownergraph`` loggers to stderr: errors only, INFO and up when verbose."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("ownergraph")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(logging.INFO if verbose else logging.ERROR)


def create_app():
    """Build the Typer app with the check and layout commands."""
    _require_typer()

    import typer

    from ownergraph.cli.graph_cmd import register_commands

    app = typer.Typer(
        name="ownergraph",
        help="Validate ownership graph files and preview their layout.",
        no_args_is_help=True,
    )

    @app.callback()
    def _root(
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Show validation and layout logs"),
    ) -> None:
        configure_logging(verbose)

    register_commands(app)
    return app


def main() -> None:
    create_app()()
