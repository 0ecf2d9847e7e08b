"""Dedicated error panel shown in place of the canvas when the engine fails."""

from __future__ import annotations

import html as html_module
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ErrorPanel:
    """Renders a SurfaceError: title, message and local time of failure.

    Displayable in notebooks through ``_repr_html_``; ``str()`` gives the
    plain-text form used by the CLI.
    """

    message: str
    timestamp: float
    title: str = "Graph Rendering Error"

    @property
    def time_label(self) -> str:
        return datetime.fromtimestamp(self.timestamp).strftime("%H:%M:%S")

    def __str__(self) -> str:
        return f"{self.title}\n{self.message}\nTime: {self.time_label}"

    def _repr_html_(self) -> str:
        """Return HTML representation for Jupyter display."""
        return (
            '<div data-testid="graph-error" style="width: 100%; min-height: 200px; '
            "display: flex; align-items: center; justify-content: center; "
            'background-color: #f8f9fa; border: 1px solid #dee2e6; border-radius: 4px;">'
            '<div style="text-align: center; padding: 20px;">'
            f'<h3 style="color: #dc3545; margin-bottom: 10px;">{html_module.escape(self.title)}</h3>'
            f'<p style="color: #6c757d; font-size: 14px;">{html_module.escape(self.message)}</p>'
            f'<p style="color: #6c757d; font-size: 12px;">Time: {self.time_label}</p>'
            "</div></div>"
        )
