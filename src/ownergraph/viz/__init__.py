"""Built-in rendering engine and error view.

Usage:
    from ownergraph import GraphSurface
    from ownergraph.viz import ForceLayoutEngine

    surface = GraphSurface(ForceLayoutEngine)
    surface.set_data(nodes, edges)
"""

from ownergraph.viz.engine import ForceLayoutEngine
from ownergraph.viz.error_view import ErrorPanel

__all__ = ["ErrorPanel", "ForceLayoutEngine"]
