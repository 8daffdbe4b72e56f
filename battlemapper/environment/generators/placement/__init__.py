"""Constructive placement engine.

A PlacementContext holds the grid and free-space index for one session; the
ElementPlacer walks it through the placement phases and freezes the result.
"""

from .context import PlacementContext
from .phase import PlacementPhase, PlacerState
from .placer import ElementPlacer

__all__ = [
    "ElementPlacer",
    "PlacementContext",
    "PlacementPhase",
    "PlacerState",
]
