"""Placement phases run by the ElementPlacer.

Each phase transforms the PlacementContext in a specific way:
- Buildings: reserve footprints from the free-space index
- Roads: grow the road network out of the frontier
- Walls: close every footprint's wall ring
- Furnishing: partition walls, crates and bushes
"""

from .buildings import BuildingPlacementPhase
from .furnishing import FurnishingPhase
from .roads import RoadGrowthPhase
from .walls import WallClosurePhase

__all__ = [
    "BuildingPlacementPhase",
    "FurnishingPhase",
    "RoadGrowthPhase",
    "WallClosurePhase",
]
