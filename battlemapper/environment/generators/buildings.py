"""Building dataclass for semantic building representation.

A Building wraps a footprint Region (the rectangle including its wall ring)
and records what the furnishing phase put inside it.
"""

from __future__ import annotations

from dataclasses import dataclass

from battlemapper.types import CellPos
from battlemapper.util.coordinates import Rect


@dataclass(frozen=True)
class Building:
    """A placed building.

    Attributes:
        id: Unique identifier within one generated map.
        footprint: The outer bounds of the building including walls.
        rooms: Interior rectangles left after partition walls were drawn.
            A building without partitions has a single room equal to its
            interior.
        doorways: Openings left in partition walls, one per partition.
        crates: Cells holding a crate.
    """

    id: int
    footprint: Rect
    rooms: tuple[Rect, ...] = ()
    doorways: tuple[CellPos, ...] = ()
    crates: tuple[CellPos, ...] = ()

    @property
    def interior_bounds(self) -> Rect:
        """Get the interior bounds (footprint minus walls)."""
        return self.footprint.interior()

    def contains_point(self, x: int, y: int) -> bool:
        """Check if a point is inside this building's footprint."""
        return self.footprint.contains_point(x, y)
