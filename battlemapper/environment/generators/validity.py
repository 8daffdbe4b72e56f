"""Pure predicates defining legal placement.

The placement phases never propose a candidate and then test it. Instead
they ask the ValidityModel for the *set* of legal candidates (fitting
rectangles, size bounds, origin spans) and sample only from that set. The
predicates (`building_fits`, `road_step_valid`, `wall_complete`) describe the
same rules one candidate at a time; tests and debug assertions use them to
verify that construction never breaks the rules.
"""

from __future__ import annotations

from dataclasses import dataclass

from battlemapper.environment.cell_types import CellState
from battlemapper.environment.grid import Grid
from battlemapper.types import CellPos
from battlemapper.util.coordinates import Rect

from .free_space import FreeSpaceIndex


@dataclass(frozen=True)
class SizeBounds:
    """Inclusive range of building sizes that fit a free rectangle."""

    min_width: int
    max_width: int
    min_height: int
    max_height: int


class ValidityModel:
    """Legal-placement rules for one session.

    Attributes:
        grid: The grid under construction.
        index: The free-space index tracking reserved areas and the frontier.
        min_size: Smallest building side (wall ring included).
        max_size: Largest building side (wall ring included).
    """

    def __init__(
        self, grid: Grid, index: FreeSpaceIndex, min_size: int, max_size: int
    ) -> None:
        self.grid = grid
        self.index = index
        self.min_size = min_size
        self.max_size = max_size

    @property
    def min_area(self) -> int:
        return self.min_size * self.min_size

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def building_fits(self, region: Rect) -> bool:
        """Check a building footprint against the current free space.

        A footprint fits when both sides reach the minimum size and it lies
        entirely inside one free rectangle. Free rectangles already exclude
        earlier buildings plus their margin and every road cell.
        """
        if region.width < self.min_size or region.height < self.min_size:
            return False
        if region.area < self.min_area:
            return False
        return any(
            free.contains_rect(region) for free in self.index.largest_rectangles()
        )

    def road_step_valid(self, from_cell: CellPos | None, to_cell: CellPos) -> bool:
        """Check one step of road growth.

        Args:
            from_cell: The road cell the step grows out of, or None when the
                step starts a road from the border ring.
            to_cell: The cell the road would occupy.
        """
        if not self.grid.in_bounds(to_cell):
            return False
        if from_cell is not None:
            dx = abs(from_cell[0] - to_cell[0])
            dy = abs(from_cell[1] - to_cell[1])
            if dx + dy != 1:
                return False
            if self.grid.get(from_cell) != CellState.ROAD:
                return False
        return (
            self.grid.get(to_cell) == CellState.EMPTY
            and self.index.in_frontier(to_cell)
            and not self.index.is_blocked(to_cell)
        )

    def wall_complete(self, region: Rect) -> bool:
        """True when every cell of the footprint's outer ring is BUILDING_WALL."""
        return all(
            self.grid.get(cell) == CellState.BUILDING_WALL
            for cell in region.border_cells()
        )

    # -------------------------------------------------------------------------
    # Candidate derivation
    # -------------------------------------------------------------------------

    def fitting_rectangles(self) -> tuple[Rect, ...]:
        """Free rectangles that can hold a minimum-size building, largest first."""
        return tuple(
            free
            for free in self.index.largest_rectangles()
            if free.width >= self.min_size and free.height >= self.min_size
        )

    def size_bounds(self, free: Rect) -> SizeBounds:
        """Building sizes that fit inside ``free``.

        ``free`` must come from ``fitting_rectangles`` so the ranges are
        non-empty.
        """
        return SizeBounds(
            min_width=self.min_size,
            max_width=min(self.max_size, free.width),
            min_height=self.min_size,
            max_height=min(self.max_size, free.height),
        )

    @staticmethod
    def origin_span(free: Rect, width: int, height: int) -> Rect:
        """Every origin at which a ``width x height`` building stays inside ``free``.

        The returned rectangle's cells are the valid top-left corners; each of
        them yields a non-overlapping footprint.
        """
        return Rect(free.x1, free.y1, free.width - width + 1, free.height - height + 1)
