from __future__ import annotations

from battlemapper.environment.cell_types import ROAD_STATES, CellState
from battlemapper.environment.generators import GenerationResult
from battlemapper.environment.grid import Grid
from battlemapper.types import CellPos

_GLYPHS = {
    ".": CellState.EMPTY,
    "=": CellState.ROAD,
    "#": CellState.BUILDING_WALL,
    "_": CellState.BUILDING_INTERIOR,
    "+": CellState.RESERVED_WALL,
    "x": CellState.CRATE,
    "*": CellState.BUSH,
    "c": CellState.CAR,
}


def grid_from_rows(rows: list[str]) -> Grid:
    """Build a Grid from glyph rows, one string per row (top row first)."""
    grid = Grid(len(rows[0]), len(rows))
    for y, row in enumerate(rows):
        for x, glyph in enumerate(row):
            grid.set((x, y), _GLYPHS[glyph])
    return grid


def result_grid(result: GenerationResult) -> Grid:
    """A writable Grid holding a copy of a result's cells, for queries."""
    return Grid.from_cells(result.cells)


def border_cells(width: int, height: int) -> list[CellPos]:
    return [
        (x, y)
        for y in range(height)
        for x in range(width)
        if x in (0, width - 1) or y in (0, height - 1)
    ]


def assert_roads_connected(result: GenerationResult) -> None:
    """Every road cell must reach a border road cell through road cells."""
    grid = result_grid(result)
    roads = result.road_cells()
    starts = [c for c in border_cells(result.width, result.height) if c in roads]
    reached = grid.flood_fill(starts, ROAD_STATES)
    assert reached == roads


def assert_walls_closed(result: GenerationResult) -> None:
    """No flood from a building interior escapes its footprint."""
    grid = result_grid(result)
    passable = [s for s in CellState if s is not CellState.BUILDING_WALL]
    for building in result.buildings:
        interior = building.interior_bounds
        if interior.is_empty():
            continue
        starts = [
            c for c in interior.cells() if grid.get(c) != CellState.BUILDING_WALL
        ]
        reached = grid.flood_fill(starts, passable)
        assert all(building.contains_point(x, y) for x, y in reached), (
            f"building {building.id} leaks"
        )


def assert_no_overlap(result: GenerationResult) -> None:
    """Footprints are in bounds, disjoint, and kept ``margin`` apart."""
    margin = result.request.margin
    bounds = result.cells.shape
    regions = result.regions
    for i, region in enumerate(regions):
        assert region.x1 >= 0 and region.y1 >= 0
        assert region.x2 <= bounds[0] and region.y2 <= bounds[1]
        for other in regions[i + 1 :]:
            assert not region.expanded(margin).intersects(other)
