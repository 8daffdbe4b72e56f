"""Furnishing phase: partition walls, crates, cars and bushes.

Partitioning works like a guillotine cut. Each building starts with one room
(its interior). Each cut takes the largest room that can still be split,
draws a wall straight across it and leaves one doorway cell open in the new
wall. A cut is only legal when:

- both halves keep at least ``MIN_ROOM_SIZE`` cells across, and
- both ends of the wall meet solid BUILDING_WALL, so a new wall never runs
  into an earlier doorway.

Crates go in room corners away from doorways. Each road segment long enough
gets one parked car away from its ends. Bushes go on open ground outside
the building margins. Nothing is written to a footprint's outer ring, so
wall closure survives this phase.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Literal, TypeAlias

from battlemapper.config import (
    BUSH_DIVISOR,
    CAR_END_CLEARANCE,
    CRATE_DIVISOR,
    MIN_ROOM_SIZE,
    PARTITION_DIVISOR,
)
from battlemapper.environment.cell_types import CellState
from battlemapper.environment.generators.buildings import Building
from battlemapper.environment.generators.placement.context import PlacementContext
from battlemapper.environment.generators.placement.phase import (
    PlacementPhase,
    PlacerState,
)
from battlemapper.environment.grid import Grid
from battlemapper.types import CellPos
from battlemapper.util.coordinates import Rect

logger = logging.getLogger(__name__)

Cut: TypeAlias = tuple[Literal["x", "y"], int]


class FurnishingPhase(PlacementPhase):
    """Adds interior detail and outdoor scatter to a generated map."""

    state = PlacerState.FURNISHING

    def apply(self, ctx: PlacementContext) -> None:
        """Partition and furnish every building, park cars, scatter bushes.

        Does nothing when the request has ``furnish=False``.

        Args:
            ctx: The placement context to modify.
        """
        if not ctx.request.furnish:
            return

        rng = ctx.rng("placement.furnishing")
        for i, building in enumerate(ctx.buildings):
            building = self._partition(ctx.grid, rng, building)
            building = self._place_crates(ctx.grid, rng, building)
            ctx.buildings[i] = building
            logger.debug(
                f"Building {building.id}: {len(building.rooms)} rooms,"
                f" {len(building.crates)} crates"
            )

        cars = self._place_cars(ctx, rng)
        bushes = self._place_bushes(ctx, rng)
        logger.debug(f"Parked {cars} cars, scattered {bushes} bushes")

    # -------------------------------------------------------------------------
    # Partition walls
    # -------------------------------------------------------------------------

    def _partition(
        self, grid: Grid, rng: random.Random, building: Building
    ) -> Building:
        interior = building.interior_bounds
        if interior.is_empty():
            return building

        rooms = [interior]
        doorways: list[CellPos] = []
        for _ in range(interior.area // PARTITION_DIVISOR):
            for room in sorted(rooms, key=lambda r: (-r.area, r.y1, r.x1)):
                cuts = _legal_cuts(grid, room)
                if cuts:
                    break
            else:
                break

            axis, line = rng.choice(cuts)
            first, second, wall = _split_room(room, axis, line)
            doorway = rng.choice(list(wall.cells()))
            for cell in wall.cells():
                if cell != doorway:
                    grid.set(cell, CellState.BUILDING_WALL)

            rooms.remove(room)
            rooms.extend((first, second))
            doorways.append(doorway)

        return replace(building, rooms=tuple(rooms), doorways=tuple(doorways))

    # -------------------------------------------------------------------------
    # Crates
    # -------------------------------------------------------------------------

    def _place_crates(
        self, grid: Grid, rng: random.Random, building: Building
    ) -> Building:
        """Put at most one crate in each of a few rooms, always in a corner."""
        count = min(building.footprint.area // CRATE_DIVISOR, len(building.rooms))
        if count <= 0:
            return building

        near_doorways = {
            n for doorway in building.doorways for n in grid.neighbors(doorway)
        }
        crates: list[CellPos] = []
        for room in rng.sample(building.rooms, count):
            corners = [
                cell
                for cell in dict.fromkeys(_corners(room))
                if cell not in near_doorways
                and grid.get(cell) == CellState.BUILDING_INTERIOR
            ]
            if not corners:
                continue
            cell = rng.choice(corners)
            grid.set(cell, CellState.CRATE)
            crates.append(cell)

        return replace(building, crates=tuple(crates))

    # -------------------------------------------------------------------------
    # Cars
    # -------------------------------------------------------------------------

    def _place_cars(self, ctx: PlacementContext, rng: random.Random) -> int:
        """Park one car on every road segment long enough to hold one."""
        count = 0
        for segment in ctx.road_segments:
            if len(segment) <= 2 * CAR_END_CLEARANCE:
                continue
            position = rng.randrange(
                CAR_END_CLEARANCE, len(segment) - CAR_END_CLEARANCE
            )
            ctx.grid.set(segment.cells[position], CellState.CAR)
            count += 1
        return count

    # -------------------------------------------------------------------------
    # Bushes
    # -------------------------------------------------------------------------

    def _place_bushes(self, ctx: PlacementContext, rng: random.Random) -> int:
        """Scatter bushes on open ground clear of every building margin."""
        count = ctx.grid.count(CellState.EMPTY) // BUSH_DIVISOR
        candidates = [
            cell
            for cell in ctx.grid.cells_of(CellState.EMPTY)
            if not ctx.index.is_blocked(cell)
        ]
        count = min(count, len(candidates))
        for cell in rng.sample(candidates, count):
            ctx.grid.set(cell, CellState.BUSH)
        return count


def _legal_cuts(grid: Grid, room: Rect) -> list[Cut]:
    """Every wall line that splits ``room`` legally, columns first."""
    cuts: list[Cut] = []
    for x in range(room.x1 + MIN_ROOM_SIZE, room.x2 - MIN_ROOM_SIZE):
        if (
            grid.get((x, room.y1 - 1)) == CellState.BUILDING_WALL
            and grid.get((x, room.y2)) == CellState.BUILDING_WALL
        ):
            cuts.append(("x", x))
    for y in range(room.y1 + MIN_ROOM_SIZE, room.y2 - MIN_ROOM_SIZE):
        if (
            grid.get((room.x1 - 1, y)) == CellState.BUILDING_WALL
            and grid.get((room.x2, y)) == CellState.BUILDING_WALL
        ):
            cuts.append(("y", y))
    return cuts


def _split_room(
    room: Rect, axis: Literal["x", "y"], line: int
) -> tuple[Rect, Rect, Rect]:
    """Split ``room`` along ``line``.

    Returns:
        The room before the line, the room after it, and the wall itself.
    """
    if axis == "x":
        return (
            Rect.from_bounds(room.x1, room.y1, line, room.y2),
            Rect.from_bounds(line + 1, room.y1, room.x2, room.y2),
            Rect.from_bounds(line, room.y1, line + 1, room.y2),
        )
    return (
        Rect.from_bounds(room.x1, room.y1, room.x2, line),
        Rect.from_bounds(room.x1, line + 1, room.x2, room.y2),
        Rect.from_bounds(room.x1, line, room.x2, line + 1),
    )


def _corners(room: Rect) -> tuple[CellPos, ...]:
    return (
        (room.x1, room.y1),
        (room.x2 - 1, room.y1),
        (room.x1, room.y2 - 1),
        (room.x2 - 1, room.y2 - 1),
    )
