"""Tests for partition walls, crates, parked cars and bushes."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from battlemapper import config
from battlemapper.environment.cell_types import CellState
from battlemapper.environment.generators import GenerationRequest, GenerationResult
from battlemapper.environment.generators.buildings import Building
from battlemapper.environment.generators.placement import PlacementContext
from battlemapper.environment.generators.placement.phases import FurnishingPhase
from battlemapper.environment.generators.placement.phases.furnishing import (
    _legal_cuts,
)
from battlemapper.util.coordinates import Rect
from tests.helpers import (
    assert_roads_connected,
    assert_walls_closed,
    grid_from_rows,
    result_grid,
)

Runner = Callable[[GenerationRequest], GenerationResult]


def _furnished(make_request: Callable[..., GenerationRequest], run: Runner, **kw):
    values = {
        "width": 40,
        "height": 40,
        "building_count": 3,
        "road_count": 30,
        "building_min_size": 10,
        "building_max_size": 12,
        "seed": 11,
    }
    values.update(kw)
    return run(make_request(**values))


class TestPartitions:
    def test_large_buildings_get_partitions(
        self,
        make_request: Callable[..., GenerationRequest],
        run_request: Runner,
    ) -> None:
        result = _furnished(make_request, run_request)
        for building in result.buildings:
            expected = building.interior_bounds.area // config.PARTITION_DIVISOR
            assert len(building.doorways) <= expected
            assert len(building.rooms) == len(building.doorways) + 1
        assert any(b.doorways for b in result.buildings)

    def test_rooms_tile_the_interior(
        self,
        make_request: Callable[..., GenerationRequest],
        run_request: Runner,
    ) -> None:
        result = _furnished(make_request, run_request)
        grid = result_grid(result)
        for building in result.buildings:
            room_cells = [c for room in building.rooms for c in room.cells()]
            assert len(room_cells) == len(set(room_cells))
            for room in building.rooms:
                assert room.width >= config.MIN_ROOM_SIZE
                assert room.height >= config.MIN_ROOM_SIZE
                assert building.interior_bounds.contains_rect(room)
            for cell in building.interior_bounds.cells():
                if cell not in room_cells and cell not in building.doorways:
                    assert grid.get(cell) == CellState.BUILDING_WALL

    def test_doorways_stay_open_and_connect_rooms(
        self,
        make_request: Callable[..., GenerationRequest],
        run_request: Runner,
    ) -> None:
        result = _furnished(make_request, run_request)
        grid = result_grid(result)
        inside = [CellState.BUILDING_INTERIOR, CellState.CRATE]
        for building in result.buildings:
            for doorway in building.doorways:
                assert grid.get(doorway) == CellState.BUILDING_INTERIOR
            start = building.rooms[0].origin
            reached = grid.flood_fill([start], inside)
            for room in building.rooms:
                free = [
                    c for c in room.cells() if grid.get(c) != CellState.CRATE
                ]
                assert all(c in reached for c in free)

    def test_walls_stay_closed(
        self,
        make_request: Callable[..., GenerationRequest],
        run_request: Runner,
    ) -> None:
        assert_walls_closed(_furnished(make_request, run_request))

    def test_cut_never_ends_in_a_doorway(self) -> None:
        grid = grid_from_rows(
            [
                "#########",
                "#___#___#",
                "#___#___#",
                "#_______#",
                "#___#___#",
                "#___#___#",
                "#___#___#",
                "#___#___#",
                "#########",
            ]
        )
        left = Rect.from_bounds(1, 1, 4, 8)
        # Row 3 would run into the doorway at (4, 3); the room is too narrow
        # for a vertical cut.
        assert _legal_cuts(grid, left) == [("y", 4), ("y", 5)]


class TestCratesAndBushes:
    def test_crates_sit_in_room_corners(
        self,
        make_request: Callable[..., GenerationRequest],
        run_request: Runner,
    ) -> None:
        result = _furnished(make_request, run_request)
        grid = result_grid(result)
        assert any(b.crates for b in result.buildings)
        for building in result.buildings:
            limit = building.footprint.area // config.CRATE_DIVISOR
            assert len(building.crates) <= limit
            for crate in building.crates:
                assert grid.get(crate) == CellState.CRATE
                corners = {
                    corner
                    for room in building.rooms
                    for corner in (
                        (room.x1, room.y1),
                        (room.x2 - 1, room.y1),
                        (room.x1, room.y2 - 1),
                        (room.x2 - 1, room.y2 - 1),
                    )
                }
                assert crate in corners
                for dx, dy in building.doorways:
                    assert abs(dx - crate[0]) + abs(dy - crate[1]) > 1

    def test_bushes_stay_clear_of_buildings(
        self,
        make_request: Callable[..., GenerationRequest],
        run_request: Runner,
    ) -> None:
        result = _furnished(make_request, run_request)
        grid = result_grid(result)
        bushes = grid.cells_of(CellState.BUSH)
        assert bushes
        margin = result.request.margin
        for x, y in bushes:
            for building in result.buildings:
                assert not building.footprint.expanded(margin).contains_point(x, y)

    def test_bush_count(
        self,
        make_request: Callable[..., GenerationRequest],
        run_request: Runner,
    ) -> None:
        result = _furnished(make_request, run_request)
        grid = result_grid(result)
        bushes = grid.count(CellState.BUSH)
        empty_before = grid.count(CellState.EMPTY) + bushes
        assert bushes <= empty_before // config.BUSH_DIVISOR

    def test_furnish_disabled(
        self,
        make_request: Callable[..., GenerationRequest],
        run_request: Runner,
    ) -> None:
        result = _furnished(make_request, run_request, furnish=False)
        grid = result_grid(result)
        assert grid.count(CellState.BUSH) == 0
        assert grid.count(CellState.CRATE) == 0
        assert grid.count(CellState.CAR) == 0
        for building in result.buildings:
            assert building.doorways == ()
            assert building.rooms == (building.interior_bounds,)


class TestCars:
    def test_one_car_per_long_segment(
        self,
        make_request: Callable[..., GenerationRequest],
        run_request: Runner,
    ) -> None:
        result = _furnished(
            make_request, run_request, road_count=200, road_growth="dead_end"
        )
        clearance = config.CAR_END_CLEARANCE
        long_segments = [s for s in result.road_segments if len(s) > 2 * clearance]
        assert long_segments

        cars = result.cars()
        assert len(cars) == len(long_segments)
        for segment in result.road_segments:
            parked = [c for c in segment.cells if c in cars]
            if len(segment) > 2 * clearance:
                assert len(parked) == 1
                position = segment.cells.index(parked[0])
                assert clearance <= position < len(segment) - clearance
            else:
                assert parked == []

    def test_cars_keep_roads_connected(
        self,
        make_request: Callable[..., GenerationRequest],
        run_request: Runner,
    ) -> None:
        result = _furnished(
            make_request, run_request, road_count=200, road_growth="dead_end"
        )
        assert result.cars()
        assert result.roads_placed == len(result.road_cells())
        assert_roads_connected(result)

    @pytest.mark.parametrize(("length", "expected"), [(4, 0), (5, 1), (9, 1)])
    def test_car_sits_away_from_segment_ends(
        self,
        make_request: Callable[..., GenerationRequest],
        length: int,
        expected: int,
    ) -> None:
        ctx = PlacementContext.create(
            make_request(width=12, height=12, building_count=0, road_count=0)
        )
        parent = None
        for x in range(length):
            ctx.index.mark_road((x, 5))
            ctx.extend_road((x, 5), parent)
            parent = (x, 5)

        FurnishingPhase().apply(ctx)

        cars = ctx.grid.cells_of(CellState.CAR)
        assert len(cars) == expected
        for x, y in cars:
            assert y == 5
            assert 2 <= x < length - 2
        assert ctx.grid.count(CellState.ROAD) == length - expected


class TestFurnishingPhaseDirect:
    @pytest.mark.parametrize("size", [3, 4, 5])
    def test_small_buildings_are_left_alone(
        self, make_request: Callable[..., GenerationRequest], size: int
    ) -> None:
        ctx = PlacementContext.create(
            make_request(width=12, height=12, building_count=0, road_count=0)
        )
        footprint = Rect(3, 3, size, size)
        ctx.grid.fill_rect(footprint, CellState.BUILDING_WALL)
        ctx.grid.fill_rect(footprint.interior(), CellState.BUILDING_INTERIOR)
        ctx.index.reserve(footprint)
        ctx.buildings.append(
            Building(id=0, footprint=footprint, rooms=(footprint.interior(),))
        )

        FurnishingPhase().apply(ctx)

        building = ctx.buildings[0]
        assert building.doorways == ()
        assert building.crates == ()
        assert ctx.grid.count(CellState.BUILDING_WALL) == size * 4 - 4
