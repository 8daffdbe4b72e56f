from __future__ import annotations

import numpy as np

from battlemapper.environment.cell_types import (
    CellState,
    get_cell_state_name,
    get_color_map,
    get_glyph_map,
)


class TestCellStateTable:
    def test_every_state_has_a_distinct_color(self) -> None:
        cells = np.array([[state for state in CellState]], dtype=np.uint8)
        colors = get_color_map(cells)
        assert colors.shape == (1, len(CellState), 3)
        assert len({tuple(c) for c in colors[0]}) == len(CellState)

    def test_color_map_keeps_shape(self) -> None:
        cells = np.full((4, 3), CellState.ROAD, dtype=np.uint8)
        colors = get_color_map(cells)
        assert colors.shape == (4, 3, 3)
        assert tuple(colors[0, 0]) == (105, 100, 95)

    def test_glyphs(self) -> None:
        states = [CellState.EMPTY, CellState.BUILDING_WALL, CellState.CAR]
        cells = np.array(states, dtype=np.uint8)
        assert list(get_glyph_map(cells)) == [".", "#", "c"]

    def test_names(self) -> None:
        assert get_cell_state_name(CellState.BUILDING_WALL) == "Building Wall"
        assert get_cell_state_name(99) == "Unknown Cell (ID: 99)"
