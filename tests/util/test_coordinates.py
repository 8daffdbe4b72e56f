from __future__ import annotations

from battlemapper.util.coordinates import Rect, is_border_cell, is_valid_cell_pos


class TestRect:
    def test_exclusive_bounds(self) -> None:
        rect = Rect(2, 3, 4, 5)
        assert (rect.x1, rect.y1, rect.x2, rect.y2) == (2, 3, 6, 8)
        assert rect.width == 4
        assert rect.height == 5
        assert rect.area == 20
        assert rect.as_tuple() == (2, 3, 4, 5)

    def test_from_bounds_round_trips(self) -> None:
        assert Rect.from_bounds(1, 1, 4, 3) == Rect(1, 1, 3, 2)

    def test_empty_rect_has_zero_area(self) -> None:
        rect = Rect.from_bounds(5, 5, 3, 8)
        assert rect.is_empty()
        assert rect.area == 0

    def test_intersects_requires_shared_cell(self) -> None:
        a = Rect(0, 0, 3, 3)
        assert a.intersects(Rect(2, 2, 3, 3))
        # Touching edges share no cell.
        assert not a.intersects(Rect(3, 0, 2, 2))

    def test_contains(self) -> None:
        outer = Rect(0, 0, 10, 10)
        assert outer.contains_rect(Rect(2, 2, 8, 8))
        assert not outer.contains_rect(Rect(5, 5, 6, 2))
        assert outer.contains_point(9, 9)
        assert not outer.contains_point(10, 0)

    def test_expanded_and_clipped(self) -> None:
        rect = Rect(0, 1, 2, 2).expanded(1)
        assert rect == Rect.from_bounds(-1, 0, 3, 4)
        assert rect.clipped(10, 10) == Rect.from_bounds(0, 0, 3, 4)

    def test_interior_drops_outer_ring(self) -> None:
        assert Rect(0, 0, 5, 4).interior() == Rect(1, 1, 3, 2)
        assert Rect(0, 0, 2, 2).interior().is_empty()

    def test_cells_row_major(self) -> None:
        assert list(Rect(1, 1, 2, 2).cells()) == [(1, 1), (2, 1), (1, 2), (2, 2)]

    def test_border_cells_cover_ring_once(self) -> None:
        rect = Rect(2, 2, 4, 3)
        ring = list(rect.border_cells())
        assert len(ring) == len(set(ring)) == 2 * 4 + 2 * 3 - 4
        interior = set(rect.interior().cells())
        assert set(ring) | interior == set(rect.cells())

    def test_border_cells_of_thin_rect(self) -> None:
        assert list(Rect(0, 0, 3, 1).border_cells()) == [(0, 0), (1, 0), (2, 0)]
        assert list(Rect(0, 0, 1, 2).border_cells()) == [(0, 0), (0, 1)]

    def test_hashable_value(self) -> None:
        assert len({Rect(0, 0, 1, 1), Rect(0, 0, 1, 1), Rect(1, 0, 1, 1)}) == 2


class TestBoundsHelpers:
    def test_is_valid_cell_pos(self) -> None:
        assert is_valid_cell_pos((0, 0), 5, 5)
        assert not is_valid_cell_pos((5, 0), 5, 5)
        assert not is_valid_cell_pos((0, -1), 5, 5)

    def test_is_border_cell(self) -> None:
        assert is_border_cell((0, 3), 5, 5)
        assert is_border_cell((4, 4), 5, 5)
        assert not is_border_cell((2, 2), 5, 5)
