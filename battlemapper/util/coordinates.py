"""Rectangles and bounds checks in grid-cell coordinates."""

from __future__ import annotations

from collections.abc import Iterator

from battlemapper.types import CellCoord, CellPos


class Rect:
    """Axis-aligned rectangle in cell coordinates.

    ``x2``/``y2`` are exclusive, so ``Rect(0, 0, 3, 2)`` covers the cells
    ``(0..2, 0..1)``. Instances are treated as immutable values: they hash and
    compare by their corners.
    """

    __slots__ = ("x1", "x2", "y1", "y2")

    def __init__(self, x: CellCoord, y: CellCoord, w: CellCoord, h: CellCoord) -> None:
        self.x1: CellCoord = x
        self.y1: CellCoord = y
        self.x2: CellCoord = x + w
        self.y2: CellCoord = y + h

    @classmethod
    def from_bounds(
        cls, x1: CellCoord, y1: CellCoord, x2: CellCoord, y2: CellCoord
    ) -> Rect:
        """Create a Rect from corner coordinates (x1, y1, x2, y2)."""
        return cls(x1, y1, x2 - x1, y2 - y1)

    @property
    def width(self) -> CellCoord:
        return self.x2 - self.x1

    @property
    def height(self) -> CellCoord:
        return self.y2 - self.y1

    @property
    def area(self) -> int:
        return max(0, self.width) * max(0, self.height)

    @property
    def origin(self) -> CellPos:
        return (self.x1, self.y1)

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def center(self) -> tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersects(self, other: Rect) -> bool:
        """True when the rectangles share at least one cell."""
        return (
            self.x1 < other.x2
            and other.x1 < self.x2
            and self.y1 < other.y2
            and other.y1 < self.y2
        )

    def intersection(self, other: Rect) -> Rect:
        """Return the overlapping part (may be empty)."""
        return Rect.from_bounds(
            max(self.x1, other.x1),
            max(self.y1, other.y1),
            min(self.x2, other.x2),
            min(self.y2, other.y2),
        )

    def contains_point(self, x: CellCoord, y: CellCoord) -> bool:
        return self.x1 <= x < self.x2 and self.y1 <= y < self.y2

    def contains_rect(self, other: Rect) -> bool:
        return (
            self.x1 <= other.x1
            and self.y1 <= other.y1
            and other.x2 <= self.x2
            and other.y2 <= self.y2
        )

    def expanded(self, margin: int) -> Rect:
        """Grow (or shrink, for negative margins) the rectangle on every side."""
        return Rect.from_bounds(
            self.x1 - margin, self.y1 - margin, self.x2 + margin, self.y2 + margin
        )

    def clipped(self, width: CellCoord, height: CellCoord) -> Rect:
        """Clip to the ``[0, width) x [0, height)`` grid."""
        return Rect.from_bounds(
            max(0, self.x1), max(0, self.y1), min(width, self.x2), min(height, self.y2)
        )

    def interior(self) -> Rect:
        """The rectangle minus its one-cell outer ring."""
        return self.expanded(-1)

    def cells(self) -> Iterator[CellPos]:
        """Yield every cell, row by row."""
        for y in range(self.y1, self.y2):
            for x in range(self.x1, self.x2):
                yield (x, y)

    def border_cells(self) -> Iterator[CellPos]:
        """Yield the cells of the outer ring, clockwise from the top-left."""
        if self.is_empty():
            return
        for x in range(self.x1, self.x2):
            yield (x, self.y1)
        for y in range(self.y1 + 1, self.y2):
            yield (self.x2 - 1, y)
        if self.height > 1:
            for x in range(self.x2 - 2, self.x1 - 1, -1):
                yield (x, self.y2 - 1)
        if self.width > 1:
            for y in range(self.y2 - 2, self.y1, -1):
                yield (self.x1, y)

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Return ``(x, y, width, height)``."""
        return (self.x1, self.y1, self.width, self.height)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return (self.x1, self.y1, self.x2, self.y2) == (
            other.x1,
            other.y1,
            other.x2,
            other.y2,
        )

    def __hash__(self) -> int:
        return hash((self.x1, self.y1, self.x2, self.y2))

    def __repr__(self) -> str:
        return f"Rect(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"


# =============================================================================
# BOUNDS CHECKING HELPERS
# =============================================================================


def is_valid_cell_pos(
    pos: CellPos, map_width: CellCoord, map_height: CellCoord
) -> bool:
    """Check if a cell position is within map bounds."""
    x, y = pos
    return 0 <= x < map_width and 0 <= y < map_height


def is_border_cell(pos: CellPos, map_width: CellCoord, map_height: CellCoord) -> bool:
    """Check if a cell lies on the outermost ring of the map."""
    x, y = pos
    return x == 0 or y == 0 or x == map_width - 1 or y == map_height - 1
