"""The cell grid owned by one generation session."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator

import numpy as np

from battlemapper.environment.cell_types import CellState
from battlemapper.errors import InvalidDimensions, OutOfBounds
from battlemapper.types import CARDINAL_DIRECTIONS, CellPos
from battlemapper.util.coordinates import Rect


class Grid:
    """A dense ``width x height`` array of CellState values.

    The array is indexed ``cells[x, y]`` and stored in Fortran order so that
    column slices are contiguous, matching how the rest of the code walks the
    map. Only the placement engine writes to a Grid; everything else reads.
    """

    def __init__(
        self, width: int, height: int, fill: CellState = CellState.EMPTY
    ) -> None:
        if width <= 0 or height <= 0:
            raise InvalidDimensions(
                f"Grid dimensions must be positive, got {width}x{height}"
            )
        self.width = width
        self.height = height
        self.cells = np.full((width, height), fill, dtype=np.uint8, order="F")

    @classmethod
    def from_cells(cls, cells: np.ndarray) -> Grid:
        """Build a writable Grid holding a copy of a ``(width, height)`` array."""
        width, height = cells.shape
        grid = cls(width, height)
        grid.cells[:, :] = cells
        return grid

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def bounds(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def in_bounds(self, pos: CellPos) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, pos: CellPos) -> CellState:
        """Return the state at ``pos``, or OUT_OF_BOUNDS outside the grid."""
        if not self.in_bounds(pos):
            return CellState.OUT_OF_BOUNDS
        return CellState(int(self.cells[pos]))

    def set(self, pos: CellPos, state: CellState) -> None:
        """Write one cell.

        Raises:
            OutOfBounds: If ``pos`` lies outside the grid.
        """
        if not self.in_bounds(pos):
            raise OutOfBounds(pos, self.width, self.height)
        self.cells[pos] = state

    def fill_rect(self, rect: Rect, state: CellState) -> None:
        """Write ``state`` into every cell of ``rect``.

        Raises:
            OutOfBounds: If any part of ``rect`` lies outside the grid.
        """
        if not self.bounds.contains_rect(rect):
            raise OutOfBounds(rect.origin, self.width, self.height)
        self.cells[rect.x1 : rect.x2, rect.y1 : rect.y2] = state

    def count(self, state: CellState) -> int:
        return int(np.count_nonzero(self.cells == state))

    def cells_of(self, state: CellState) -> list[CellPos]:
        """All cells holding ``state``, ordered by row then column."""
        xs, ys = np.nonzero(self.cells == state)
        return sorted(zip(xs.tolist(), ys.tolist(), strict=True), key=_row_major)

    def neighbors(self, pos: CellPos) -> Iterator[CellPos]:
        """Yield the in-bounds 4-neighbours of ``pos`` (N, E, S, W)."""
        x, y = pos
        for dx, dy in CARDINAL_DIRECTIONS:
            neighbor = (x + dx, y + dy)
            if self.in_bounds(neighbor):
                yield neighbor

    def flood_fill(
        self, starts: Iterable[CellPos], states: Iterable[CellState]
    ) -> set[CellPos]:
        """Return every cell reachable from ``starts`` through ``states``.

        Start cells whose state is not in ``states`` are ignored.
        """
        allowed = {int(s) for s in states}
        seen: set[CellPos] = set()
        queue: deque[CellPos] = deque()
        for start in starts:
            if self.in_bounds(start) and int(self.cells[start]) in allowed:
                if start not in seen:
                    seen.add(start)
                    queue.append(start)

        while queue:
            current = queue.popleft()
            for neighbor in self.neighbors(current):
                if neighbor not in seen and int(self.cells[neighbor]) in allowed:
                    seen.add(neighbor)
                    queue.append(neighbor)
        return seen

    def reachable(
        self, start: CellPos, goal: CellPos, states: Iterable[CellState]
    ) -> bool:
        """Check 4-connected reachability restricted to the given states."""
        return goal in self.flood_fill([start], states)

    def frozen_cells(self) -> np.ndarray:
        """Return a read-only copy of the cell array."""
        snapshot = self.cells.copy(order="F")
        snapshot.flags.writeable = False
        return snapshot


def _row_major(pos: CellPos) -> tuple[int, int]:
    return (pos[1], pos[0])
