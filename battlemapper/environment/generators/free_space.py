"""Incrementally maintained free space for constructive placement.

The FreeSpaceIndex answers two questions without scanning the grid:

- Where can a building still go? A set of *maximal* empty rectangles is kept
  up to date with the MaxRects split: when an area is reserved, every free
  rectangle overlapping it is replaced by the up-to-four largest rectangles
  that remain on its left, right, top and bottom, and rectangles contained in
  another are pruned. Because each free rectangle is empty by construction,
  any building drawn inside one is valid without checking.
- Where can a road grow next? The frontier holds the Empty, non-reserved
  cells that touch the road network or lie on the border ring. Each frontier
  cell carries a sampling weight, kept in a Fenwick tree so a weighted draw
  and a weight update both cost O(log n). Laying a road cell only refreshes
  the weights of the cells within two steps of it.

The index never draws random numbers. It only hands out candidates; the
placement phases choose among them with the session's RNG.
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np

from battlemapper.environment.cell_types import CellState
from battlemapper.environment.grid import Grid
from battlemapper.types import CellPos
from battlemapper.util.coordinates import Rect


class FreeSpaceIndex:
    """Maximal free rectangles plus the road-growth frontier for one grid.

    Attributes:
        grid: The grid being generated. The index writes ROAD cells through
            ``mark_road`` and otherwise only reads it.
        margin: Cells kept clear around every reserved region.
        dead_end_bias: Extra frontier weight for cells that extend a dead
            end. Zero gives every frontier cell the same weight.
    """

    def __init__(
        self, grid: Grid, margin: int = 0, dead_end_bias: float = 0.0
    ) -> None:
        self.grid = grid
        self.margin = margin
        self.dead_end_bias = dead_end_bias
        self._free: list[Rect] = [grid.bounds]
        # Road cells not yet cut out of _free. Roads are laid one cell at a
        # time after buildings are placed, so the cuts are applied lazily on
        # the next rectangle query.
        self._pending: list[Rect] = []
        # Cells inside a reserved region or its margin.
        self._blocked = np.zeros((grid.width, grid.height), dtype=bool, order="F")

        # Frontier kept as an insertion-ordered bag: a list for indexed
        # sampling plus a position map for O(1) swap-removal. Slot i of the
        # weight tree holds the weight of _frontier[i].
        self._frontier: list[CellPos] = []
        self._frontier_pos: dict[CellPos, int] = {}
        self._weights = _WeightTree(grid.area)
        for cell in grid.bounds.border_cells():
            if grid.get(cell) == CellState.EMPTY:
                self._frontier_add(cell)

    # -------------------------------------------------------------------------
    # Free rectangles
    # -------------------------------------------------------------------------

    def largest_rectangles(self) -> tuple[Rect, ...]:
        """Free rectangles ordered by area descending.

        Ties are broken by origin (row, then column) ascending, then by the
        wider rectangle first, so the order is a pure function of the index
        state.
        """
        self._flush_pending()
        return tuple(
            sorted(self._free, key=lambda r: (-r.area, r.y1, r.x1, -r.width))
        )

    def reserve(self, region: Rect) -> None:
        """Remove ``region`` plus the margin from all free space.

        Overlapping free rectangles are split into their maximal remainders
        and the reserved cells leave the road frontier.
        """
        blocked = region.expanded(self.margin).clipped(
            self.grid.width, self.grid.height
        )
        if blocked.is_empty():
            return
        self._flush_pending()
        self._subtract(blocked)
        self._blocked[blocked.x1 : blocked.x2, blocked.y1 : blocked.y2] = True
        for cell in list(self._frontier):
            if blocked.contains_point(*cell):
                self._frontier_remove(cell)

    def is_blocked(self, cell: CellPos) -> bool:
        """True when ``cell`` lies inside a reserved region or its margin."""
        return bool(self._blocked[cell])

    def _flush_pending(self) -> None:
        for used in self._pending:
            self._subtract(used)
        self._pending.clear()

    def _subtract(self, used: Rect) -> None:
        # Untouched rectangles stay maximal, so only the split pieces need
        # pruning.
        untouched: list[Rect] = []
        pieces: list[Rect] = []
        for free in self._free:
            if free.intersects(used):
                pieces.extend(_split_around(free, used))
            else:
                untouched.append(free)
        self._free = untouched + _prune_contained(pieces, untouched)

    # -------------------------------------------------------------------------
    # Road frontier
    # -------------------------------------------------------------------------

    def frontier_cells(self) -> set[CellPos]:
        """Cells a road may grow into next."""
        return set(self._frontier)

    def frontier_size(self) -> int:
        return len(self._frontier)

    def in_frontier(self, cell: CellPos) -> bool:
        return cell in self._frontier_pos

    def frontier_sequence(self) -> tuple[CellPos, ...]:
        """Frontier cells in the index's deterministic internal order."""
        return tuple(self._frontier)

    def frontier_at(self, position: int) -> CellPos:
        """The frontier cell at ``position`` in the internal order."""
        return self._frontier[position]

    def frontier_weights(self) -> list[tuple[CellPos, float]]:
        """Frontier cells with their sampling weights, in internal order.

        Every cell weighs 1.0. With a positive ``dead_end_bias``, a cell whose
        only road neighbour is the end of a road (that cell has at most one
        road neighbour itself) weighs ``1 + dead_end_bias``, which favours
        extending existing roads into longer lanes over sprouting new stubs.
        """
        return [(cell, self._weights[i]) for i, cell in enumerate(self._frontier)]

    def total_frontier_weight(self) -> float:
        return self._weights.total

    def frontier_at_weight(self, target: float) -> CellPos:
        """The frontier cell whose cumulative weight range holds ``target``.

        Drawing ``target`` uniformly from ``[0, total_frontier_weight())``
        picks each cell with probability proportional to its weight.

        Raises:
            IndexError: If the frontier is empty.
        """
        if not self._frontier:
            raise IndexError("Road frontier is empty")
        slot = self._weights.find(target)
        return self._frontier[min(slot, len(self._frontier) - 1)]

    def road_degree(self, cell: CellPos) -> int:
        """Number of road cells 4-adjacent to ``cell``."""
        return len(self._road_neighbors(cell))

    def mark_road(self, cell: CellPos) -> None:
        """Turn a frontier cell into road and grow the frontier around it.

        Raises:
            ValueError: If ``cell`` is not currently in the frontier.
        """
        if cell not in self._frontier_pos:
            raise ValueError(f"Cell {cell} is not on the road frontier")

        self.grid.set(cell, CellState.ROAD)
        self._frontier_remove(cell)
        self._pending.append(Rect(cell[0], cell[1], 1, 1))

        for neighbor in self.grid.neighbors(cell):
            if (
                neighbor not in self._frontier_pos
                and not self._blocked[neighbor]
                and self.grid.get(neighbor) == CellState.EMPTY
            ):
                self._frontier_add(neighbor)

        if self.dead_end_bias > 0:
            # The new cell changes its own neighbours' road counts and the
            # degree of the roads it touches, which the weights of the cells
            # around those roads depend on.
            for road in [cell, *self._road_neighbors(cell)]:
                for neighbor in self.grid.neighbors(road):
                    if neighbor in self._frontier_pos:
                        self._weights.set(
                            self._frontier_pos[neighbor], self._weight_of(neighbor)
                        )

    def _weight_of(self, cell: CellPos) -> float:
        if self.dead_end_bias <= 0:
            return 1.0
        roads = self._road_neighbors(cell)
        if len(roads) == 1 and self.road_degree(roads[0]) <= 1:
            return 1.0 + self.dead_end_bias
        return 1.0

    def _road_neighbors(self, cell: CellPos) -> list[CellPos]:
        cells = self.grid.cells
        return [n for n in self.grid.neighbors(cell) if cells[n] == CellState.ROAD]

    def _frontier_add(self, cell: CellPos) -> None:
        slot = len(self._frontier)
        self._frontier_pos[cell] = slot
        self._frontier.append(cell)
        self._weights.set(slot, self._weight_of(cell))

    def _frontier_remove(self, cell: CellPos) -> None:
        slot = self._frontier_pos.pop(cell)
        last = self._frontier.pop()
        last_slot = len(self._frontier)
        if last != cell:
            self._frontier[slot] = last
            self._frontier_pos[last] = slot
            self._weights.set(slot, self._weights[last_slot])
        self._weights.set(last_slot, 0.0)


class _WeightTree:
    """Fenwick tree over frontier slot weights.

    Supports point updates, the running total and the prefix-sum search used
    for weighted sampling, each in O(log capacity).
    """

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._tree = [0.0] * (capacity + 1)
        self._values = [0.0] * capacity
        self._top = 1 << (capacity.bit_length() - 1) if capacity else 0
        self.total = 0.0

    def __getitem__(self, slot: int) -> float:
        return self._values[slot]

    def set(self, slot: int, weight: float) -> None:
        delta = weight - self._values[slot]
        if delta == 0:
            return
        self._values[slot] = weight
        self.total += delta
        i = slot + 1
        while i <= self._capacity:
            self._tree[i] += delta
            i += i & -i

    def find(self, target: float) -> int:
        """The first slot whose prefix sum exceeds ``target``."""
        slot = 0
        step = self._top
        while step:
            nxt = slot + step
            if nxt <= self._capacity and self._tree[nxt] <= target:
                slot = nxt
                target -= self._tree[nxt]
            step >>= 1
        return slot


def _split_around(free: Rect, used: Rect) -> Iterator[Rect]:
    """Yield the maximal parts of ``free`` on each side of ``used``."""
    if used.x1 > free.x1:
        yield Rect.from_bounds(free.x1, free.y1, used.x1, free.y2)
    if used.x2 < free.x2:
        yield Rect.from_bounds(used.x2, free.y1, free.x2, free.y2)
    if used.y1 > free.y1:
        yield Rect.from_bounds(free.x1, free.y1, free.x2, used.y1)
    if used.y2 < free.y2:
        yield Rect.from_bounds(free.x1, used.y2, free.x2, free.y2)


def _prune_contained(pieces: list[Rect], others: list[Rect]) -> list[Rect]:
    """Drop duplicate pieces and pieces contained in another rectangle."""
    unique = list(dict.fromkeys(r for r in pieces if not r.is_empty()))
    return [
        rect
        for i, rect in enumerate(unique)
        if not any(other.contains_rect(rect) for other in others)
        and not any(
            j != i and other.contains_rect(rect) for j, other in enumerate(unique)
        )
    ]
