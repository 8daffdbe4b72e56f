"""Road growth phase.

Roads grow one cell at a time out of the frontier kept by the free-space
index. The frontier only ever holds Empty, unreserved cells that touch an
existing road or lie on the border ring, so every committed cell is connected
to the map edge (the implicit hub) and never touches a building or its
margin.

Wide roads lay extra cells beside each grown cell, across the direction of
growth. Those cells are taken only when they are on the frontier themselves,
so widening can never break connectivity or enter a margin.
"""

from __future__ import annotations

import logging
import random

from battlemapper.environment.cell_types import CellState
from battlemapper.environment.generators.placement.context import PlacementContext
from battlemapper.environment.generators.placement.phase import (
    PlacementPhase,
    PlacerState,
)
from battlemapper.environment.generators.result import ShortfallReason
from battlemapper.types import CellPos

logger = logging.getLogger(__name__)


class RoadGrowthPhase(PlacementPhase):
    """Grows ``request.road_count`` road cells from the frontier."""

    state = PlacerState.PLACING_ROADS

    def apply(self, ctx: PlacementContext) -> None:
        """Grow roads until the count is met or the frontier is empty.

        Args:
            ctx: The placement context to modify.
        """
        rng = ctx.rng("placement.roads")
        requested = ctx.request.road_count
        offsets = _widening_offsets(ctx.request.road_width)

        while ctx.roads_placed < requested:
            if ctx.index.frontier_size() == 0:
                logger.debug(f"Road frontier exhausted after {ctx.roads_placed} cells")
                ctx.record_shortfall(ShortfallReason.FRONTIER_EXHAUSTED)
                return
            if not ctx.consume_step():
                return

            cell = self._choose_cell(ctx, rng)
            parent = self._parent_road(ctx, cell)
            ctx.index.mark_road(cell)
            ctx.roads_placed += 1
            ctx.extend_road(cell, parent)

            if offsets:
                self._widen(ctx, cell, parent, offsets)

    def _choose_cell(self, ctx: PlacementContext, rng: random.Random) -> CellPos:
        index = ctx.index
        if ctx.request.road_growth == "dead_end":
            target = rng.random() * index.total_frontier_weight()
            return index.frontier_at_weight(target)
        return index.frontier_at(rng.randrange(index.frontier_size()))

    def _parent_road(self, ctx: PlacementContext, cell: CellPos) -> CellPos | None:
        """The road cell ``cell`` grows out of, preferring a segment tail.

        Returns None when ``cell`` has no road neighbour, i.e. it starts a new
        road from the border ring.
        """
        neighbors = [
            n for n in ctx.grid.neighbors(cell) if ctx.grid.get(n) == CellState.ROAD
        ]
        if not neighbors:
            return None
        for neighbor in neighbors:
            if ctx.is_segment_tail(neighbor):
                return neighbor
        return neighbors[0]

    def _widen(
        self,
        ctx: PlacementContext,
        cell: CellPos,
        parent: CellPos | None,
        offsets: list[int],
    ) -> None:
        """Lay the cells beside ``cell`` that make up the road's width.

        Each side cell opens its own one-cell segment branching from a road
        cell next to it.
        """
        ax, ay = _across(ctx, cell, parent)
        for offset in offsets:
            if ctx.roads_placed >= ctx.request.road_count:
                return
            side = (cell[0] + ax * offset, cell[1] + ay * offset)
            if not ctx.index.in_frontier(side):
                continue
            if not ctx.consume_step():
                return
            branches_from = self._parent_road(ctx, side)
            ctx.index.mark_road(side)
            ctx.roads_placed += 1
            ctx.branch_road(side, branches_from)


def _widening_offsets(road_width: int) -> list[int]:
    """Offsets across the road for the cells beside the grown cell.

    Matches a road drawn from ``-(width // 2)`` to ``width - width // 2 - 1``
    around its centre line, nearest cells first.
    """
    start = -(road_width // 2)
    offsets = [o for o in range(start, start + road_width) if o != 0]
    return sorted(offsets, key=lambda o: (abs(o), o))


def _across(
    ctx: PlacementContext, cell: CellPos, parent: CellPos | None
) -> tuple[int, int]:
    """Unit step perpendicular to the direction the road grows at ``cell``."""
    if parent is not None:
        along_x = parent[1] == cell[1]
    else:
        # Roads starting on the left or right edge head inwards along x.
        along_x = cell[0] in (0, ctx.grid.width - 1)
    return (0, 1) if along_x else (1, 0)
