"""Placement context shared by the placement phases.

The PlacementContext is a mutable container that holds all state for one
generation session. Each phase receives the same context and modifies it in
place, so the grid and the free-space index are never copied between phases
and always change together.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from battlemapper.environment.generators.buildings import Building
from battlemapper.environment.generators.free_space import FreeSpaceIndex
from battlemapper.environment.generators.request import GenerationRequest
from battlemapper.environment.generators.result import RoadSegment, ShortfallReason
from battlemapper.environment.generators.validity import ValidityModel
from battlemapper.environment.grid import Grid
from battlemapper.types import CellPos
from battlemapper.util.rng import RNGProvider


@dataclass
class PlacementContext:
    """Mutable state container passed through the placement phases.

    Attributes:
        request: The validated request being generated.
        grid: The cell grid under construction.
        index: Free rectangles and road frontier, kept in step with ``grid``.
        validity: Legal-placement rules over ``grid`` and ``index``.
        rng_provider: Per-session source of named RNG streams.
        buildings: Buildings placed so far.
        roads_placed: Road cells placed so far.
        shortfalls: Reasons generation stopped short, in the order hit.
        steps_used: Placement commits counted against ``request.max_steps``.
        reproducible: False when the RNG seed came from system entropy.
    """

    request: GenerationRequest
    grid: Grid
    index: FreeSpaceIndex
    validity: ValidityModel
    rng_provider: RNGProvider
    buildings: list[Building] = field(default_factory=list)
    roads_placed: int = 0
    shortfalls: list[ShortfallReason] = field(default_factory=list)
    steps_used: int = 0
    reproducible: bool = True

    # Road segments under construction: cells per segment, the cell each
    # one branched from, and the segment each tail cell ends.
    _segment_cells: list[list[CellPos]] = field(
        default_factory=list, init=False, repr=False
    )
    _segment_branches: list[CellPos | None] = field(
        default_factory=list, init=False, repr=False
    )
    _segment_tails: dict[CellPos, int] = field(
        default_factory=dict, init=False, repr=False
    )

    @classmethod
    def create(cls, request: GenerationRequest) -> PlacementContext:
        """Create an empty context for ``request``.

        The RNG is seeded from ``request.seed``, or from system entropy when
        the request carries no seed (the result is then flagged as not
        reproducible).
        """
        if request.seed is None:
            rng_provider = RNGProvider.from_entropy()
            reproducible = False
        else:
            rng_provider = RNGProvider(request.seed)
            reproducible = True

        grid = Grid(request.width, request.height)
        dead_end_bias = (
            request.dead_end_bias if request.road_growth == "dead_end" else 0.0
        )
        index = FreeSpaceIndex(grid, margin=request.margin, dead_end_bias=dead_end_bias)
        validity = ValidityModel(
            grid,
            index,
            min_size=request.building_min_size,
            max_size=request.building_max_size,
        )
        return cls(
            request=request,
            grid=grid,
            index=index,
            validity=validity,
            rng_provider=rng_provider,
            reproducible=reproducible,
        )

    def rng(self, domain: str) -> random.Random:
        """The session's RNG stream for ``domain``."""
        return self.rng_provider.get(domain)

    def next_building_id(self) -> int:
        return len(self.buildings)

    def consume_step(self) -> bool:
        """Count one placement commit against the step budget.

        Returns:
            False, after recording the shortfall, when the budget is already
            spent; True otherwise.
        """
        budget = self.request.max_steps
        if budget is not None and self.steps_used >= budget:
            self.record_shortfall(ShortfallReason.STEP_BUDGET_EXHAUSTED)
            return False
        self.steps_used += 1
        return True

    def record_shortfall(self, reason: ShortfallReason) -> None:
        if reason not in self.shortfalls:
            self.shortfalls.append(reason)

    # -------------------------------------------------------------------------
    # Road segments
    # -------------------------------------------------------------------------

    def is_segment_tail(self, cell: CellPos) -> bool:
        return cell in self._segment_tails

    def extend_road(self, cell: CellPos, parent: CellPos | None) -> None:
        """Append ``cell`` to the segment ending at ``parent``.

        Opens a new segment branching from ``parent`` when no segment ends
        there.
        """
        segment = None
        if parent is not None:
            segment = self._segment_tails.pop(parent, None)
        if segment is None:
            self.branch_road(cell, parent)
            return
        self._segment_cells[segment].append(cell)
        self._segment_tails[cell] = segment

    def branch_road(self, cell: CellPos, parent: CellPos | None) -> None:
        """Open a new segment at ``cell`` branching from ``parent``."""
        self._segment_tails[cell] = len(self._segment_cells)
        self._segment_cells.append([cell])
        self._segment_branches.append(parent)

    @property
    def road_segments(self) -> tuple[RoadSegment, ...]:
        """Road segments grown so far, in the order they were opened."""
        return tuple(
            RoadSegment(cells=tuple(cells), branches_from=parent)
            for cells, parent in zip(
                self._segment_cells, self._segment_branches, strict=True
            )
        )
