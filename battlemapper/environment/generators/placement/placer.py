"""ElementPlacer: the placement state machine.

The placer walks a PlacementContext through its phases in a fixed order:

    Idle -> PlacingBuildings -> PlacingRoads -> PlacingWalls
         -> Furnishing -> Finalized

Each transition runs one phase. Moving to an earlier (or the same) state
raises PhaseError, so a finalized map can never be mutated again.
"""

from __future__ import annotations

import logging

from battlemapper.environment.generators.result import GenerationResult, Outcome
from battlemapper.errors import PhaseError

from .context import PlacementContext
from .phase import PlacementPhase, PlacerState
from .phases import (
    BuildingPlacementPhase,
    FurnishingPhase,
    RoadGrowthPhase,
    WallClosurePhase,
)

logger = logging.getLogger(__name__)


class ElementPlacer:
    """Runs the placement phases over one context.

    Attributes:
        ctx: The context being filled in.
        state: The last state entered.
        phases: Phase to run on entering each state.
    """

    def __init__(
        self, ctx: PlacementContext, phases: list[PlacementPhase] | None = None
    ) -> None:
        self.ctx = ctx
        self.state = PlacerState.IDLE
        if phases is None:
            phases = [
                BuildingPlacementPhase(),
                RoadGrowthPhase(),
                WallClosurePhase(),
                FurnishingPhase(),
            ]
        self.phases = {phase.state: phase for phase in phases}

    def advance(self, target: PlacerState) -> None:
        """Enter ``target`` and run its phase, if any.

        Raises:
            PhaseError: If ``target`` is not after the current state.
        """
        if target <= self.state:
            raise PhaseError(
                f"Cannot move from {self.state.name} back to {target.name}"
            )
        self.state = target
        phase = self.phases.get(target)
        if phase is not None:
            phase.apply(self.ctx)
            logger.debug(
                f"{target.name} done: {len(self.ctx.buildings)} buildings,"
                f" {self.ctx.roads_placed} road cells, {self.ctx.steps_used} steps"
            )

    def run(self) -> GenerationResult:
        """Run every remaining phase and freeze the result.

        Raises:
            PhaseError: If the placer has already finalized.
        """
        if self.state is PlacerState.FINALIZED:
            raise PhaseError("Placer has already finalized")
        for state in PlacerState:
            if state > self.state:
                self.advance(state)
        return self.finalize()

    def finalize(self) -> GenerationResult:
        """Freeze the context into a GenerationResult.

        Raises:
            PhaseError: If called before the placer reached FINALIZED.
        """
        if self.state is not PlacerState.FINALIZED:
            raise PhaseError(f"Cannot finalize from {self.state.name}")

        ctx = self.ctx
        outcome = Outcome.PARTIAL if ctx.shortfalls else Outcome.COMPLETE
        return GenerationResult(
            request=ctx.request,
            cells=ctx.grid.frozen_cells(),
            buildings=tuple(ctx.buildings),
            road_segments=tuple(ctx.road_segments),
            buildings_placed=len(ctx.buildings),
            roads_placed=ctx.roads_placed,
            outcome=outcome,
            shortfalls=tuple(ctx.shortfalls),
            seed=ctx.rng_provider.master_seed,
            reproducible=ctx.reproducible,
            steps_used=ctx.steps_used,
        )
