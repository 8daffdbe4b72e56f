"""Wall closure phase.

Turns every reserved wall ring into BUILDING_WALL. Building interiors are
written when the footprint is committed, so after this phase each footprint
is a closed ring around its interior.
"""

from __future__ import annotations

import logging

from battlemapper.environment.cell_types import CellState
from battlemapper.environment.generators.placement.context import PlacementContext
from battlemapper.environment.generators.placement.phase import (
    PlacementPhase,
    PlacerState,
)
from battlemapper.errors import PhaseError

logger = logging.getLogger(__name__)


class WallClosurePhase(PlacementPhase):
    """Closes the wall ring of every placed building."""

    state = PlacerState.PLACING_WALLS

    def apply(self, ctx: PlacementContext) -> None:
        """Turn every reserved ring cell into wall.

        Raises:
            PhaseError: If a ring is still open afterwards, which means an
                earlier phase wrote over a reserved ring.
        """
        for building in ctx.buildings:
            for cell in building.footprint.border_cells():
                if ctx.grid.get(cell) == CellState.RESERVED_WALL:
                    ctx.grid.set(cell, CellState.BUILDING_WALL)
            if not ctx.validity.wall_complete(building.footprint):
                raise PhaseError(f"Wall ring of building {building.id} is open")
        logger.debug(f"Closed walls of {len(ctx.buildings)} buildings")
