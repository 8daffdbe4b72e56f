"""Building placement phase.

Buildings are drawn straight out of the free-space index:

1. Take the largest free rectangle that can hold a minimum-size building.
   If there is none, free space is exhausted and the phase stops.
2. Draw a size inside the configured range and the rectangle.
3. Draw an origin from the rectangle's origin span. Every origin in the span
   keeps the footprint inside the free rectangle, so the draw is valid by
   construction and never needs a retry.
4. Commit the footprint and reserve it (plus margin) in the index.

While more buildings are queued, a building placed in a rectangle with room
to spare is capped and pushed against one end of the rectangle's long axis,
leaving a strip at least one minimum building wide past the margin.
"""

from __future__ import annotations

import logging
import random
from typing import Literal, TypeAlias

from battlemapper.environment.cell_types import CellState
from battlemapper.environment.generators.buildings import Building
from battlemapper.environment.generators.placement.context import PlacementContext
from battlemapper.environment.generators.placement.phase import (
    PlacementPhase,
    PlacerState,
)
from battlemapper.environment.generators.result import ShortfallReason
from battlemapper.util.coordinates import Rect

logger = logging.getLogger(__name__)

Axis: TypeAlias = Literal["x", "y"]


class BuildingPlacementPhase(PlacementPhase):
    """Places ``request.building_count`` building footprints."""

    state = PlacerState.PLACING_BUILDINGS

    def apply(self, ctx: PlacementContext) -> None:
        """Place buildings until the count is met or space runs out.

        Args:
            ctx: The placement context to modify.
        """
        rng = ctx.rng("placement.buildings")
        requested = ctx.request.building_count

        for placed in range(requested):
            candidates = ctx.validity.fitting_rectangles()
            if not candidates:
                logger.debug(
                    f"No free rectangle fits a {ctx.validity.min_size}x"
                    f"{ctx.validity.min_size} building after {placed} buildings"
                )
                ctx.record_shortfall(ShortfallReason.FREE_SPACE_EXHAUSTED)
                return
            if not ctx.consume_step():
                return

            queued_after = requested - placed - 1
            footprint = self._draw_footprint(ctx, rng, candidates[0], queued_after)
            self._commit(ctx, footprint)

    def _draw_footprint(
        self,
        ctx: PlacementContext,
        rng: random.Random,
        free: Rect,
        queued_after: int,
    ) -> Rect:
        """Draw a footprint inside ``free``.

        Args:
            ctx: The placement context.
            rng: The building RNG stream.
            free: A free rectangle from ``fitting_rectangles``.
            queued_after: Buildings still to place after this one.

        Returns:
            A footprint that lies inside ``free``.
        """
        bounds = ctx.validity.size_bounds(free)
        max_width, max_height = bounds.max_width, bounds.max_height

        axis = self._strip_axis(ctx, rng, free) if queued_after > 0 else None
        strip = ctx.request.margin + ctx.validity.min_size
        if axis == "x":
            max_width = min(max_width, free.width - strip)
        elif axis == "y":
            max_height = min(max_height, free.height - strip)

        width = rng.randint(bounds.min_width, max_width)
        height = rng.randint(bounds.min_height, max_height)

        span = ctx.validity.origin_span(free, width, height)
        x = rng.randrange(span.x1, span.x2)
        y = rng.randrange(span.y1, span.y2)
        # Anchor against one end so the leftover strip stays in one piece.
        if axis == "x":
            x = rng.choice((span.x1, span.x2 - 1))
        elif axis == "y":
            y = rng.choice((span.y1, span.y2 - 1))

        return Rect(x, y, width, height)

    def _strip_axis(
        self, ctx: PlacementContext, rng: random.Random, free: Rect
    ) -> Axis | None:
        """Pick the axis along which ``free`` can spare a strip, if any.

        A strip is possible along an axis when the rectangle can hold a
        minimum building, the margin and another minimum building in a row.
        The longer axis wins; equal sides are decided by the RNG.
        """
        needed = 2 * ctx.validity.min_size + ctx.request.margin
        if free.width >= needed and free.height >= needed:
            if free.width != free.height:
                return "x" if free.width > free.height else "y"
            return rng.choice(("x", "y"))
        if free.width >= needed:
            return "x"
        if free.height >= needed:
            return "y"
        return None

    def _commit(self, ctx: PlacementContext, footprint: Rect) -> None:
        """Write the footprint into the grid and reserve it in the index.

        The outer ring is reserved for walls; the wall phase closes it.
        """
        ctx.grid.fill_rect(footprint, CellState.RESERVED_WALL)
        interior = footprint.interior()
        if not interior.is_empty():
            ctx.grid.fill_rect(interior, CellState.BUILDING_INTERIOR)
        ctx.index.reserve(footprint)

        building = Building(
            id=ctx.next_building_id(),
            footprint=footprint,
            rooms=(interior,) if not interior.is_empty() else (),
        )
        ctx.buildings.append(building)
        logger.debug(f"Placed building {building.id} at {footprint}")
