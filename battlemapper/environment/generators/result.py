"""The finalized, immutable output of one generation session."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum

import numpy as np

from battlemapper.environment.cell_types import ROAD_STATES, CellState, get_glyph_map
from battlemapper.errors import OvercommittedError
from battlemapper.types import CellPos, RandomSeed
from battlemapper.util.coordinates import Rect

from .buildings import Building
from .request import GenerationRequest


class Outcome(Enum):
    """How far generation got."""

    COMPLETE = "complete"
    # Free space, frontier or step budget ran out before every requested
    # element was placed. The map is still valid.
    PARTIAL = "partial"
    # Rejected before any placement: the counts cannot fit under any layout.
    OVERCOMMITTED = "overcommitted"


class ShortfallReason(Enum):
    FREE_SPACE_EXHAUSTED = "free_space_exhausted"
    FRONTIER_EXHAUSTED = "frontier_exhausted"
    STEP_BUDGET_EXHAUSTED = "step_budget_exhausted"


@dataclass(frozen=True)
class RoadSegment:
    """One orthogonal run of grid-adjacent road cells.

    Attributes:
        cells: Road cells in the order they were laid.
        branches_from: The existing road cell the segment grew out of, or
            None when it starts on the border ring.
    """

    cells: tuple[CellPos, ...]
    branches_from: CellPos | None = None

    @property
    def tail(self) -> CellPos:
        return self.cells[-1]

    def __len__(self) -> int:
        return len(self.cells)


@dataclass(frozen=True, eq=False)
class GenerationResult:
    """A finished battle map plus how it was produced.

    Attributes:
        request: The request that was generated.
        cells: Read-only ``(width, height)`` array of CellState values,
            indexed ``cells[x, y]``.
        buildings: Placed buildings, in placement order.
        road_segments: Road segments, in growth order.
        buildings_placed: Number of buildings placed.
        roads_placed: Number of road cells placed.
        outcome: COMPLETE, PARTIAL or OVERCOMMITTED.
        shortfalls: Why a PARTIAL result stopped early.
        seed: The seed actually used. Equals ``request.seed`` when one was
            given, otherwise the entropy-drawn seed.
        reproducible: False when the seed was drawn from entropy rather than
            requested.
        steps_used: Placement commits consumed against the step budget.

    Two results are equal when every field matches, with ``cells`` compared
    element-wise.
    """

    request: GenerationRequest
    cells: np.ndarray
    buildings: tuple[Building, ...]
    road_segments: tuple[RoadSegment, ...]
    buildings_placed: int
    roads_placed: int
    outcome: Outcome
    shortfalls: tuple[ShortfallReason, ...] = ()
    seed: RandomSeed = None
    reproducible: bool = True
    steps_used: int = 0

    @classmethod
    def overcommitted(cls, request: GenerationRequest) -> GenerationResult:
        """Result for a request rejected by the up-front capacity check."""
        cells = np.full(
            (request.width, request.height), CellState.EMPTY, dtype=np.uint8, order="F"
        )
        cells.flags.writeable = False
        return cls(
            request=request,
            cells=cells,
            buildings=(),
            road_segments=(),
            buildings_placed=0,
            roads_placed=0,
            outcome=Outcome.OVERCOMMITTED,
            seed=request.seed,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenerationResult):
            return NotImplemented
        return np.array_equal(self.cells, other.cells) and all(
            getattr(self, f.name) == getattr(other, f.name)
            for f in fields(self)
            if f.name != "cells"
        )

    @property
    def width(self) -> int:
        return self.request.width

    @property
    def height(self) -> int:
        return self.request.height

    @property
    def regions(self) -> tuple[Rect, ...]:
        """Building footprints, in placement order."""
        return tuple(b.footprint for b in self.buildings)

    @property
    def is_complete(self) -> bool:
        return self.outcome is Outcome.COMPLETE

    @property
    def budget_exhausted(self) -> bool:
        return ShortfallReason.STEP_BUDGET_EXHAUSTED in self.shortfalls

    def cell(self, x: int, y: int) -> CellState:
        return CellState(int(self.cells[x, y]))

    def road_cells(self) -> set[CellPos]:
        """Every cell of the road network, parked cars included."""
        xs, ys = np.nonzero(np.isin(self.cells, ROAD_STATES))
        return set(zip(xs.tolist(), ys.tolist(), strict=True))

    def cars(self) -> set[CellPos]:
        xs, ys = np.nonzero(self.cells == CellState.CAR)
        return set(zip(xs.tolist(), ys.tolist(), strict=True))

    def to_text(self) -> str:
        """One line of glyphs per row, handy for logs and debugging."""
        glyphs = get_glyph_map(self.cells)
        return "\n".join("".join(glyphs[:, y]) for y in range(self.height))

    def raise_for_outcome(self) -> GenerationResult:
        """Raise OvercommittedError for rejected requests, else return self."""
        if self.outcome is Outcome.OVERCOMMITTED:
            raise OvercommittedError(
                f"{self.request.building_count} buildings of at least"
                f" {self.request.min_building_area} cells plus"
                f" {self.request.road_count} road cells cannot fit in a"
                f" {self.width}x{self.height} map"
            )
        return self

    def summary(self) -> str:
        parts = [
            f"{self.outcome.value}:",
            f"{self.buildings_placed}/{self.request.building_count} buildings,",
            f"{self.roads_placed}/{self.request.road_count} road cells",
        ]
        if self.shortfalls:
            parts.append(f"({', '.join(s.value for s in self.shortfalls)})")
        if not self.reproducible:
            parts.append(f"[unseeded, drew seed {self.seed}]")
        return " ".join(parts)
