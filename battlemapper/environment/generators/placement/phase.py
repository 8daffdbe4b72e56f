"""Abstract base class for placement phases.

Each phase implements the PlacementPhase interface and transforms the
PlacementContext in one way: adding buildings, growing roads, closing walls
or furnishing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .context import PlacementContext


class PlacerState(IntEnum):
    """States of the placement state machine, in the only legal order."""

    IDLE = 0
    PLACING_BUILDINGS = 1
    PLACING_ROADS = 2
    PLACING_WALLS = 3
    FURNISHING = 4
    FINALIZED = 5


class PlacementPhase(ABC):
    """Abstract base class for placement phases.

    Phases are applied in state order by the ElementPlacer. Each phase
    receives the PlacementContext and modifies it in place.

    Subclasses set ``state`` to the PlacerState they implement and provide
    ``apply``.
    """

    state: ClassVar[PlacerState]

    @abstractmethod
    def apply(self, ctx: PlacementContext) -> None:
        """Apply this phase's placement logic to the context.

        This method should modify the context in place. It may:
        - Modify cells through ``ctx.grid`` or ``ctx.index``
        - Append buildings or road segments
        - Use ``ctx.rng(domain)`` for random decisions

        Args:
            ctx: The placement context to modify.
        """
        raise NotImplementedError
