"""Constructive battle map generation.

A GenerationRequest (usually built from a preset in THEMES) is handed to a
GenerationSession, which places buildings, grows roads, closes walls and
furnishes the result. Every placement is drawn from a precomputed set of
legal candidates, so generation never retries and always terminates.

Example usage:
    from battlemapper.environment.generators import generate

    result = generate("town", seed=42)
"""

from .buildings import Building
from .free_space import FreeSpaceIndex
from .placement import ElementPlacer, PlacementContext, PlacerState
from .request import GenerationRequest
from .result import GenerationResult, Outcome, RoadSegment, ShortfallReason
from .session import GenerationSession, generate
from .themes import THEMES, Theme, ThemeRegistry
from .validity import ValidityModel

__all__ = [
    "THEMES",
    "Building",
    "ElementPlacer",
    "FreeSpaceIndex",
    "GenerationRequest",
    "GenerationResult",
    "GenerationSession",
    "Outcome",
    "PlacementContext",
    "PlacerState",
    "RoadSegment",
    "ShortfallReason",
    "Theme",
    "ThemeRegistry",
    "ValidityModel",
    "generate",
]
