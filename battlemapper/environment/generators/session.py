"""One generation session: request in, finalized battle map out.

Example usage:
    from battlemapper.environment.generators import GenerationSession, THEMES

    request = THEMES.build_request("village", seed=7)
    result = GenerationSession(request).run()
    print(result.to_text())
"""

from __future__ import annotations

import logging
from typing import Any

from battlemapper.types import RandomSeed

from .placement import ElementPlacer, PlacementContext
from .request import GenerationRequest
from .result import GenerationResult, Outcome
from .themes import THEMES, ThemeRegistry

logger = logging.getLogger(__name__)


class GenerationSession:
    """Generates one map from one request.

    Sessions share nothing: each owns its grid, free-space index and RNG
    streams, so any number of them can run side by side.

    Attributes:
        request: The validated request to generate.
    """

    def __init__(self, request: GenerationRequest) -> None:
        self.request = request

    def run(self) -> GenerationResult:
        """Generate the map.

        Requests that cannot fit under any layout are rejected up front with
        an OVERCOMMITTED result and an untouched empty grid. Everything else
        runs through the placer and ends COMPLETE or PARTIAL.

        Returns:
            The finalized GenerationResult.
        """
        request = self.request
        logger.info(
            f"Generating {request.theme!r} map {request.width}x{request.height}:"
            f" {request.building_count} buildings, {request.road_count} road cells,"
            f" seed={request.seed!r}"
        )

        if request.is_overcommitted():
            logger.warning(
                f"Request overcommitted: {request.building_count} x"
                f" {request.min_building_area} + {request.road_count} cells"
                f" > {request.grid_area}"
            )
            return GenerationResult.overcommitted(request)

        ctx = PlacementContext.create(request)
        result = ElementPlacer(ctx).run()

        if result.outcome is Outcome.PARTIAL:
            logger.warning(f"Partial map: {result.summary()}")
        else:
            logger.info(result.summary())
        return result


def generate(
    theme: str | None = None,
    seed: RandomSeed = None,
    registry: ThemeRegistry = THEMES,
    **overrides: Any,
) -> GenerationResult:
    """Build a request from a preset and run it in a fresh session.

    Args:
        theme: Preset name; the default preset when None.
        seed: Optional seed for deterministic generation.
        registry: Registry to resolve ``theme`` against.
        **overrides: GenerationRequest fields overriding the preset.

    Raises:
        UnknownPreset: If ``theme`` is not registered.
        InvalidRequest: If the merged request is invalid.
    """
    request = registry.build_request(theme, seed=seed, **overrides)
    return GenerationSession(request).run()
