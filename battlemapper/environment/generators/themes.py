"""Named presets that fill in generation request defaults.

Themes define the default size of the map, how many roads and buildings to
place, and the style parameters for placement. A request names a theme and
may override any of its values.

Registered presets:
- "town": Mid-sized map, a handful of buildings, uniformly grown roads.
- "village": Sparse buildings with wide gaps and long, winding lanes.
- "city": Large, dense map with many small buildings and a road network.
- "outpost": Tiny map with one or two buildings.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any

from battlemapper import config
from battlemapper.config import RoadGrowthPolicy
from battlemapper.errors import InvalidRequest, UnknownPreset
from battlemapper.types import RandomSeed

from .request import GenerationRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Theme:
    """Default generation parameters bundled under a preset name.

    Attributes mirror GenerationRequest; see there for their meaning.
    """

    name: str
    description: str
    width: int
    height: int
    road_count: int
    building_count: int
    building_min_size: int
    building_max_size: int
    margin: int = 1
    road_growth: RoadGrowthPolicy = config.DEFAULT_ROAD_GROWTH
    dead_end_bias: float = config.DEFAULT_DEAD_END_BIAS
    road_width: int = config.DEFAULT_ROAD_WIDTH
    furnish: bool = True


# Request fields a caller may override on top of a theme.
_OVERRIDABLE_FIELDS = frozenset(
    f.name for f in fields(GenerationRequest) if f.name != "theme"
)


class ThemeRegistry:
    """Read-only mapping from preset name to Theme.

    The registry is filled once at construction and never mutated afterwards,
    so a single instance can be shared by concurrent sessions.
    """

    def __init__(self, themes: list[Theme]) -> None:
        by_name: dict[str, Theme] = {}
        for theme in themes:
            key = theme.name.lower()
            if key in by_name:
                raise ValueError(f"Theme '{theme.name}' is already registered.")
            by_name[key] = theme
        self._themes: Mapping[str, Theme] = MappingProxyType(by_name)

    def names(self) -> tuple[str, ...]:
        """Registered preset names, in registration order."""
        return tuple(self._themes)

    def resolve(self, name: str) -> Theme:
        """Look up a theme by name (case-insensitive).

        Raises:
            UnknownPreset: If no theme is registered under ``name``.
        """
        theme = self._themes.get(name.lower())
        if theme is None:
            raise UnknownPreset(name, self.names())
        return theme

    def build_request(
        self,
        name: str | None = None,
        seed: RandomSeed = None,
        **overrides: Any,
    ) -> GenerationRequest:
        """Create a GenerationRequest from a theme plus explicit overrides.

        Overrides whose value is None are ignored, which lets callers pass
        optional CLI flags or query parameters straight through.

        Args:
            name: Preset name. Defaults to ``config.DEFAULT_THEME``.
            seed: Optional seed for deterministic generation.
            **overrides: Any GenerationRequest field except ``theme``.

        Returns:
            A validated GenerationRequest.

        Raises:
            UnknownPreset: If the preset name is not registered.
            InvalidRequest: If an override names an unknown field or the
                merged values are out of range.
        """
        theme = self.resolve(name or config.DEFAULT_THEME)

        unknown = set(overrides) - _OVERRIDABLE_FIELDS
        if unknown:
            raise InvalidRequest(
                f"Unknown request fields: {', '.join(sorted(unknown))}"
            )

        values: dict[str, Any] = {
            "width": theme.width,
            "height": theme.height,
            "road_count": theme.road_count,
            "building_count": theme.building_count,
            "building_min_size": theme.building_min_size,
            "building_max_size": theme.building_max_size,
            "margin": theme.margin,
            "road_growth": theme.road_growth,
            "dead_end_bias": theme.dead_end_bias,
            "road_width": theme.road_width,
            "furnish": theme.furnish,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        # Shrinking only the max size below the theme's minimum pulls the
        # minimum down with it.
        if (
            overrides.get("building_max_size") is not None
            and overrides.get("building_min_size") is None
        ):
            values["building_min_size"] = min(
                values["building_min_size"], values["building_max_size"]
            )

        logger.debug(f"Resolved theme {theme.name!r} with overrides {overrides}")
        return GenerationRequest(theme=theme.name, seed=seed, **values)


# =============================================================================
# Registered presets
# =============================================================================

TOWN_THEME = Theme(
    name="town",
    description="Mid-sized map with a handful of buildings and scattered roads",
    width=48,
    height=48,
    road_count=120,
    building_count=6,
    building_min_size=4,
    building_max_size=12,
    margin=1,
    road_width=2,
)

VILLAGE_THEME = Theme(
    name="village",
    description="Sparse cottages with wide gaps and long winding lanes",
    width=40,
    height=40,
    road_count=80,
    building_count=4,
    building_min_size=5,
    building_max_size=9,
    margin=3,
    road_growth="dead_end",
)

CITY_THEME = Theme(
    name="city",
    description="Dense blocks of small buildings threaded by a road network",
    width=64,
    height=64,
    road_count=400,
    building_count=16,
    building_min_size=4,
    building_max_size=10,
    margin=1,
    road_growth="dead_end",
    dead_end_bias=8.0,
    road_width=2,
)

OUTPOST_THEME = Theme(
    name="outpost",
    description="A small clearing with one or two huts",
    width=24,
    height=24,
    road_count=20,
    building_count=2,
    building_min_size=4,
    building_max_size=8,
    margin=2,
)

THEMES = ThemeRegistry([TOWN_THEME, VILLAGE_THEME, CITY_THEME, OUTPOST_THEME])


def resolve(name: str) -> Theme:
    """Resolve a preset from the process-wide registry."""
    return THEMES.resolve(name)
