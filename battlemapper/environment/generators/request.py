"""Generation request: the immutable input of one generation session."""

from __future__ import annotations

from dataclasses import dataclass

from battlemapper import config
from battlemapper.config import ROAD_GROWTH_POLICIES, RoadGrowthPolicy
from battlemapper.errors import InvalidDimensions, InvalidRequest
from battlemapper.types import RandomSeed


@dataclass(frozen=True)
class GenerationRequest:
    """Everything a session needs to generate one map.

    Requests validate themselves on construction, so holding a
    GenerationRequest means its parameters are in range.

    Attributes:
        width: Map width in cells.
        height: Map height in cells.
        road_count: Target number of road cells.
        building_count: Target number of buildings.
        theme: Name of the preset the defaults came from.
        seed: Optional seed. When set, identical requests give identical maps.
        building_min_size: Smallest building side, wall ring included.
        building_max_size: Largest building side, wall ring included.
        margin: Empty cells kept between buildings, and between buildings
            and roads.
        road_growth: "uniform" frontier sampling or "dead_end" biased growth.
        dead_end_bias: Extra weight for dead-end extensions ("dead_end" only).
        road_width: Road cells laid across the direction of growth per step.
        furnish: Whether to add partitions, crates, cars and bushes.
        max_steps: Optional cap on placement commits across all phases.
    """

    width: int
    height: int
    road_count: int
    building_count: int
    theme: str = config.DEFAULT_THEME
    seed: RandomSeed = None
    building_min_size: int = 4
    building_max_size: int = 12
    margin: int = 1
    road_growth: RoadGrowthPolicy = config.DEFAULT_ROAD_GROWTH
    dead_end_bias: float = config.DEFAULT_DEAD_END_BIAS
    road_width: int = config.DEFAULT_ROAD_WIDTH
    furnish: bool = True
    max_steps: int | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check every parameter.

        Raises:
            InvalidDimensions: If width/height are not positive or exceed
                the configured maximum.
            InvalidRequest: For any other out-of-range parameter.
        """
        if not 0 < self.width <= config.MAX_MAP_WIDTH:
            raise InvalidDimensions(
                f"width must be in 1..{config.MAX_MAP_WIDTH}, got {self.width}"
            )
        if not 0 < self.height <= config.MAX_MAP_HEIGHT:
            raise InvalidDimensions(
                f"height must be in 1..{config.MAX_MAP_HEIGHT}, got {self.height}"
            )
        if self.road_count < 0:
            raise InvalidRequest(f"road_count must be >= 0, got {self.road_count}")
        if self.building_count < 0:
            raise InvalidRequest(
                f"building_count must be >= 0, got {self.building_count}"
            )
        if self.building_min_size < config.ABSOLUTE_MIN_BUILDING_SIZE:
            raise InvalidRequest(
                f"building_min_size must be >= {config.ABSOLUTE_MIN_BUILDING_SIZE},"
                f" got {self.building_min_size}"
            )
        if self.building_max_size < self.building_min_size:
            raise InvalidRequest(
                f"building_max_size ({self.building_max_size}) is smaller than"
                f" building_min_size ({self.building_min_size})"
            )
        if self.margin < 0:
            raise InvalidRequest(f"margin must be >= 0, got {self.margin}")
        if self.road_growth not in ROAD_GROWTH_POLICIES:
            raise InvalidRequest(
                f"road_growth must be one of {ROAD_GROWTH_POLICIES},"
                f" got {self.road_growth!r}"
            )
        if self.dead_end_bias < 0:
            raise InvalidRequest(
                f"dead_end_bias must be >= 0, got {self.dead_end_bias}"
            )
        if not 1 <= self.road_width <= config.MAX_ROAD_WIDTH:
            raise InvalidRequest(
                f"road_width must be in 1..{config.MAX_ROAD_WIDTH},"
                f" got {self.road_width}"
            )
        if self.max_steps is not None and self.max_steps < 0:
            raise InvalidRequest(f"max_steps must be >= 0, got {self.max_steps}")

    @property
    def grid_area(self) -> int:
        return self.width * self.height

    @property
    def min_building_area(self) -> int:
        return self.building_min_size * self.building_min_size

    def is_overcommitted(self) -> bool:
        """True when the counts cannot fit even with perfect packing.

        Each building needs at least ``min_building_area`` cells and each
        road needs one; margins are ignored, so this only catches requests
        that are impossible under any layout.
        """
        required = self.building_count * self.min_building_area + self.road_count
        return required > self.grid_area
