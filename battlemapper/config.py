"""
Configuration constants.

Centralizes the magic numbers and configuration values used throughout the
codebase. Organized by functional area for easy maintenance.
"""

from typing import Literal, TypeAlias

# =============================================================================
# GENERATION LIMITS
# =============================================================================

# Requests above these dimensions fail with InvalidDimensions before any work.
MAX_MAP_WIDTH = 256
MAX_MAP_HEIGHT = 256

# Smallest footprint a building may have. Includes the wall ring, so a 3x3
# building has a single interior cell.
ABSOLUTE_MIN_BUILDING_SIZE = 3

# Preset used when a request does not name one.
DEFAULT_THEME = "town"

# =============================================================================
# ROAD GROWTH
# =============================================================================

RoadGrowthPolicy: TypeAlias = Literal["uniform", "dead_end"]

ROAD_GROWTH_POLICIES: tuple[RoadGrowthPolicy, ...] = ("uniform", "dead_end")

DEFAULT_ROAD_GROWTH: RoadGrowthPolicy = "uniform"

# Extra weight given to frontier cells that extend a dead end when the
# "dead_end" policy is active.
DEFAULT_DEAD_END_BIAS = 4.0

# Road cells laid side by side across the direction of growth. The original
# street maps drew two-cell-wide roads.
DEFAULT_ROAD_WIDTH = 1
MAX_ROAD_WIDTH = 8

# =============================================================================
# FURNISHING
# =============================================================================

# One interior partition wall per this many interior cells.
PARTITION_DIVISOR = 30

# Partitions never leave a room thinner than this (interior cells).
MIN_ROOM_SIZE = 2

# One crate per this many footprint cells.
CRATE_DIVISOR = 50

# One bush per this many empty cells left after placement.
BUSH_DIVISOR = 50

# Cars park on road segments longer than twice this, at least this many
# cells from either end.
CAR_END_CLEARANCE = 2

# =============================================================================
# RENDERING
# =============================================================================

# Side length of one grid cell in the rendered image, in pixels.
TILE_SIZE = 32

# Colour of the one-pixel grid lines drawn along every tile edge.
GRID_LINE_COLOR = (128, 128, 128)

DEFAULT_OUTPUT_PATH = "map.png"

# =============================================================================
# WEB MODE
# =============================================================================

# When this environment variable equals "1" the command line entry point
# answers a CGI request instead of writing a file.
WEB_MODE_VAR = "BATTLEMAPPER_WEB"
WEB_QUERY_VAR = "QUERY_STRING"
