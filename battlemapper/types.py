from __future__ import annotations

from typing import TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

CellCoord: TypeAlias = int  # Always integer cell position

# Grid coordinates - absolute positions on the battle map
CellPos: TypeAlias = tuple[CellCoord, CellCoord]  # Example: (5, 3) = cell 5,3 on map

# Cardinal steps used for 4-adjacency
Direction: TypeAlias = tuple[int, int]  # Example: (-1, 0) = westward step

# Pixel dimensions of a rendered image
PixelSize: TypeAlias = tuple[int, int]

# =============================================================================
# COLOR TYPES
# =============================================================================

ColorRGB: TypeAlias = tuple[int, int, int]

# =============================================================================
# GENERATION TYPES
# =============================================================================

RandomSeed = int | str | None

CARDINAL_DIRECTIONS: tuple[Direction, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
