"""
Cell state definitions for the battle map grid.

This module defines:
- `CellState`: the integer IDs stored in a `Grid`'s numpy array.
- `CellStateData`: a structured numpy dtype holding the per-state properties
  (display name, ASCII glyph, render colour). One record exists per state,
  indexed by the state's integer value.
- Helper functions that turn a whole array of states into an array of one
  property with a single fancy-indexing lookup.

CellState -> pixel colour mapping used by the PNG renderer:

    EMPTY              dirt          (150, 120,  80)
    ROAD               road          (105, 100,  95)
    BUILDING_INTERIOR  floor boards  (190, 160, 110)
    BUILDING_WALL      wall          ( 60,  50,  45)
    RESERVED_WALL      wall (unset)  (160,  40,  40)
    OUT_OF_BOUNDS      void          (  0,   0,   0)
    CRATE              crate         (120,  80,  30)
    BUSH               bush          ( 60, 120,  50)
    CAR                car           ( 70,  90, 140)

RESERVED_WALL and OUT_OF_BOUNDS never appear in a finished grid; they get
loud colours so a rendering bug is obvious.
"""

from enum import IntEnum

import numpy as np

from battlemapper.types import ColorRGB


class CellState(IntEnum):
    """State of a single grid cell."""

    EMPTY = 0
    ROAD = 1
    BUILDING_INTERIOR = 2
    BUILDING_WALL = 3
    # Footprint ring committed during building placement, turned into
    # BUILDING_WALL by the wall phase.
    RESERVED_WALL = 4
    # Returned by Grid.get for coordinates outside the grid. Never stored.
    OUT_OF_BOUNDS = 5
    CRATE = 6
    BUSH = 7
    # A parked car. Still part of the road network.
    CAR = 8


# Cell states that make up the road network.
ROAD_STATES = (CellState.ROAD, CellState.CAR)


CellStateData = np.dtype(
    [
        ("display_name", "U24"),
        ("glyph", "U1"),  # Single character for text dumps
        ("color", "3B"),  # RGB: 3 unsigned bytes (0-255 each)
    ]
)


def make_cell_state_data(
    *, display_name: str, glyph: str, color: ColorRGB
) -> np.ndarray:
    """Create one CellStateData record."""
    return np.array((display_name, glyph, color), dtype=CellStateData)


_CELL_STATE_DATA: dict[CellState, np.ndarray] = {
    CellState.EMPTY: make_cell_state_data(
        display_name="Empty", glyph=".", color=(150, 120, 80)
    ),
    CellState.ROAD: make_cell_state_data(
        display_name="Road", glyph="=", color=(105, 100, 95)
    ),
    CellState.BUILDING_INTERIOR: make_cell_state_data(
        display_name="Building Interior", glyph="_", color=(190, 160, 110)
    ),
    CellState.BUILDING_WALL: make_cell_state_data(
        display_name="Building Wall", glyph="#", color=(60, 50, 45)
    ),
    CellState.RESERVED_WALL: make_cell_state_data(
        display_name="Reserved Wall", glyph="+", color=(160, 40, 40)
    ),
    CellState.OUT_OF_BOUNDS: make_cell_state_data(
        display_name="Out Of Bounds", glyph=" ", color=(0, 0, 0)
    ),
    CellState.CRATE: make_cell_state_data(
        display_name="Crate", glyph="x", color=(120, 80, 30)
    ),
    CellState.BUSH: make_cell_state_data(
        display_name="Bush", glyph="*", color=(60, 120, 50)
    ),
    CellState.CAR: make_cell_state_data(
        display_name="Car", glyph="c", color=(70, 90, 140)
    ),
}

# Indexed by CellState value. Built once the table above is complete.
_cell_state_table = np.array(
    [_CELL_STATE_DATA[state] for state in CellState], dtype=CellStateData
)


def get_color_map(cells: np.ndarray) -> np.ndarray:
    """Convert an array of CellState values into an RGB array.

    The result has the input's shape plus a trailing axis of length 3.
    """
    return _cell_state_table["color"][cells]


def get_glyph_map(cells: np.ndarray) -> np.ndarray:
    """Convert an array of CellState values into single-character glyphs."""
    return _cell_state_table["glyph"][cells]


def get_cell_state_name(state: int) -> str:
    """Human-readable name of a cell state (e.g. "Building Wall")."""
    if 0 <= state < len(_cell_state_table):
        return str(_cell_state_table["display_name"][state])
    return f"Unknown Cell (ID: {state})"
