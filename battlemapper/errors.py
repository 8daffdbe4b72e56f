"""Exception types raised by battle map generation.

Validation errors are raised before any grid exists, so a caller that sees
one of these knows no generation work was done.
"""

from __future__ import annotations

from battlemapper.types import CellPos


class BattleMapperError(Exception):
    """Base class for every error raised by this package."""


class UnknownPreset(BattleMapperError, KeyError):
    """The requested theme/preset name is not registered."""

    def __init__(self, name: str, known: tuple[str, ...] = ()) -> None:
        self.name = name
        self.known = known
        message = f"Unknown preset: {name!r}"
        if known:
            message += f" (known presets: {', '.join(known)})"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0])


class InvalidRequest(BattleMapperError, ValueError):
    """A request parameter is outside its allowed range."""


class InvalidDimensions(InvalidRequest):
    """Width or height is not positive or exceeds the configured maximum."""


class OvercommittedError(BattleMapperError):
    """The requested elements cannot fit even with perfect packing."""


class OutOfBounds(BattleMapperError, IndexError):
    """A grid write addressed a cell outside the grid."""

    def __init__(self, pos: CellPos, width: int, height: int) -> None:
        self.pos = pos
        super().__init__(f"Cell {pos} is outside the {width}x{height} grid")


class PhaseError(BattleMapperError, RuntimeError):
    """The placement state machine was driven out of order."""
