"""Exception types raised by the hex grid core."""

from __future__ import annotations


class HexGridError(Exception):
    """Base class for hexgrid errors."""


class CellValidationError(HexGridError, ValueError):
    """A cell was built from coordinates that are not valid cube coordinates."""


class GridRecordError(HexGridError, ValueError):
    """A serialized grid record is malformed or unreadable."""


class GridDisposedError(HexGridError, RuntimeError):
    """A grid was used after ``dispose()``."""
