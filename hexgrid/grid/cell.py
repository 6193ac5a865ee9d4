"""Cell — a single hexagon in cube coordinates.

A cell carries its ``(q, r, s)`` coordinate plus the state other layers
hang on it: elevation, walkability, free-form user data, a weak link to
its renderable tile and the scratch fields a pathfinder mutates during
a search.  Collaborators read and write these fields directly.
"""

from __future__ import annotations

import math
import numbers
import weakref
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from hexgrid.grid.errors import CellValidationError

Coord = tuple[int, int, int]


def _as_int(name: str, value: Any) -> int:
    """Return ``value`` as an int, rejecting anything not integral."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        msg = f"cube coordinate {name} must be a number, got {value!r}"
        raise CellValidationError(msg)
    if not math.isfinite(value) or int(value) != value:
        msg = f"cube coordinate {name} must be integral, got {value!r}"
        raise CellValidationError(msg)
    return int(value)


def _validated(q: Any, r: Any, s: Any = None) -> Coord:
    """Check a coordinate triple and derive ``s`` when it is missing."""
    qi = _as_int("q", q)
    ri = _as_int("r", r)
    if s is None:
        return qi, ri, -qi - ri
    si = _as_int("s", s)
    if qi + ri + si != 0:
        msg = f"cube coordinates must sum to zero, got ({qi}, {ri}, {si})"
        raise CellValidationError(msg)
    return qi, ri, si


@dataclass(eq=False)
class Cell:
    """A hexagonal grid cell.

    Attributes:
        q: Cube coordinate along the q axis.
        r: Cube coordinate along the r axis.
        s: Cube coordinate along the s axis; derived as ``-q - r`` when
            omitted.
        h: Elevation, used for vertical distance and world-Y placement.
        walkable: Flag consulted by pathfinders.
        user_data: Arbitrary key/value pairs carried through save/load.
        calc_cost: Pathfinder scratch: accumulated cost.
        priority: Pathfinder scratch: open-set priority.
        visited: Pathfinder scratch: closed-set marker.

    A cell stored in a :class:`HexGrid` is keyed by its coordinates, so it
    must not be moved in place with :meth:`set`, :meth:`add` or
    :meth:`copy`.  Remove it from the grid, move it, then add it back.

    Raises:
        CellValidationError: If the coordinates are not integral numbers
            summing to zero.
    """

    q: int = 0
    r: int = 0
    s: int | None = None
    h: float = 0.0
    walkable: bool = True
    user_data: dict[str, Any] = field(default_factory=dict)
    calc_cost: float = 0.0
    priority: float = 0.0
    visited: bool = False
    _parent_ref: weakref.ref[Cell] | None = field(
        default=None,
        init=False,
        repr=False,
    )
    _tile_ref: weakref.ref[Any] | None = field(
        default=None,
        init=False,
        repr=False,
    )

    def __post_init__(self) -> None:
        """Enforce the zero-sum invariant."""
        self.q, self.r, self.s = _validated(self.q, self.r, self.s)

    @property
    def coords(self) -> Coord:
        """The ``(q, r, s)`` triple."""
        return self.q, self.r, self.s

    @property
    def parent(self) -> Cell | None:
        """Previous cell on the path being built, if it is still alive."""
        return self._parent_ref() if self._parent_ref is not None else None

    @parent.setter
    def parent(self, value: Cell | None) -> None:
        self._parent_ref = weakref.ref(value) if value is not None else None

    @property
    def tile(self) -> Any:
        """Renderable handle owned by the rendering layer, or None."""
        return self._tile_ref() if self._tile_ref is not None else None

    @tile.setter
    def tile(self, value: Any) -> None:
        self._tile_ref = weakref.ref(value) if value is not None else None

    def set(self, q: Any, r: Any, s: Any = None) -> Cell:
        """Move this cell to new coordinates.

        Only call this on cells that are not stored in a grid.

        Returns:
            This cell.
        """
        self.q, self.r, self.s = _validated(q, r, s)
        return self

    def copy(self, other: Cell) -> Cell:
        """Overwrite coordinates, height, walkability and user data.

        The user data mapping is copied, not shared.

        Args:
            other: Cell to copy from.

        Returns:
            This cell.
        """
        self.set(other.q, other.r, other.s)
        self.h = other.h
        self.walkable = other.walkable
        self.user_data = dict(other.user_data)
        return self

    def add(self, other: Cell | Sequence[int]) -> Cell:
        """Add another cell's (or a ``(q, r, s)`` offset's) coordinates.

        Only call this on cells that are not stored in a grid.

        Returns:
            This cell.
        """
        if isinstance(other, Cell):
            dq, dr, ds = other.coords
        else:
            dq, dr, ds = other
        return self.set(self.q + dq, self.r + dr, self.s + ds)

    def reset_path(self) -> None:
        """Zero the pathfinder scratch fields."""
        self.calc_cost = 0.0
        self.priority = 0.0
        self._parent_ref = None
        self.visited = False

    def to_dict(self) -> dict[str, Any]:
        """Return the persistent fields as a serializable record."""
        return {
            "q": self.q,
            "r": self.r,
            "s": self.s,
            "h": self.h,
            "walkable": self.walkable,
            "userData": self.user_data,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Cell:
        """Build a cell from a record produced by :meth:`to_dict`.

        Raises:
            CellValidationError: If the record lacks coordinates, they
                are invalid, or a field has the wrong type.
        """
        if "q" not in data or "r" not in data:
            msg = f"cell record is missing coordinates: {dict(data)!r}"
            raise CellValidationError(msg)
        walkable = data.get("walkable", True)
        if not isinstance(walkable, bool):
            msg = f"cell walkable must be a boolean, got {walkable!r}"
            raise CellValidationError(msg)
        h = data.get("h", 0.0)
        if isinstance(h, bool) or not isinstance(h, numbers.Real):
            msg = f"cell height must be a number, got {h!r}"
            raise CellValidationError(msg)
        user_data = data.get("userData") or {}
        if not isinstance(user_data, Mapping):
            msg = f"cell userData must be a mapping, got {user_data!r}"
            raise CellValidationError(msg)
        return cls(
            q=data["q"],
            r=data["r"],
            s=data.get("s"),
            h=float(h),
            walkable=walkable,
            user_data=dict(user_data),
        )

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Cell):
            return self.coords == other.coords
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.coords)
