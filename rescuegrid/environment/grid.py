"""Tile grid with per-cell occupancy and profile-aware walkability.

The grid is the single source of truth the path finder and move validator
read from. Out-of-bounds coordinates never raise: every query on them answers
``False`` or ``None``.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Iterator, List, Optional, Union

from .cells import Cell, CellType
from .position import NEIGHBOR_ORDER, Position
from .profiles import ProfileStore, WalkabilityProfile


class _DefaultProfile:
    """Sentinel meaning "use whatever default profile the grid holds"."""

    def __repr__(self) -> str:
        return "DEFAULT_PROFILE"


DEFAULT_PROFILE = _DefaultProfile()

ProfileArg = Union[WalkabilityProfile, None, _DefaultProfile]


class Grid:
    """Fixed-size ``width x height`` grid of optional cells, indexed ``[y][x]``.

    Negative dimensions are clamped to zero, giving an empty grid on which
    every coordinate is invalid.
    """

    def __init__(self, width: int, height: int):
        self._width = max(width, 0)
        self._height = max(height, 0)
        self._slots: List[List[Optional[Cell]]] = [[None] * self._width for _ in range(self._height)]
        self._profiles = ProfileStore()
        # Occupancy commits from the move validator run under this lock.
        self.mutation_lock = threading.RLock()

    @classmethod
    def filled(cls, width: int, height: int, cell_type: CellType = CellType.ROAD) -> "Grid":
        grid = cls(width, height)
        grid.fill(cell_type)
        return grid

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    # ------------------------------------------------------------------
    # Cells
    # ------------------------------------------------------------------

    def is_valid(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        if not self.is_valid(x, y):
            return None
        return self._slots[y][x]

    def cell_at(self, pos: Position) -> Optional[Cell]:
        return self.get_cell(pos.x, pos.y)

    def set_cell(self, x: int, y: int, cell: Optional[Cell]) -> None:
        """Place ``cell`` in slot (x, y) and stamp its position. Invalid coordinates are ignored.

        A cell never sits in two slots: if ``cell`` is still held by the slot its
        position points at, a copy is stored instead.
        """

        if not self.is_valid(x, y):
            return
        if cell is not None:
            prior = cell.position
            if prior is not None and prior != Position(x, y) and self.get_cell(prior.x, prior.y) is cell:
                cell = replace(cell, metadata=dict(cell.metadata))
            cell.position = Position(x, y)
        self._slots[y][x] = cell

    def set_occupied(self, x: int, y: int, occupied: bool) -> bool:
        """Set the occupancy flag; returns False when (x, y) is invalid or unpopulated."""

        cell = self.get_cell(x, y)
        if cell is None:
            return False
        cell.occupied = occupied
        return True

    def is_occupied(self, x: int, y: int) -> bool:
        cell = self.get_cell(x, y)
        return cell is not None and cell.occupied

    def fill(self, cell_type: CellType) -> None:
        for y in range(self._height):
            for x in range(self._width):
                self.set_cell(x, y, Cell(type=cell_type))

    def clear(self) -> None:
        """Drop every cell. Dimensions and profiles are kept."""

        self._slots = [[None] * self._width for _ in range(self._height)]

    def cells(self) -> Iterator[Cell]:
        """Populated cells in row-major order."""

        for row in self._slots:
            for cell in row:
                if cell is not None:
                    yield cell

    def hospitals(self) -> List[Position]:
        return [cell.position for cell in self.cells() if cell.is_hospital and cell.position is not None]

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def set_profile(self, name: str, profile: Optional[WalkabilityProfile]) -> None:
        self._profiles.set_profile(name, profile)

    def get_profile(self, name: str) -> Optional[WalkabilityProfile]:
        return self._profiles.get_profile(name)

    def profile_names(self) -> List[str]:
        return self._profiles.profile_names()

    def set_default_profile(self, profile: Optional[WalkabilityProfile]) -> None:
        self._profiles.set_default_profile(profile)

    def get_default_profile(self) -> Optional[WalkabilityProfile]:
        return self._profiles.get_default_profile()

    # ------------------------------------------------------------------
    # Walkability
    # ------------------------------------------------------------------

    def is_walkable(self, x: int, y: int, profile: ProfileArg = DEFAULT_PROFILE) -> bool:
        """Can an actor step onto (x, y) right now?

        Invalid, empty and occupied slots are never walkable. Otherwise the
        answer comes from ``profile`` (the grid's default profile when omitted).
        Passing ``None``, or omitting it on a grid without a default profile,
        falls back to the cell's intrinsic type rule.
        """

        cell = self.get_cell(x, y)
        if cell is None or cell.occupied:
            return False
        if isinstance(profile, _DefaultProfile):
            profile = self._profiles.get_default_profile()
        if profile is None:
            return cell.is_walkable
        return profile.is_walkable(x, y)

    def get_walkable_neighbors(self, pos: Position, profile: ProfileArg = DEFAULT_PROFILE) -> List[Position]:
        """Walkable 4-connected neighbors in down, right, up, left order."""

        neighbors: List[Position] = []
        for direction in NEIGHBOR_ORDER:
            nx, ny = pos.x + direction.dx, pos.y + direction.dy
            if self.is_walkable(nx, ny, profile):
                neighbors.append(Position(nx, ny))
        return neighbors

    def __repr__(self) -> str:
        return f"Grid({self._width}x{self._height})"
