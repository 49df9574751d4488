"""Walkability profiles (collision maps) and the named profile store.

A profile is an immutable boolean matrix answering "can this actor class pass
(x, y)?" independently of who currently stands there. Different actor classes
get different profiles: pedestrians avoid rubble and buildings, vehicles stay
on roads. Profiles are swapped whole; edits produce a new profile.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .cells import CellType
from .position import Position

if TYPE_CHECKING:
    from .grid import Grid


LayerValues = Union[Sequence[int], Sequence[Sequence[int]]]


class ProfileShapeError(ValueError):
    """Raised when a profile is built with negative or inconsistent dimensions."""


class ActorClass(str, Enum):
    """Movement classes with distinct terrain rules."""

    PEDESTRIAN = "pedestrian"
    VEHICLE = "vehicle"


class WalkabilityProfile:
    """Immutable passability matrix indexed ``[y][x]``."""

    __slots__ = ("_width", "_height", "_rows")

    def __init__(self, width: int, height: int, rows: Iterable[Iterable[bool]]):
        if width < 0 or height < 0:
            raise ProfileShapeError(f"Profile dimensions must be non-negative, got {width}x{height}")
        frozen = tuple(tuple(bool(v) for v in row) for row in rows)
        if len(frozen) != height:
            raise ProfileShapeError(f"Expected {height} rows, got {len(frozen)}")
        for y, row in enumerate(frozen):
            if len(row) != width:
                raise ProfileShapeError(f"Row {y} has {len(row)} entries, expected {width}")
        self._width = width
        self._height = height
        self._rows: Tuple[Tuple[bool, ...], ...] = frozen

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[bool]]) -> "WalkabilityProfile":
        """Build from nested booleans (True = passable). Width comes from the first row."""

        height = len(rows)
        width = len(rows[0]) if height else 0
        return cls(width, height, rows)

    @classmethod
    def filled(cls, width: int, height: int, passable: bool = True) -> "WalkabilityProfile":
        if width < 0 or height < 0:
            raise ProfileShapeError(f"Profile dimensions must be non-negative, got {width}x{height}")
        return cls(width, height, ([passable] * width for _ in range(height)))

    @classmethod
    def from_binary_layer(cls, values: LayerValues, width: int, height: int) -> "WalkabilityProfile":
        """Build from a binary terrain layer where ``0`` is passable and non-zero is blocked.

        ``values`` may be flat (row-major) or nested rows; the total count must
        equal ``width * height``.
        """

        flat = _flatten_layer(values, width, height)
        return cls(width, height, ([v == 0 for v in flat[y * width:(y + 1) * width]] for y in range(height)))

    @classmethod
    def from_layers(
        cls,
        width: int,
        height: int,
        walkable_layers: Sequence[LayerValues] = (),
        blocked_layers: Sequence[LayerValues] = (),
    ) -> "WalkabilityProfile":
        """Combine tile layers: non-zero walkable tiles open, non-zero blocked tiles close.

        Everything starts blocked and blocked layers take precedence, so with no
        layers the result is blocked everywhere.
        """

        grid = [[False] * width for _ in range(height)]
        for layer in walkable_layers:
            flat = _flatten_layer(layer, width, height)
            for i, value in enumerate(flat):
                if value != 0:
                    grid[i // width][i % width] = True
        for layer in blocked_layers:
            flat = _flatten_layer(layer, width, height)
            for i, value in enumerate(flat):
                if value != 0:
                    grid[i // width][i % width] = False
        return cls(width, height, grid)

    @classmethod
    def for_actor(cls, grid: "Grid", actor: ActorClass) -> "WalkabilityProfile":
        """Derive a profile from the grid's cell types for an actor class.

        Pedestrians pass ROAD and HOSPITAL tiles. Vehicles pass ROAD tiles only.
        Empty slots are blocked for both.
        """

        if actor is ActorClass.VEHICLE:
            allowed = {CellType.ROAD}
        else:
            allowed = {CellType.ROAD, CellType.HOSPITAL}
        rows = []
        for y in range(grid.height):
            row = []
            for x in range(grid.width):
                cell = grid.get_cell(x, y)
                row.append(cell is not None and cell.type in allowed)
            rows.append(row)
        return cls(grid.width, grid.height, rows)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def is_walkable(self, x: int, y: int) -> bool:
        """True if (x, y) is passable. Out-of-bounds coordinates are never passable."""

        if x < 0 or y < 0 or x >= self._width or y >= self._height:
            return False
        return self._rows[y][x]

    def is_blocked(self, x: int, y: int) -> bool:
        return not self.is_walkable(x, y)

    def to_rows(self) -> List[List[bool]]:
        return [list(row) for row in self._rows]

    def walkable_count(self) -> int:
        return sum(sum(1 for v in row if v) for row in self._rows)

    # ------------------------------------------------------------------
    # Copy-on-write edits
    # ------------------------------------------------------------------

    def with_blocked(self, positions: Iterable[Position]) -> "WalkabilityProfile":
        return self._with_values(positions, False)

    def with_walkable(self, positions: Iterable[Position]) -> "WalkabilityProfile":
        return self._with_values(positions, True)

    def _with_values(self, positions: Iterable[Position], value: bool) -> "WalkabilityProfile":
        rows = self.to_rows()
        for pos in positions:
            if 0 <= pos.x < self._width and 0 <= pos.y < self._height:
                rows[pos.y][pos.x] = value
        return WalkabilityProfile(self._width, self._height, rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WalkabilityProfile):
            return NotImplemented
        return self._rows == other._rows and self._width == other._width

    def __hash__(self) -> int:
        return hash((self._width, self._height, self._rows))

    def __repr__(self) -> str:
        return f"WalkabilityProfile({self._width}x{self._height}, walkable={self.walkable_count()})"


def merge_profiles(profiles: Sequence[WalkabilityProfile]) -> WalkabilityProfile:
    """Intersect profiles: a tile is walkable only if every input allows it.

    Used to stack a hazard layer on top of a base obstacle layer. All inputs
    must share the same dimensions.
    """

    if not profiles:
        raise ProfileShapeError("Cannot merge an empty list of profiles")
    width, height = profiles[0].width, profiles[0].height
    for profile in profiles:
        if profile.width != width or profile.height != height:
            raise ProfileShapeError(
                f"All profiles must share {width}x{height}, got {profile.width}x{profile.height}"
            )
    rows = [
        [all(p.is_walkable(x, y) for p in profiles) for x in range(width)]
        for y in range(height)
    ]
    return WalkabilityProfile(width, height, rows)


class ProfileStore:
    """Named profile slots plus an optional default profile."""

    def __init__(self) -> None:
        self._profiles: Dict[str, WalkabilityProfile] = {}
        self._default: Optional[WalkabilityProfile] = None

    def set_profile(self, name: str, profile: Optional[WalkabilityProfile]) -> None:
        """Store ``profile`` under ``name``; ``None`` removes the entry."""

        if profile is None:
            self._profiles.pop(name, None)
        else:
            self._profiles[name] = profile

    def get_profile(self, name: str) -> Optional[WalkabilityProfile]:
        return self._profiles.get(name)

    def profile_names(self) -> List[str]:
        return sorted(self._profiles)

    def set_default_profile(self, profile: Optional[WalkabilityProfile]) -> None:
        self._default = profile

    def get_default_profile(self) -> Optional[WalkabilityProfile]:
        return self._default


def _flatten_layer(values: LayerValues, width: int, height: int) -> List[int]:
    if width < 0 or height < 0:
        raise ProfileShapeError(f"Layer dimensions must be non-negative, got {width}x{height}")
    flat: List[int] = []
    for item in values:
        if isinstance(item, (list, tuple)):
            flat.extend(int(v) for v in item)
        else:
            flat.append(int(item))
    if len(flat) != width * height:
        raise ProfileShapeError(f"Layer size mismatch: expected {width * height} values, got {len(flat)}")
    return flat
