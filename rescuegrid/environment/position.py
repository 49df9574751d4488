"""Tile coordinates and 4-connected direction helpers.

Positions are immutable value objects so they can key dictionaries (search
bookkeeping, occupancy maps) and be shared between snapshots safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Direction(Enum):
    """Facing/step direction on the tile grid (screen coordinates, y grows down)."""

    DOWN = (0, 1)
    RIGHT = (1, 0)
    UP = (0, -1)
    LEFT = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @classmethod
    def between(cls, a: "Position", b: "Position") -> Optional["Direction"]:
        """Return the direction of a single step from ``a`` to ``b``.

        Returns None when the two positions are not 4-adjacent.
        """

        delta = (b.x - a.x, b.y - a.y)
        for direction in cls:
            if direction.value == delta:
                return direction
        return None


# Enumeration order used by neighbor queries. A* tie-breaking depends on it.
NEIGHBOR_ORDER: Tuple[Direction, ...] = (
    Direction.DOWN,
    Direction.RIGHT,
    Direction.UP,
    Direction.LEFT,
)


@dataclass(frozen=True)
class Position:
    """Integer (x, y) tile coordinate."""

    x: int
    y: int

    def distance_to(self, other: "Position") -> int:
        """Manhattan distance ``|dx| + |dy|``."""

        return abs(self.x - other.x) + abs(self.y - other.y)

    def is_adjacent(self, other: "Position") -> bool:
        return self.distance_to(other) == 1

    def translated(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def step(self, direction: Direction) -> "Position":
        return Position(self.x + direction.dx, self.y + direction.dy)

    def up(self) -> "Position":
        return self.step(Direction.UP)

    def down(self) -> "Position":
        return self.step(Direction.DOWN)

    def left(self) -> "Position":
        return self.step(Direction.LEFT)

    def right(self) -> "Position":
        return self.step(Direction.RIGHT)

    def neighbors4(self) -> Tuple["Position", ...]:
        """Orthogonal neighbors in down, right, up, left order (no bounds check)."""

        return tuple(self.step(direction) for direction in NEIGHBOR_ORDER)

    def within_bounds(self, width: int, height: int) -> bool:
        if width <= 0 or height <= 0:
            return False
        return 0 <= self.x < width and 0 <= self.y < height

    def sort_key(self) -> Tuple[int, int]:
        """Row-major ordering key: y first, then x."""

        return (self.y, self.x)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @classmethod
    def of(cls, value: "Position | Tuple[int, int] | list[int]") -> "Position":
        """Coerce a Position, tuple or two-item list into a Position."""

        if isinstance(value, Position):
            return value
        x, y = value
        return cls(int(x), int(y))

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"
