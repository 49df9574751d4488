"""Hospital delivery geometry.

Vehicles may not enter a hospital tile, so deliveries happen from a road tile
within ``delivery_range`` (Manhattan) of the hospital, one tile by default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

from .position import Position
from .terrain import RoadClassifier

if TYPE_CHECKING:
    from .grid import Grid


@dataclass
class Hospital:
    position: Position
    delivery_range: int = 1

    def __post_init__(self) -> None:
        if self.delivery_range < 0:
            self.delivery_range = 0

    def distance_to(self, pos: Position) -> int:
        return self.position.distance_to(pos)

    def is_same_tile(self, pos: Position) -> bool:
        return self.position == pos

    def is_adjacent(self, pos: Position) -> bool:
        return self.distance_to(pos) == 1

    def is_within_delivery_range(self, pos: Position) -> bool:
        return self.distance_to(pos) <= self.delivery_range

    def can_deliver_from(
        self,
        pos: Position,
        grid: "Grid",
        roads: Optional[RoadClassifier] = None,
    ) -> bool:
        """True if a vehicle standing on ``pos`` can hand over a victim.

        The tile must be in delivery range, must not be the hospital itself,
        must hold a non-hospital cell, and must classify as road.
        """

        if not self.is_within_delivery_range(pos) or self.is_same_tile(pos):
            return False
        cell = grid.get_cell(pos.x, pos.y)
        if cell is None or cell.is_hospital:
            return False
        return (roads or RoadClassifier()).is_road(grid, pos.x, pos.y)

    def adjacent_tiles(self) -> Tuple[Position, ...]:
        """The four orthogonal tiles around the hospital: down, left, right, up."""

        p = self.position
        return (p.down(), p.left(), p.right(), p.up())

    @staticmethod
    def find_nearest(hospitals: Sequence["Hospital"], pos: Position) -> Optional["Hospital"]:
        """Closest hospital by Manhattan distance; the first one listed wins ties."""

        best: Optional[Hospital] = None
        best_distance = 0
        for hospital in hospitals:
            distance = hospital.distance_to(pos)
            if best is None or distance < best_distance:
                best = hospital
                best_distance = distance
        return best

    @classmethod
    def discover(cls, grid: "Grid", delivery_range: int = 1) -> list["Hospital"]:
        """Build a Hospital for every hospital cell on the grid, row-major."""

        return [cls(position, delivery_range) for position in grid.hospitals()]
