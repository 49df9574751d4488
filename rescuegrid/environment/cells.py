"""Cell types and per-tile state for the rescue grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .position import Position


# Loader type strings mapped onto cell types. Unknown strings fall through to
# the walkable hint handled in CellType.parse().
_TYPE_SYNONYMS: Dict[str, str] = {
    "road": "ROAD",
    "street": "ROAD",
    "asphalt": "ROAD",
    "hospital": "HOSPITAL",
    "clinic": "HOSPITAL",
    "rubble": "RUBBLE",
    "debris": "RUBBLE",
    "obstacle": "OBSTACLE",
    "barrier": "OBSTACLE",
    "car": "OBSTACLE",
    "vehicle": "OBSTACLE",
    "wall": "OBSTACLE",
    "building": "BUILDING",
    "house": "BUILDING",
}


class CellType(str, Enum):
    """Terrain classification of a single tile.

    Only ROAD and HOSPITAL are intrinsically walkable. The intrinsic rule is the
    fallback used when no walkability profile applies.
    """

    ROAD = "road"
    RUBBLE = "rubble"
    OBSTACLE = "obstacle"
    HOSPITAL = "hospital"
    BUILDING = "building"
    EMPTY = "empty"

    @property
    def is_walkable(self) -> bool:
        return self in (CellType.ROAD, CellType.HOSPITAL)

    @property
    def is_blocked(self) -> bool:
        return not self.is_walkable

    @property
    def is_hospital(self) -> bool:
        return self is CellType.HOSPITAL

    @property
    def is_road(self) -> bool:
        return self is CellType.ROAD

    @classmethod
    def parse(cls, type_str: Optional[str], walkable: Optional[bool] = None) -> "CellType":
        """Map a loader's free-form type string onto a CellType.

        Synonyms are accepted case-insensitively (``street`` -> ROAD,
        ``debris`` -> RUBBLE, ``clinic`` -> HOSPITAL ...). When the string is
        empty or unknown the optional ``walkable`` hint decides between ROAD
        and RUBBLE; without a hint the result is EMPTY.
        """

        key = (type_str or "").strip().lower()
        name = _TYPE_SYNONYMS.get(key)
        if name is not None:
            return cls[name]
        if walkable is not None:
            return cls.ROAD if walkable else cls.RUBBLE
        return cls.EMPTY


@dataclass
class Cell:
    """A single populated grid slot.

    ``position`` is stamped by ``Grid.set_cell`` so it always matches the slot
    holding the cell. ``occupied`` marks that an actor currently stands here and
    is only changed through ``Grid.set_occupied`` or the move validator.
    """

    type: CellType = CellType.EMPTY
    occupied: bool = False
    position: Optional[Position] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_walkable(self) -> bool:
        """Intrinsic, type-based walkability (ignores occupancy)."""

        return self.type.is_walkable

    @property
    def is_hospital(self) -> bool:
        return self.type.is_hospital

    @property
    def is_road(self) -> bool:
        return self.type.is_road
