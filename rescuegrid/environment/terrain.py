"""Road classification used by road-bound actors.

Whether a tile counts as "road" is resolved through an explicit, ordered
chain of sources. The first configured source answers:

1. ``classifier``: an explicit callable ``(grid, x, y) -> bool``;
2. ``layer``: a binary road layer stored on the grid as a named profile
   (``Config.ROAD_LAYER``, ``"road"`` by default);
3. ``cell type``: the cell's own type is ``CellType.ROAD``.

A missing source is skipped, never an error. The chain reports which source
decided so rejections can be diagnosed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from ..config import Config

if TYPE_CHECKING:
    from .grid import Grid


RoadPredicate = Callable[["Grid", int, int], bool]


class RoadSource(str, Enum):
    CLASSIFIER = "classifier"
    LAYER = "layer"
    CELL_TYPE = "cell_type"


@dataclass(frozen=True)
class RoadClassifier:
    """Ordered road resolution chain."""

    classifier: Optional[RoadPredicate] = None
    layer_name: Optional[str] = field(default_factory=lambda: Config.ROAD_LAYER)

    def classify(self, grid: "Grid", x: int, y: int) -> Tuple[bool, RoadSource]:
        """Return ``(is_road, source_that_answered)`` for tile (x, y)."""

        if self.classifier is not None:
            return bool(self.classifier(grid, x, y)), RoadSource.CLASSIFIER
        if self.layer_name:
            layer = grid.get_profile(self.layer_name)
            if layer is not None:
                return layer.is_walkable(x, y), RoadSource.LAYER
        cell = grid.get_cell(x, y)
        return (cell is not None and cell.is_road), RoadSource.CELL_TYPE

    def is_road(self, grid: "Grid", x: int, y: int) -> bool:
        return self.classify(grid, x, y)[0]
