"""Grid, cells, walkability profiles and hospital geometry."""

from .position import Direction, Position, NEIGHBOR_ORDER
from .cells import Cell, CellType
from .profiles import (
    ActorClass,
    ProfileShapeError,
    ProfileStore,
    WalkabilityProfile,
    merge_profiles,
)
from .grid import DEFAULT_PROFILE, Grid
from .terrain import RoadClassifier, RoadSource
from .hospital import Hospital
from .schemas import CellState, GridState, ProfileState
from .helpers import (
    DEFAULT_LEGEND,
    grid_from_ascii,
    grid_from_state,
    grid_to_state,
    profile_from_state,
    profile_to_state,
    render_grid_ascii,
)

__all__ = [
    "Direction",
    "Position",
    "NEIGHBOR_ORDER",
    "Cell",
    "CellType",
    "ActorClass",
    "ProfileShapeError",
    "ProfileStore",
    "WalkabilityProfile",
    "merge_profiles",
    "DEFAULT_PROFILE",
    "Grid",
    "RoadClassifier",
    "RoadSource",
    "Hospital",
    "CellState",
    "GridState",
    "ProfileState",
    "DEFAULT_LEGEND",
    "grid_from_ascii",
    "grid_from_state",
    "grid_to_state",
    "profile_from_state",
    "profile_to_state",
    "render_grid_ascii",
]
