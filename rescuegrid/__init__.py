"""
Rescuegrid - grid walkability, A* routing and move validation for rescue simulations.

Rescue agents (on foot or in ambulances) move over a tile grid toward victims
and hospitals. This library is the engine between the map and the agents:

- Grid with per-cell type and occupancy, plus named walkability profiles
- Deterministic A* search with an expansion budget and closest-on-fail fallback
- Transactional single-step move validation per actor class

No file I/O, rendering or global state. Loaders and agent logic live outside
and hand their data in.
"""

__version__ = "0.1.0"

from .config import Config
from .environment import (
    ActorClass,
    Cell,
    CellType,
    CellState,
    DEFAULT_PROFILE,
    Direction,
    Grid,
    GridState,
    Hospital,
    Position,
    ProfileShapeError,
    ProfileState,
    ProfileStore,
    RoadClassifier,
    RoadSource,
    WalkabilityProfile,
    grid_from_ascii,
    grid_from_state,
    grid_to_state,
    merge_profiles,
    render_grid_ascii,
)
from .pathfinding import AStarPathFinder, PathOptions, PathResult, PathStatus, find_path
from .movement import (
    MoveResult,
    MoveStatus,
    MoveValidator,
    Mover,
    MovementPolicy,
    PathFollower,
    PedestrianPolicy,
    VehiclePolicy,
)
from .schemas import MoveRecord, PathRecord

__all__ = [
    "Config",
    # Grid model
    "ActorClass",
    "Cell",
    "CellType",
    "DEFAULT_PROFILE",
    "Direction",
    "Grid",
    "Hospital",
    "Position",
    # Profiles
    "ProfileShapeError",
    "ProfileStore",
    "WalkabilityProfile",
    "merge_profiles",
    "RoadClassifier",
    "RoadSource",
    # Path search
    "AStarPathFinder",
    "PathOptions",
    "PathResult",
    "PathStatus",
    "find_path",
    # Movement
    "MoveResult",
    "MoveStatus",
    "MoveValidator",
    "Mover",
    "MovementPolicy",
    "PathFollower",
    "PedestrianPolicy",
    "VehiclePolicy",
    # Snapshots
    "CellState",
    "GridState",
    "ProfileState",
    "PathRecord",
    "MoveRecord",
    # Helpers
    "grid_from_ascii",
    "grid_from_state",
    "grid_to_state",
    "render_grid_ascii",
]
