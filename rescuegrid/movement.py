"""
Single-step move validation for grid actors.

Each actor class gets a movement policy chosen at construction time:

- ``PedestrianPolicy``: rescuers on foot. Only the bounds are checked;
  occupancy and walkability profiles are ignored and no occupancy is
  claimed. This asymmetry with vehicles is part of the movement model.
- ``VehiclePolicy``: road-bound vehicles (ambulances). The target must be
  in bounds, populated, unoccupied, not a hospital tile, classified as road,
  and passable under the vehicle profile when one is supplied.

``MoveValidator.try_move`` runs every check before mutating anything, then
commits the occupancy transfer under the grid's mutation lock. The returned
``MoveResult`` names the first failing check; ``bool(result)`` is the simple
accept/reject view.

``PathFollower`` walks a precomputed path one validated step at a time and
stops at the first rejection so the caller can plan again.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .config import Config
from .environment.grid import Grid
from .environment.position import Direction, Position
from .environment.profiles import ActorClass, WalkabilityProfile
from .environment.terrain import RoadClassifier, RoadSource
from .logging_utils import log_error, log_success


class MoveStatus(str, Enum):
    ACCEPTED = "accepted"
    NO_OP = "no_op"
    REJECTED_BOUNDS = "rejected_bounds"
    REJECTED_NOT_ADJACENT = "rejected_not_adjacent"
    REJECTED_OCCUPIED = "rejected_occupied"
    REJECTED_FORBIDDEN_TERRAIN = "rejected_forbidden_terrain"
    REJECTED_IMPASSABLE = "rejected_impassable"

    @property
    def accepted(self) -> bool:
        return self in (MoveStatus.ACCEPTED, MoveStatus.NO_OP)


@dataclass
class Mover:
    """Anything that occupies a tile and moves one step at a time.

    ``holds_tile`` is set once the mover has claimed occupancy of its tile
    through ``MoveValidator.place``; only a held tile is ever released.
    """

    mover_id: str
    position: Position
    facing: Direction = Direction.DOWN
    holds_tile: bool = False


@dataclass(frozen=True)
class MoveResult:
    status: MoveStatus
    source: Position
    target: Position
    reason: str = ""
    road_source: Optional[RoadSource] = None

    @property
    def accepted(self) -> bool:
        return self.status.accepted

    def __bool__(self) -> bool:
        return self.accepted


class MovementPolicy(ABC):
    """Move rules for one actor class."""

    actor_class: ActorClass

    @abstractmethod
    def check(self, grid: Grid, mover: Mover, target: Position) -> MoveResult:
        """Evaluate the move without touching any state."""

    @abstractmethod
    def commit(self, grid: Grid, mover: Mover, target: Position) -> None:
        """Apply an already accepted move."""

    def claims_occupancy(self) -> bool:
        return False


class PedestrianPolicy(MovementPolicy):
    """Rescuers on foot: any in-bounds tile is reachable."""

    actor_class = ActorClass.PEDESTRIAN

    def check(self, grid: Grid, mover: Mover, target: Position) -> MoveResult:
        source = mover.position
        if not grid.is_valid(target.x, target.y):
            return MoveResult(MoveStatus.REJECTED_BOUNDS, source, target, "target outside grid")
        if target == source:
            return MoveResult(MoveStatus.NO_OP, source, target)
        return MoveResult(MoveStatus.ACCEPTED, source, target)

    def commit(self, grid: Grid, mover: Mover, target: Position) -> None:
        mover.facing = Direction.between(mover.position, target) or mover.facing
        mover.position = target


@dataclass
class VehiclePolicy(MovementPolicy):
    """Road-bound vehicles.

    ``profile`` is the vehicle walkability profile, consulted last.
    ``roads`` resolves road classification (explicit classifier, then the named
    road layer, then cell type). With ``road_only`` off the road chain is
    skipped and the cell's intrinsic walkability decides instead; the
    occupancy and hospital bans apply either way. With ``require_adjacent`` a
    target more than one tile away is rejected before any terrain check.
    """

    profile: Optional[WalkabilityProfile] = None
    roads: RoadClassifier = field(default_factory=RoadClassifier)
    require_adjacent: bool = False
    road_only: bool = True

    actor_class = ActorClass.VEHICLE

    def check(self, grid: Grid, mover: Mover, target: Position) -> MoveResult:
        source = mover.position
        x, y = target.x, target.y
        if not grid.is_valid(x, y):
            return MoveResult(MoveStatus.REJECTED_BOUNDS, source, target, "target outside grid")
        if target == source:
            return MoveResult(MoveStatus.NO_OP, source, target)
        if self.require_adjacent and not source.is_adjacent(target):
            return MoveResult(
                MoveStatus.REJECTED_NOT_ADJACENT,
                source,
                target,
                f"target is {source.distance_to(target)} tiles away",
            )
        cell = grid.get_cell(x, y)
        if cell is None:
            return MoveResult(MoveStatus.REJECTED_IMPASSABLE, source, target, "no cell at target")
        if cell.occupied:
            return MoveResult(MoveStatus.REJECTED_OCCUPIED, source, target, "target occupied")
        if cell.is_hospital:
            return MoveResult(
                MoveStatus.REJECTED_FORBIDDEN_TERRAIN, source, target, "vehicles cannot enter hospital tiles"
            )
        road_source: Optional[RoadSource] = None
        if not self.road_only:
            if not cell.is_walkable:
                return MoveResult(
                    MoveStatus.REJECTED_IMPASSABLE, source, target, f"{cell.type.value} is not walkable"
                )
        else:
            is_road, road_source = self.roads.classify(grid, x, y)
            if not is_road:
                return MoveResult(
                    MoveStatus.REJECTED_IMPASSABLE,
                    source,
                    target,
                    f"not a road ({road_source.value})",
                    road_source,
                )
        if self.profile is not None and not self.profile.is_walkable(x, y):
            return MoveResult(
                MoveStatus.REJECTED_IMPASSABLE, source, target, "blocked by vehicle profile", road_source
            )
        return MoveResult(MoveStatus.ACCEPTED, source, target, road_source=road_source)

    def commit(self, grid: Grid, mover: Mover, target: Position) -> None:
        source = mover.position
        if mover.holds_tile:
            grid.set_occupied(source.x, source.y, False)
        mover.facing = Direction.between(source, target) or mover.facing
        mover.position = target
        mover.holds_tile = grid.set_occupied(target.x, target.y, True)

    def claims_occupancy(self) -> bool:
        return True


class MoveValidator:
    """Transactional single-step moves for one movement policy on one grid."""

    def __init__(self, grid: Grid, policy: MovementPolicy, *, debug: Optional[bool] = None):
        self.grid = grid
        self.policy = policy
        self.debug = Config.DEBUG_MOVES if debug is None else debug

    @property
    def actor_class(self) -> ActorClass:
        return self.policy.actor_class

    def validate(self, mover: Mover, target: Position) -> MoveResult:
        """Dry run: report what ``try_move`` would decide, without mutating anything."""

        return self.policy.check(self.grid, mover, target)

    def try_move(self, mover: Mover, target: Position) -> MoveResult:
        """Check and, if accepted, commit a move of ``mover`` onto ``target``."""

        with self.grid.mutation_lock:
            result = self.policy.check(self.grid, mover, target)
            if result.status is MoveStatus.ACCEPTED:
                self.policy.commit(self.grid, mover, target)
        if self.debug:
            self._trace(mover, result)
        return result

    def try_move_delta(self, mover: Mover, dx: int, dy: int) -> MoveResult:
        return self.try_move(mover, mover.position.translated(dx, dy))

    def try_step(self, mover: Mover, direction: Direction) -> MoveResult:
        return self.try_move(mover, mover.position.step(direction))

    def place(self, mover: Mover) -> bool:
        """Claim the mover's current tile for policies that track occupancy.

        Returns False when the tile is invalid, unpopulated or already occupied.
        Pedestrians claim nothing and always succeed on a valid tile.
        """

        pos = mover.position
        with self.grid.mutation_lock:
            if not self.grid.is_valid(pos.x, pos.y):
                return False
            if not self.policy.claims_occupancy():
                return True
            cell = self.grid.get_cell(pos.x, pos.y)
            if cell is None or cell.occupied:
                return False
            mover.holds_tile = self.grid.set_occupied(pos.x, pos.y, True)
            return mover.holds_tile

    def release(self, mover: Mover) -> None:
        """Free the mover's tile (vehicle leaving the map, victim delivered, ...)."""

        if self.policy.claims_occupancy() and mover.holds_tile:
            with self.grid.mutation_lock:
                self.grid.set_occupied(mover.position.x, mover.position.y, False)
                mover.holds_tile = False

    def _trace(self, mover: Mover, result: MoveResult) -> None:
        label = f"[Move] {mover.mover_id} ({self.actor_class.value}) {result.source} -> {result.target}"
        if result.accepted:
            log_success(f"{label}: {result.status.value}")
        else:
            log_error(f"{label}: {result.status.value} ({result.reason})")


class PathFollower:
    """Consume a path through a MoveValidator, one step per ``advance()``.

    The path is a snapshot. Each step is validated again when it is taken; on
    the first rejection the follower stops, keeps ``last_result`` and leaves
    ``remaining`` untouched so the caller can plan a new route.
    """

    def __init__(self, validator: MoveValidator, mover: Mover, path: Sequence[Position]):
        self.validator = validator
        self.mover = mover
        steps = list(path)
        # A path starts on the mover's own tile; drop it.
        if steps and steps[0] == mover.position:
            steps = steps[1:]
        self._steps: List[Position] = steps
        self._index = 0
        self.last_result: Optional[MoveResult] = None
        self.blocked = False

    @property
    def remaining(self) -> List[Position]:
        return self._steps[self._index:]

    @property
    def finished(self) -> bool:
        return self._index >= len(self._steps)

    def advance(self) -> Optional[MoveResult]:
        """Take the next step. Returns None when the path is already consumed."""

        if self.finished:
            return None
        target = self._steps[self._index]
        result = self.validator.try_move(self.mover, target)
        self.last_result = result
        if result.accepted:
            self._index += 1
            self.blocked = False
        else:
            self.blocked = True
            if self.validator.debug:
                log_error(
                    f"[PathFollower] {self.mover.mover_id} stopped at {self.mover.position}: "
                    f"{result.status.value}, re-plan needed"
                )
        return result

    def run(self, max_steps: Optional[int] = None) -> List[MoveResult]:
        """Advance until the path ends, a step is rejected or ``max_steps`` is reached."""

        results: List[MoveResult] = []
        while not self.finished and (max_steps is None or len(results) < max_steps):
            result = self.advance()
            if result is None:
                break
            results.append(result)
            if not result.accepted:
                break
        return results
