"""
Pydantic schemas for search and movement records.

Runtime results (``PathResult``, ``MoveResult``) are plain dataclasses built
for speed inside the engine. The models here are their serializable
counterparts, used when a caller wants to log, persist or ship a result.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from rescuegrid.environment import (
    CellState,
    GridState,
    Position,
    ProfileState,
    RoadSource,
)
from rescuegrid.movement import MoveResult, MoveStatus
from rescuegrid.pathfinding import PathResult, PathStatus


class PathRecord(BaseModel):
    """Serializable view of a PathResult."""

    status: PathStatus
    path: List[Tuple[int, int]] = Field(default_factory=list, description="(x, y) steps, start first")
    goal: Optional[Tuple[int, int]] = None
    expanded_nodes: int = Field(0, ge=0)
    budget_exhausted: bool = False

    @classmethod
    def from_result(cls, result: PathResult) -> "PathRecord":
        return cls(
            status=result.status,
            path=[p.as_tuple() for p in result.path],
            goal=result.goal.as_tuple() if result.goal is not None else None,
            expanded_nodes=result.expanded_nodes,
            budget_exhausted=result.budget_exhausted,
        )

    def to_result(self) -> PathResult:
        return PathResult(
            status=self.status,
            path=[Position.of(p) for p in self.path],
            goal=Position.of(self.goal) if self.goal is not None else None,
            expanded_nodes=self.expanded_nodes,
            budget_exhausted=self.budget_exhausted,
        )


class MoveRecord(BaseModel):
    """Serializable view of a MoveResult, tagged with the mover."""

    mover_id: str
    status: MoveStatus
    source: Tuple[int, int]
    target: Tuple[int, int]
    reason: str = ""
    road_source: Optional[RoadSource] = None

    @classmethod
    def from_result(cls, mover_id: str, result: MoveResult) -> "MoveRecord":
        return cls(
            mover_id=mover_id,
            status=result.status,
            source=result.source.as_tuple(),
            target=result.target.as_tuple(),
            reason=result.reason,
            road_source=result.road_source,
        )


__all__ = [
    "CellState",
    "GridState",
    "ProfileState",
    "PathRecord",
    "MoveRecord",
]
