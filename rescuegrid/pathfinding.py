"""
A* path search over the rescue grid.

The engine computes a 4-connected, uniform-cost route between two tiles using
the grid's walkability for a given profile. Output is fully deterministic:
open-set entries are ordered by ``f`` then ``g`` then ``h`` then ``(y, x)``,
so equal-score candidates never depend on insertion order or hashing.

Failure handling:
- An optional node budget caps the number of expansions.
- When the budget runs out, or the open set empties, the search either
  reports NOT_FOUND with an empty path or, with ``return_closest_on_fail``,
  returns a PARTIAL path to the closed node nearest the goal.
- Callers read ``PathResult.status`` to tell an exact route from an approach
  path; they never need to compare the last element to the goal.

Searches only read grid state. All bookkeeping lives in locals, so independent
searches over a read-only grid can run side by side.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .config import Config
from .environment.grid import DEFAULT_PROFILE, Grid, ProfileArg
from .environment.position import Position
from .logging_utils import log_deterministic, log_error, log_partial, log_success


class PathStatus(str, Enum):
    """Outcome tag for a path search."""

    EXACT = "exact"          # path ends at the requested goal
    PARTIAL = "partial"      # closest-on-fail approach path
    NOT_FOUND = "not_found"  # nothing usable, path is empty


@dataclass
class PathOptions:
    """Search tuning.

    ``max_expanded_nodes``: expansion budget; ``None`` or ``<= 0`` means unlimited.
    ``return_closest_on_fail``: on budget exhaustion or an unreachable goal,
    return the path to the closest expanded node instead of an empty path.
    """

    max_expanded_nodes: Optional[int] = None
    return_closest_on_fail: bool = False

    @classmethod
    def from_config(cls) -> "PathOptions":
        budget = Config.max_expanded_nodes()
        return cls(
            max_expanded_nodes=budget or None,
            return_closest_on_fail=Config.CLOSEST_ON_FAIL,
        )

    @property
    def budget(self) -> Optional[int]:
        if self.max_expanded_nodes is None or self.max_expanded_nodes <= 0:
            return None
        return self.max_expanded_nodes


@dataclass
class PathResult:
    """Tagged search result.

    An empty ``path`` always pairs with NOT_FOUND. A single-element path is a
    valid EXACT result (start == goal).
    """

    status: PathStatus
    path: List[Position] = field(default_factory=list)
    goal: Optional[Position] = None
    expanded_nodes: int = 0
    budget_exhausted: bool = False

    @property
    def reached_goal(self) -> bool:
        return self.status is PathStatus.EXACT

    @property
    def success(self) -> bool:
        return bool(self.path)

    @property
    def total_cost(self) -> Optional[int]:
        """Number of steps (edges) in the path, or None when nothing was found."""

        if not self.path:
            return None
        return len(self.path) - 1

    @property
    def end(self) -> Optional[Position]:
        return self.path[-1] if self.path else None

    def __len__(self) -> int:
        return len(self.path)

    def __str__(self) -> str:
        return (
            f"PathResult(status={self.status.value}, steps={self.total_cost}, "
            f"expanded={self.expanded_nodes}, budget_exhausted={self.budget_exhausted})"
        )


# Heap entries: (f, g, h, y, x). Coordinates close the ordering, so two
# entries never compare equal unless they describe the same node and score.
_HeapEntry = Tuple[int, int, int, int, int]


class AStarPathFinder:
    """A* search bound to a grid and a walkability profile.

    The profile argument follows ``Grid.is_walkable``: omit it to use the
    grid's default profile, pass ``None`` for intrinsic cell-type rules, or
    pass a specific ``WalkabilityProfile``.
    """

    def __init__(
        self,
        grid: Grid,
        profile: ProfileArg = DEFAULT_PROFILE,
        options: Optional[PathOptions] = None,
        *,
        debug: Optional[bool] = None,
    ):
        self.grid = grid
        self.profile = profile
        self.options = options or PathOptions()
        self.debug = Config.DEBUG_PATHFINDING if debug is None else debug

    @staticmethod
    def heuristic(a: Position, b: Position) -> int:
        return a.distance_to(b)

    def find_path(
        self,
        start: Position,
        goal: Position,
        options: Optional[PathOptions] = None,
    ) -> PathResult:
        """Search from ``start`` to ``goal``.

        The start tile is never tested for walkability (the searching actor
        usually occupies it). The goal must be walkable like any other tile.
        """

        opts = options or self.options
        result = self._search(start, goal, opts)
        if self.debug:
            self._trace(start, goal, result)
        return result

    def find_path_to_any(
        self,
        start: Position,
        goals: Iterable[Position],
        options: Optional[PathOptions] = None,
    ) -> PathResult:
        """Route to the nearest reachable goal among several candidates.

        Candidates are tried by Manhattan distance from ``start`` (then row-major).
        The first EXACT result wins. Otherwise the PARTIAL result whose end lies
        closest to its own goal is returned, or NOT_FOUND when there is none.
        ``expanded_nodes`` accumulates across the individual searches.
        """

        opts = options or self.options
        candidates = sorted(set(goals), key=lambda g: (start.distance_to(g), g.y, g.x))
        expanded = 0
        exhausted = False
        best_partial: Optional[PathResult] = None
        for goal in candidates:
            result = self._search(start, goal, opts)
            expanded += result.expanded_nodes
            exhausted = exhausted or result.budget_exhausted
            if result.status is PathStatus.EXACT:
                result.expanded_nodes = expanded
                if self.debug:
                    self._trace(start, goal, result)
                return result
            if result.status is PathStatus.PARTIAL:
                remaining = result.path[-1].distance_to(goal)
                if best_partial is None or remaining < best_partial.path[-1].distance_to(best_partial.goal):
                    best_partial = result
        if best_partial is not None:
            best_partial.expanded_nodes = expanded
            return best_partial
        return PathResult(PathStatus.NOT_FOUND, expanded_nodes=expanded, budget_exhausted=exhausted)

    # ------------------------------------------------------------------
    # Core search
    # ------------------------------------------------------------------

    def _search(self, start: Position, goal: Position, opts: PathOptions) -> PathResult:
        if start == goal:
            return PathResult(PathStatus.EXACT, [start], goal=goal)

        budget = opts.budget
        h_start = self.heuristic(start, goal)
        open_heap: List[_HeapEntry] = [(h_start, 0, h_start, start.y, start.x)]
        g_score: Dict[Position, int] = {start: 0}
        came_from: Dict[Position, Position] = {}
        closed: Set[Position] = set()

        closest: Optional[Position] = None
        closest_h = 0
        expanded = 0
        exhausted = False

        while open_heap:
            _, g, h, y, x = heapq.heappop(open_heap)
            current = Position(x, y)
            if current in closed:
                # Stale duplicate left behind by re-insertion on improvement.
                continue
            if current == goal:
                return PathResult(
                    PathStatus.EXACT,
                    _reconstruct(came_from, current),
                    goal=goal,
                    expanded_nodes=expanded,
                )
            if budget is not None and expanded >= budget:
                exhausted = True
                break

            closed.add(current)
            expanded += 1
            if closest is None or h < closest_h:
                closest, closest_h = current, h

            tentative_g = g + 1
            for neighbor in self.grid.get_walkable_neighbors(current, self.profile):
                if neighbor in closed:
                    continue
                known = g_score.get(neighbor)
                if known is not None and tentative_g >= known:
                    continue
                g_score[neighbor] = tentative_g
                came_from[neighbor] = current
                nh = self.heuristic(neighbor, goal)
                heapq.heappush(open_heap, (tentative_g + nh, tentative_g, nh, neighbor.y, neighbor.x))

        if opts.return_closest_on_fail and closest is not None and closest != start:
            return PathResult(
                PathStatus.PARTIAL,
                _reconstruct(came_from, closest),
                goal=goal,
                expanded_nodes=expanded,
                budget_exhausted=exhausted,
            )
        return PathResult(
            PathStatus.NOT_FOUND,
            goal=goal,
            expanded_nodes=expanded,
            budget_exhausted=exhausted,
        )

    def _trace(self, start: Position, goal: Position, result: PathResult) -> None:
        summary = f"[Pathfinding] {start} -> {goal}: {result}"
        if result.status is PathStatus.EXACT:
            log_success(summary)
        elif result.status is PathStatus.PARTIAL:
            log_partial(summary)
        else:
            log_error(summary)
        if result.path:
            log_deterministic("  " + " ".join(str(p) for p in result.path))


def _reconstruct(came_from: Dict[Position, Position], current: Position) -> List[Position]:
    """Walk back-pointers from ``current`` to the start and reverse."""

    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def find_path(
    grid: Grid,
    start: Position,
    goal: Position,
    *,
    profile: ProfileArg = DEFAULT_PROFILE,
    max_expanded_nodes: Optional[int] = None,
    return_closest_on_fail: bool = False,
) -> List[Position]:
    """Convenience wrapper returning only the path (empty when nothing usable was found)."""

    finder = AStarPathFinder(
        grid,
        profile,
        PathOptions(
            max_expanded_nodes=max_expanded_nodes,
            return_closest_on_fail=return_closest_on_fail,
        ),
    )
    return finder.find_path(start, goal).path
