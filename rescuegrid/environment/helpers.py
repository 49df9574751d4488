"""Utilities for building, snapshotting and drawing grids."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .cells import Cell, CellType
from .grid import Grid
from .position import Position
from .profiles import WalkabilityProfile
from .schemas import CellState, GridState, ProfileState


DEFAULT_LEGEND: Dict[str, Optional[CellType]] = {
    ".": CellType.ROAD,
    "#": CellType.OBSTACLE,
    "R": CellType.RUBBLE,
    "H": CellType.HOSPITAL,
    "B": CellType.BUILDING,
    "_": CellType.EMPTY,
    " ": None,
}

_TYPE_SYMBOLS: Dict[CellType, str] = {
    CellType.ROAD: ".",
    CellType.OBSTACLE: "#",
    CellType.RUBBLE: "R",
    CellType.HOSPITAL: "H",
    CellType.BUILDING: "B",
    CellType.EMPTY: "_",
}


def grid_from_ascii(
    rows: Sequence[str],
    legend: Optional[Mapping[str, Optional[CellType]]] = None,
) -> Grid:
    """Build a grid from text rows, one character per tile.

    Symbols follow ``DEFAULT_LEGEND`` unless overridden; ``None`` leaves the
    slot empty. Short rows are padded with empty slots. Unknown symbols raise
    ValueError.
    """

    mapping = {**DEFAULT_LEGEND}
    if legend:
        mapping.update(legend)

    height = len(rows)
    width = max((len(row) for row in rows), default=0)
    grid = Grid(width, height)
    for y, row in enumerate(rows):
        for x, symbol in enumerate(row):
            if symbol not in mapping:
                raise ValueError(f"Unknown grid symbol {symbol!r} at ({x}, {y})")
            cell_type = mapping[symbol]
            if cell_type is not None:
                grid.set_cell(x, y, Cell(type=cell_type))
    return grid


def render_grid_ascii(
    grid: Grid,
    *,
    path: Optional[Iterable[Position]] = None,
    markers: Optional[Mapping[Position, str]] = None,
) -> str:
    """Draw the grid as text for debugging.

    Occupied tiles print ``@``, tiles on ``path`` print ``*``, and ``markers``
    override both for specific positions.
    """

    on_path = set(path or ())
    marks = dict(markers or {})
    lines: List[str] = []
    for y in range(grid.height):
        chars: List[str] = []
        for x in range(grid.width):
            pos = Position(x, y)
            cell = grid.get_cell(x, y)
            if pos in marks:
                chars.append(marks[pos])
            elif cell is None:
                chars.append(" ")
            elif cell.occupied:
                chars.append("@")
            elif pos in on_path:
                chars.append("*")
            else:
                chars.append(_TYPE_SYMBOLS[cell.type])
        lines.append("".join(chars))
    return "\n".join(lines)


def profile_to_state(profile: WalkabilityProfile) -> ProfileState:
    return ProfileState(width=profile.width, height=profile.height, rows=profile.to_rows())


def profile_from_state(state: ProfileState) -> WalkabilityProfile:
    return WalkabilityProfile(state.width, state.height, state.rows)


def grid_to_state(grid: Grid) -> GridState:
    """Snapshot a grid (cells, occupancy and profiles) into a serializable model."""

    cells = [
        CellState(
            x=cell.position.x,
            y=cell.position.y,
            type=cell.type,
            occupied=cell.occupied,
            metadata={str(k): str(v) for k, v in cell.metadata.items()},
        )
        for cell in grid.cells()
        if cell.position is not None
    ]
    default = grid.get_default_profile()
    return GridState(
        width=grid.width,
        height=grid.height,
        cells=cells,
        default_profile=profile_to_state(default) if default is not None else None,
        profiles={name: profile_to_state(grid.get_profile(name)) for name in grid.profile_names()},
    )


def grid_from_state(state: GridState) -> Grid:
    """Rebuild a runtime grid from a snapshot."""

    grid = Grid(state.width, state.height)
    for cell_state in state.cells:
        grid.set_cell(
            cell_state.x,
            cell_state.y,
            Cell(type=cell_state.type, occupied=cell_state.occupied, metadata=dict(cell_state.metadata)),
        )
    if state.default_profile is not None:
        grid.set_default_profile(profile_from_state(state.default_profile))
    for name, profile_state in state.profiles.items():
        grid.set_profile(name, profile_from_state(profile_state))
    return grid
