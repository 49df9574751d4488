"""Pydantic schemas for grid snapshots.

These models mirror the runtime classes in ``grid.py``, ``cells.py`` and
``profiles.py`` but stay JSON-serializable, so a loader or renderer can hand
grid state across process boundaries without touching the core objects.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from .cells import CellType


class CellState(BaseModel):
    """One populated tile."""

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    type: CellType = CellType.EMPTY
    occupied: bool = False
    metadata: Dict[str, str] = Field(default_factory=dict)


class ProfileState(BaseModel):
    """A walkability profile as nested rows (True = passable)."""

    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    rows: List[List[bool]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_shape(self) -> "ProfileState":
        if len(self.rows) != self.height or any(len(row) != self.width for row in self.rows):
            raise ValueError(f"rows do not match {self.width}x{self.height}")
        return self


class GridState(BaseModel):
    """Sparse grid snapshot: only populated cells are listed."""

    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    cells: List[CellState] = Field(default_factory=list)
    default_profile: Optional[ProfileState] = None
    profiles: Dict[str, ProfileState] = Field(
        default_factory=dict,
        description="Named walkability profiles (pedestrian, vehicle, road layer ...)",
    )

    @model_validator(mode="after")
    def _cells_in_bounds(self) -> "GridState":
        for cell in self.cells:
            if cell.x >= self.width or cell.y >= self.height:
                raise ValueError(f"cell ({cell.x}, {cell.y}) outside {self.width}x{self.height} grid")
        return self
