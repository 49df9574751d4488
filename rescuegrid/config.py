"""
Rescuegrid Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


_TRUE_VALUES = {"1", "true", "yes", "on"}


def env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


class Config:
    """Library configuration loaded from environment variables."""

    # Path search defaults (0 = unlimited expansion budget)
    MAX_EXPANDED_NODES_RAW: str = os.getenv("RESCUEGRID_MAX_EXPANDED_NODES", "0")
    CLOSEST_ON_FAIL: bool = env_flag("RESCUEGRID_CLOSEST_ON_FAIL")

    # Named profile consulted as the binary road layer by vehicles
    ROAD_LAYER: str = os.getenv("RESCUEGRID_ROAD_LAYER", "road")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    DEBUG_PATHFINDING: bool = env_flag("DEBUG_PATHFINDING")
    DEBUG_MOVES: bool = env_flag("DEBUG_MOVES")

    @classmethod
    def max_expanded_nodes(cls) -> int:
        """Parsed expansion budget; raises ValueError for a malformed value."""
        try:
            value = int(cls.MAX_EXPANDED_NODES_RAW)
        except ValueError:
            raise ValueError(
                "RESCUEGRID_MAX_EXPANDED_NODES must be an integer "
                f"(got {cls.MAX_EXPANDED_NODES_RAW!r}). Use 0 for an unlimited search."
            ) from None
        return max(value, 0)

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors for malformed values."""
        cls.max_expanded_nodes()
        if not cls.ROAD_LAYER.strip():
            raise ValueError("RESCUEGRID_ROAD_LAYER must not be blank")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        budget = cls.MAX_EXPANDED_NODES_RAW
        lines = [
            "Rescuegrid Configuration:",
            f"  Max Expanded Nodes: {budget if budget not in ('', '0') else 'unlimited'}",
            f"  Closest On Fail: {cls.CLOSEST_ON_FAIL}",
            f"  Road Layer: {cls.ROAD_LAYER}",
            f"  Log Level: {cls.LOG_LEVEL}",
            f"  Debug Pathfinding: {cls.DEBUG_PATHFINDING}",
            f"  Debug Moves: {cls.DEBUG_MOVES}",
        ]
        return "\n".join(lines)
