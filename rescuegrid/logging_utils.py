"""Logging utilities for rescuegrid.

Provides color-coded console output so search traces, accepted moves and
rejections are easy to tell apart.
"""

from enum import Enum

from .config import env_flag


class Color(Enum):
    """ANSI color codes for terminal output."""

    BLUE = "\033[94m"      # Deterministic operations (search, validation)
    RED = "\033[91m"       # Rejections and failures
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata
    YELLOW = "\033[93m"    # Partial results

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Plain text when RESCUEGRID_NO_COLOR is true (1, true, yes, on), otherwise colorized text
    """
    if env_flag("RESCUEGRID_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


# Markers for operation types (color-blind accessible)
LOG_TAG_DETERMINISTIC = "[•]"
LOG_TAG_ERROR = "[!]"
LOG_TAG_SUCCESS = "[✓]"
LOG_TAG_INFO = "[i]"
LOG_TAG_PARTIAL = "[~]"


def log_deterministic(message: str) -> None:
    """Log a deterministic operation (blue)."""
    print(colored(f"{LOG_TAG_DETERMINISTIC} {message}", Color.BLUE))


def log_error(message: str) -> None:
    """Log a rejection or failure (red)."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log a success (green)."""
    print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_partial(message: str) -> None:
    """Log a partial result (yellow)."""
    print(colored(f"{LOG_TAG_PARTIAL} {message}", Color.YELLOW))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))
