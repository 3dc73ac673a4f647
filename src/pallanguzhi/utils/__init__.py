"""Utility modules for the terminal front end."""

from .rich_display import (
    BoardDisplay,
    console,
    setup_rich_logging,
    show_simulation_summary,
)

__all__ = [
    "BoardDisplay",
    "console",
    "setup_rich_logging",
    "show_simulation_summary",
]
