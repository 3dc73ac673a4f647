"""Session-level orchestration around the rules engine."""

from .controller import GameController, MoveRejected

__all__ = [
    "GameController",
    "MoveRejected",
]
