"""Exceptions raised by the rules engine."""


class IllegalMoveError(ValueError):
    """A move was rejected before touching any state."""

    def __init__(self, pit: int, reason: str):
        self.pit = pit
        self.reason = reason
        super().__init__(f"Illegal move {pit}: {reason}")


class InvariantViolation(RuntimeError):
    """Internal bookkeeping broke (e.g. counters were created or lost)."""
