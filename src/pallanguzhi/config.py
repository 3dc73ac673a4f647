"""Game configuration: mode, CPU difficulty and random seed."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class GameMode(str, Enum):
    PVP = "pvp"
    CPU = "cpu"


class Difficulty(str, Enum):
    RANDOM = "random"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @classmethod
    def parse(cls, value) -> "Difficulty":
        """Accept enum members, names or values; "easy" means random."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key == "easy":
            return cls.RANDOM
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty {value!r} (choose from {choices})") from None


@dataclass(frozen=True)
class GameConfig:
    """
    Settings for one session.

    In CPU mode player 2 is the computer and `difficulty` is required.
    """

    mode: GameMode = GameMode.PVP
    difficulty: Optional[Difficulty] = None
    seed: Optional[int] = None  # Seeds the CPU's tie-break RNG

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", GameMode(self.mode))
        if self.difficulty is not None:
            object.__setattr__(self, "difficulty", Difficulty.parse(self.difficulty))
        if self.mode is GameMode.CPU and self.difficulty is None:
            raise ValueError("CPU mode needs a difficulty")

    @property
    def cpu_player(self) -> Optional[int]:
        return 2 if self.mode is GameMode.CPU else None
