"""CPU opponents: heuristic move selection at four difficulty tiers."""

from .players import (
    CpuPlayer,
    RandomPlayer,
    MediumPlayer,
    HardPlayer,
    ExpertPlayer,
    create_player,
    choose_cpu_move,
)

__all__ = [
    "CpuPlayer",
    "RandomPlayer",
    "MediumPlayer",
    "HardPlayer",
    "ExpertPlayer",
    "create_player",
    "choose_cpu_move",
]
