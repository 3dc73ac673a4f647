"""
Static heuristics used by the CPU players.

All functions are pure: they read a board snapshot and return a number.
"Projected" capture means a single sow from a pit on the snapshot, checked
against the landing -> empty -> occupied pattern without replaying captures
or continuations.
"""

from typing import AbstractSet, Sequence

from ..core.game_state import PITS_PER_SIDE, opponent, side_pits
from ..core.rules import generate_legal_moves, landing_pit, next_pit, simulate_full_turn

# Offsets within a half
MIDDLE_OFFSETS = (2, 3, 4)
EDGE_OFFSETS = (0, PITS_PER_SIDE - 1)


def side_total(board: Sequence[int], player: int) -> int:
    return sum(board[pit] for pit in side_pits(player))


def middle_pits(player: int):
    start = side_pits(player).start
    return [start + offset for offset in MIDDLE_OFFSETS]


def edge_pits(player: int):
    start = side_pits(player).start
    return [start + offset for offset in EDGE_OFFSETS]


def projected_capture(
    board: Sequence[int], disabled_pits: AbstractSet[int], pit: int
) -> int:
    """Counters a single sow from `pit` would capture on this snapshot."""
    landing = landing_pit(board, disabled_pits, pit)
    if landing is None:
        return 0
    nxt = next_pit(landing, disabled_pits)
    if board[nxt] != 0:
        return 0
    return board[next_pit(nxt, disabled_pits)]


def strategic_position(
    board: Sequence[int], disabled_pits: AbstractSet[int], player: int
) -> float:
    """Capture set-ups (x2) and continuing sows (+3) available to `player`."""
    score = 0
    for pit in side_pits(player):
        if board[pit] == 0 or pit in disabled_pits:
            continue
        score += projected_capture(board, disabled_pits, pit) * 2
        landing = landing_pit(board, disabled_pits, pit)
        if board[next_pit(landing, disabled_pits)] > 0:
            score += 3
    return score


def opponent_threats(
    board: Sequence[int], disabled_pits: AbstractSet[int], opponent_player: int
) -> float:
    """Total counters the opponent could capture with one sow from each pit."""
    return sum(
        projected_capture(board, disabled_pits, pit)
        for pit in side_pits(opponent_player)
        if board[pit] > 0 and pit not in disabled_pits
    )


def board_control(
    board: Sequence[int], disabled_pits: AbstractSet[int], player: int
) -> float:
    """More counters than the opponent, spread evenly across own pits."""
    own = side_total(board, player)
    opp = side_total(board, opponent(player))
    score = (own - opp) * 2.0

    occupied = [board[pit] for pit in side_pits(player) if board[pit] > 0]
    if occupied:
        mean = sum(occupied) / len(occupied)
        variance = sum((count - mean) ** 2 for count in occupied) / len(occupied)
        score -= variance * 0.5
    return score


def mobility(
    board: Sequence[int], disabled_pits: AbstractSet[int], player: int
) -> float:
    own = generate_legal_moves(board, disabled_pits, player)
    opp = generate_legal_moves(board, disabled_pits, opponent(player))
    return (len(own) - len(opp)) * 2.0


def opening_hard(board: Sequence[int], pit: int, player: int) -> float:
    """Prefer middle pits with a moderate pile, avoid edge pits."""
    score = 0.0
    if pit in middle_pits(player):
        score += 4
    if pit in edge_pits(player):
        score -= 2
    if 3 <= board[pit] <= 6:
        score += 2
    return score


def opening_expert(pit: int, player: int) -> float:
    return 5.0 if pit in middle_pits(player) else 0.0


def endgame_hard(
    board: Sequence[int], disabled_pits: AbstractSet[int], player: int
) -> float:
    own = side_total(board, player)
    opp = side_total(board, opponent(player))
    score = (own - opp) * 8.0
    if opp == 0:
        score += 50
    for pit in side_pits(player):
        if board[pit] > 0:
            score += projected_capture(board, disabled_pits, pit) * 3
    return score


def endgame_expert(
    board: Sequence[int], disabled_pits: AbstractSet[int], player: int
) -> float:
    """Material lead, a shut-out bonus, and full simulated captures."""
    own = side_total(board, player)
    opp = side_total(board, opponent(player))
    score = (own - opp) * 10.0
    if opp == 0:
        score += 100
    for pit in side_pits(player):
        if board[pit] > 0 and pit not in disabled_pits:
            score += simulate_full_turn(board, disabled_pits, pit, player).captured * 5
    return score


def best_opponent_response(
    board: Sequence[int], disabled_pits: AbstractSet[int], opponent_player: int
) -> int:
    """Largest capture the opponent can make with one full turn on `board`."""
    best = 0
    for move in generate_legal_moves(board, disabled_pits, opponent_player):
        captured = simulate_full_turn(board, disabled_pits, move, opponent_player).captured
        if captured > best:
            best = captured
    return best
