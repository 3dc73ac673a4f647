"""
CPU players for the four difficulty tiers.

Every tier except random scores each legal move by simulating the full turn
on a copy of the board and adding weighted heuristics. The move is then
drawn uniformly from all moves scoring within the tier's tie window of the
best, using the player's own random.Random so games can be replayed.
"""

import logging
import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Type

from ..config import Difficulty
from ..core.game_state import GameState, opponent
from ..core.rules import SowingResult, legal_moves, simulate_full_turn
from . import heuristics as h

logger = logging.getLogger(__name__)


class CpuPlayer(ABC):
    """Abstract interface for a CPU move picker."""

    difficulty: Difficulty
    tie_window: float = 0.0

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize CPU player.

        Args:
            rng: Random source for tie-breaks (a fresh unseeded one by default)
        """
        self.rng = rng if rng is not None else random.Random()

    @abstractmethod
    def score_outcome(self, state: GameState, pit: int, sim: SowingResult) -> float:
        """
        Score a simulated turn for the player to move.

        Args:
            state: Position before the move
            pit: Pit the move starts from
            sim: Result of simulating that move

        Returns:
            Heuristic score (higher is better)
        """
        pass

    def evaluate_move(self, state: GameState, pit: int) -> float:
        sim = simulate_full_turn(state.board, state.disabled_pits, pit, state.current_player)
        return self.score_outcome(state, pit, sim)

    def rank_moves(self, state: GameState) -> List[Tuple[int, float]]:
        """Score every legal move, in pit order."""
        return [(pit, self.evaluate_move(state, pit)) for pit in legal_moves(state)]

    def choose_move(self, state: GameState) -> int:
        """
        Pick a move for the player to move.

        Raises:
            ValueError: if that player has no legal move
        """
        ranked = self.rank_moves(state)
        if not ranked:
            raise ValueError(f"No legal moves for player {state.current_player}")

        best_score = max(score for _, score in ranked)
        candidates = [pit for pit, score in ranked if best_score - score < self.tie_window]
        choice = self.rng.choice(candidates)

        for pit, score in ranked:
            logger.debug(f"{self.difficulty.value}: move {pit} scores {score:.1f}")
        logger.debug(
            f"{self.difficulty.value}: best {best_score:.1f}, candidates {candidates}, chose {choice}"
        )
        return choice


class RandomPlayer(CpuPlayer):
    """Uniform choice over legal moves."""

    difficulty = Difficulty.RANDOM

    def score_outcome(self, state: GameState, pit: int, sim: SowingResult) -> float:
        return 0.0

    def rank_moves(self, state: GameState) -> List[Tuple[int, float]]:
        return [(pit, 0.0) for pit in legal_moves(state)]

    def choose_move(self, state: GameState) -> int:
        moves = legal_moves(state)
        if not moves:
            raise ValueError(f"No legal moves for player {state.current_player}")
        return self.rng.choice(moves)


class MediumPlayer(CpuPlayer):
    """Captures and continuations first, with a simple defensive check."""

    difficulty = Difficulty.MEDIUM
    tie_window = 1.0

    def score_outcome(self, state: GameState, pit: int, sim: SowingResult) -> float:
        player = state.current_player
        score = sim.captured * 20.0

        if sim.continues_turn:
            score += 15

        # Prefer moderate-sized pits
        if 3 <= state.board[pit] <= 7:
            score += 5

        threat = h.best_opponent_response(sim.final_board, state.disabled_pits, opponent(player))
        if threat > 4:
            score -= threat * 6

        # A lone counter at the landing pit is usually a gift
        if sim.final_board[sim.final_pit] == 1:
            score -= 3

        if sum(sim.final_board) <= 15:
            score += sim.captured * 10
        return score


class HardPlayer(CpuPlayer):
    """Medium's ideas plus positional, control and mobility terms."""

    difficulty = Difficulty.HARD
    tie_window = 0.5

    def score_outcome(self, state: GameState, pit: int, sim: SowingResult) -> float:
        player = state.current_player
        opp = opponent(player)
        board, disabled = sim.final_board, state.disabled_pits
        score = sim.captured * 35.0

        if sim.continues_turn:
            score += 25
            score += sim.turn_length * 5

        score += h.strategic_position(board, disabled, player) * 12
        score -= h.opponent_threats(board, disabled, opp) * 10
        score += h.board_control(board, disabled, player) * 8

        remaining = sum(board)
        if remaining <= 20:
            score += h.endgame_hard(board, disabled, player) * 15
        if remaining > 45:
            score += h.opening_hard(state.board, pit, player) * 6

        threat = h.best_opponent_response(board, disabled, opp)
        if threat > 3:
            score -= threat * 12

        score += h.mobility(board, disabled, player) * 4
        return score


class ExpertPlayer(CpuPlayer):
    """Heaviest weights on captures and on denying the opponent's reply."""

    difficulty = Difficulty.EXPERT
    tie_window = 0.1

    def score_outcome(self, state: GameState, pit: int, sim: SowingResult) -> float:
        player = state.current_player
        opp = opponent(player)
        board, disabled = sim.final_board, state.disabled_pits
        score = sim.captured * 50.0

        if sim.continues_turn:
            score += 30
            score += sim.turn_length * 10

        score += h.strategic_position(board, disabled, player) * 20
        score -= h.opponent_threats(board, disabled, opp) * 15

        remaining = sum(board)
        if remaining <= 15:
            score += h.endgame_expert(board, disabled, player) * 40
        if remaining > 50:
            score += h.opening_expert(pit, player) * 10

        threat = h.best_opponent_response(board, disabled, opp)
        if threat > 5:
            score -= threat * 25
        return score


PLAYERS: Dict[Difficulty, Type[CpuPlayer]] = {
    Difficulty.RANDOM: RandomPlayer,
    Difficulty.MEDIUM: MediumPlayer,
    Difficulty.HARD: HardPlayer,
    Difficulty.EXPERT: ExpertPlayer,
}


def create_player(difficulty, rng: Optional[random.Random] = None) -> CpuPlayer:
    """Build the CPU player for a difficulty (enum member or name)."""
    return PLAYERS[Difficulty.parse(difficulty)](rng=rng)


def choose_cpu_move(state: GameState, difficulty, rng: Optional[random.Random] = None) -> int:
    """
    Pick a move for the player to move at the given difficulty.

    Args:
        state: Current game state
        difficulty: Difficulty or its name ("random", "medium", "hard", "expert")
        rng: Random source for tie-breaks; pass a seeded one for reproducible play

    Returns:
        A pit from legal_moves(state)
    """
    return create_player(difficulty, rng=rng).choose_move(state)
