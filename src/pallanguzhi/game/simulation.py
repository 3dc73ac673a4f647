"""
CPU-vs-CPU match runner.

Plays complete matches (stage after stage until a player is shut out) between
two difficulty tiers. Used by the `simulate` command to compare tiers and by
the validation script to fuzz the rules engine.
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from tqdm import tqdm

from ..ai import create_player
from ..core import GameState, new_game, play_turn, setup_next_stage, verify_conservation

logger = logging.getLogger(__name__)

DEFAULT_MAX_STAGES = 30
# A stage still running after this many turns is abandoned
MAX_TURNS_PER_STAGE = 2000


@dataclass
class MatchRecord:
    """Result of one simulated match."""

    winner: Optional[int]  # None on a draw or an unfinished match
    stages: int
    turns: int
    player1_total: int
    player2_total: int
    finished: bool  # False if max_stages was hit first


def _match_winner(state: GameState) -> Optional[int]:
    p1, p2 = state.total_score_of(1), state.total_score_of(2)
    if p1 > p2:
        return 1
    if p2 > p1:
        return 2
    return None


def run_match(
    player1: str,
    player2: str,
    rng: Optional[random.Random] = None,
    max_stages: int = DEFAULT_MAX_STAGES,
    check_invariants: bool = True,
) -> MatchRecord:
    """
    Play one full match between two CPU tiers.

    Args:
        player1: Difficulty for player 1
        player2: Difficulty for player 2
        rng: Shared random source for both players' tie-breaks
        max_stages: Give up (unfinished) after this many stages
        check_invariants: Verify counter conservation after every turn

    Returns:
        MatchRecord
    """
    rng = rng if rng is not None else random.Random()
    players = {1: create_player(player1, rng=rng), 2: create_player(player2, rng=rng)}
    state = new_game()
    turns = 0

    while True:
        stage_turns = 0
        while not state.stage_over and stage_turns < MAX_TURNS_PER_STAGE:
            pit = players[state.current_player].choose_move(state)
            state = play_turn(state, pit).state
            turns += 1
            stage_turns += 1
            if check_invariants:
                verify_conservation(state)

        if not state.stage_over:
            logger.warning(f"Stage {state.stage} abandoned after {stage_turns} turns")
            break
        if state.match_over or state.stage >= max_stages:
            break
        state = setup_next_stage(state)
        if check_invariants:
            verify_conservation(state)

    return MatchRecord(
        winner=_match_winner(state),
        stages=state.stage,
        turns=turns,
        player1_total=state.total_score_of(1),
        player2_total=state.total_score_of(2),
        finished=state.match_over,
    )


def run_matches(
    player1: str,
    player2: str,
    games: int,
    seed: Optional[int] = None,
    max_stages: int = DEFAULT_MAX_STAGES,
    progress: bool = True,
) -> List[MatchRecord]:
    """Play `games` matches with a single seeded random source."""
    rng = random.Random(seed)
    records = []
    logger.info(f"Simulating {games} matches: {player1} (P1) vs {player2} (P2)")
    for _ in tqdm(range(games), desc=f"{player1} vs {player2}", unit=" match", disable=not progress):
        records.append(run_match(player1, player2, rng=rng, max_stages=max_stages))
    return records


def summarize(records: List[MatchRecord]) -> Dict[str, float]:
    """Average length and score figures over a batch of matches."""
    if not records:
        return {}
    n = len(records)
    return {
        "Avg stages": sum(r.stages for r in records) / n,
        "Avg turns": sum(r.turns for r in records) / n,
        "Avg P1 total": sum(r.player1_total for r in records) / n,
        "Avg P2 total": sum(r.player2_total for r in records) / n,
        "Unfinished": float(sum(1 for r in records if not r.finished)),
    }
