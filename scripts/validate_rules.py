#!/usr/bin/env python3
"""
Validate the rules engine with CPU-vs-CPU matches.

Plays a batch of matches for every pairing of difficulty tiers and checks:
1. Counters are conserved after every turn and stage transition
2. The cumulative ledger never goes down
3. Every CPU move is legal
"""

import random
import sys
import time
import logging
from itertools import product
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pallanguzhi.ai import create_player
from pallanguzhi.config import Difficulty
from pallanguzhi.core import (
    InvariantViolation,
    legal_moves,
    new_game,
    play_turn,
    setup_next_stage,
    verify_conservation,
)
from pallanguzhi.game.simulation import MAX_TURNS_PER_STAGE

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,
)

logger = logging.getLogger(__name__)


def check_match(p1: Difficulty, p2: Difficulty, rng: random.Random, max_stages: int) -> int:
    """Play one match, raising on any broken rule. Returns turns played."""
    players = {1: create_player(p1, rng=rng), 2: create_player(p2, rng=rng)}
    state = new_game()
    turns = 0

    while True:
        stage_turns = 0
        while not state.stage_over and stage_turns < MAX_TURNS_PER_STAGE:
            pit = players[state.current_player].choose_move(state)
            if pit not in legal_moves(state):
                raise InvariantViolation(f"{p1.value}/{p2.value} chose illegal pit {pit}")
            state = play_turn(state, pit).state
            verify_conservation(state)
            turns += 1
            stage_turns += 1

        if not state.stage_over or state.match_over or state.stage >= max_stages:
            return turns

        ledger = state.stage_scores
        state = setup_next_stage(state)
        verify_conservation(state)
        if state.stage_scores.player1 < ledger.player1 or state.stage_scores.player2 < ledger.player2:
            raise InvariantViolation(f"Ledger went down: {ledger} -> {state.stage_scores}")


def main():
    # Configuration
    GAMES_PER_PAIRING = 5
    MAX_STAGES = 10
    SEED = 2024

    logger.info("=" * 70)
    logger.info("RULES VALIDATION - CPU vs CPU")
    logger.info("=" * 70)
    logger.info(f"Matches per pairing: {GAMES_PER_PAIRING}")
    logger.info(f"Seed: {SEED}")
    logger.info("")

    rng = random.Random(SEED)
    start_time = time.time()
    failures = 0
    total_turns = 0

    for p1, p2 in product(Difficulty, repeat=2):
        for game in range(GAMES_PER_PAIRING):
            try:
                total_turns += check_match(p1, p2, rng, MAX_STAGES)
            except InvariantViolation as exc:
                failures += 1
                logger.error(f"{p1.value} vs {p2.value}, match {game}: {exc}")
        logger.info(f"{p1.value} vs {p2.value}: done")

    logger.info("")
    logger.info(f"Turns played: {total_turns:,}")
    logger.info(f"Total time:   {time.time() - start_time:.1f}s")
    logger.info("")

    if failures:
        logger.error(f"VALIDATION FAILED - {failures} match(es) broke a rule")
        return 1
    logger.info("VALIDATION PASSED - rules engine consistent")
    return 0


if __name__ == "__main__":
    sys.exit(main())
