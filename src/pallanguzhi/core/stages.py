"""
Stage lifecycle: end detection, settlement and re-seeding.

A match is a sequence of stages. When a stage ends, the remaining counters
go to one player, the board is cleared and each player's stage score is
banked. The next stage is seeded from those scores: a player who captured
fewer than 35 counters cannot fill their half and plays with some pits
blacked out; anything beyond 35 becomes their opening score.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import AbstractSet, List, Optional, Sequence, Tuple

from .game_state import (
    NUM_PITS,
    PITS_PER_SIDE,
    SEEDS_PER_PIT,
    SIDE_CAPACITY,
    GameState,
    create_starting_state,
    opponent,
    side_pits,
)

logger = logging.getLogger(__name__)

# Early-end rule: at most this many counters left...
EARLY_END_MAX_DOTS = 2
# ...and the sides differ by more than this many empty pits
EARLY_END_EMPTY_PIT_GAP = 3


class StageEndReason(str, Enum):
    FEW_DOTS = "few_dots"  # one counter or fewer left on the board
    EMPTY_SIDE = "empty_side"  # player has no counters on their half
    BLOCKED_SIDE = "blocked_side"  # every pit on the half is empty or disabled
    EARLY_END = "early_end"  # two counters or fewer and lopsided empty pits


@dataclass(frozen=True)
class StageEnd:
    """How a stage finished."""

    reason: StageEndReason
    checked_player: int  # Player whose position triggered the end
    remaining: int  # Counters swept off the board
    awarded_to: int  # Player credited with the sweep
    winner: Optional[int]  # None on a tie
    match_over: bool


def count_empty_pits(board: Sequence[int], player: int) -> int:
    """Empty pits on a player's half (disabled pits are always empty)."""
    return sum(1 for pit in side_pits(player) if board[pit] == 0)


def has_no_dots_on_side(board: Sequence[int], player: int) -> bool:
    return all(board[pit] == 0 for pit in side_pits(player))


def has_all_pits_blocked(
    board: Sequence[int], disabled_pits: AbstractSet[int], player: int
) -> bool:
    return all(
        board[pit] == 0 or pit in disabled_pits for pit in side_pits(player)
    )


def stage_end_reason(
    board: Sequence[int], disabled_pits: AbstractSet[int], player: int
) -> Optional[StageEndReason]:
    """
    Check whether the stage is over with `player` to move.

    Returns:
        The first matching StageEndReason, or None if play continues
    """
    total = sum(board)
    if total <= 1:
        return StageEndReason.FEW_DOTS
    if has_no_dots_on_side(board, player):
        return StageEndReason.EMPTY_SIDE
    if has_all_pits_blocked(board, disabled_pits, player):
        return StageEndReason.BLOCKED_SIDE
    if total <= EARLY_END_MAX_DOTS:
        gap = abs(count_empty_pits(board, 1) - count_empty_pits(board, 2))
        if gap > EARLY_END_EMPTY_PIT_GAP:
            return StageEndReason.EARLY_END
    return None


def is_stage_over(state: GameState) -> bool:
    """True if the stage has been settled or would end with the current player to move."""
    if state.stage_over:
        return True
    return stage_end_reason(state.board, state.disabled_pits, state.current_player) is not None


def is_game_over(state: GameState) -> bool:
    """True once a stage has ended with either player on zero counters."""
    return state.match_over


def settle_stage(state: GameState, reason: StageEndReason) -> Tuple[GameState, StageEnd]:
    """
    Close the current stage.

    The remaining counters go to the opponent if the player to move has none
    on their half, otherwise to the player to move. The board is cleared and
    the stage winner recorded; it opens the next stage.

    Args:
        state: State in which the stage end was detected
        reason: Which condition fired

    Returns:
        (settled_state, StageEnd)
    """
    checked = state.current_player
    remaining = state.total_dots
    awarded_to = opponent(checked) if has_no_dots_on_side(state.board, checked) else checked

    settled = state.with_scores(awarded_to, remaining)
    p1, p2 = settled.player1_score, settled.player2_score
    if p1 > p2:
        winner = 1
    elif p2 > p1:
        winner = 2
    else:
        winner = None
    match_over = p1 == 0 or p2 == 0

    settled = replace(
        settled,
        board=tuple([0] * NUM_PITS),
        stage_over=True,
        match_over=match_over,
        last_stage_winner=winner,
    )

    logger.info(
        f"Stage {state.stage} complete ({reason.value}): player {awarded_to} "
        f"takes {remaining} remaining, score {p1}-{p2}, "
        f"winner {winner if winner else 'none (tie)'}"
    )
    if match_over:
        logger.info(f"Match over after stage {state.stage}: a player has no counters left")

    return settled, StageEnd(
        reason=reason,
        checked_player=checked,
        remaining=remaining,
        awarded_to=awarded_to,
        winner=winner,
        match_over=match_over,
    )


def pack_side(dots: int) -> Tuple[List[int], int, int]:
    """
    Lay out a player's counters on their seven pits.

    Pits are filled in order with five counters while at least five remain;
    a smaller remainder goes in the next pit. At most 35 counters fit.

    Args:
        dots: Counters the player brings into the stage

    Returns:
        (pit_counts, filled_pits, carry) where pit_counts has 7 entries,
        pits from offset `filled_pits` on are to be disabled, and `carry`
        is the overflow credited as the opening score
    """
    to_place = min(dots, SIDE_CAPACITY)
    counts: List[int] = []
    while to_place >= SEEDS_PER_PIT and len(counts) < PITS_PER_SIDE:
        counts.append(SEEDS_PER_PIT)
        to_place -= SEEDS_PER_PIT
    if to_place > 0 and len(counts) < PITS_PER_SIDE:
        counts.append(to_place)
    filled = len(counts)
    counts.extend([0] * (PITS_PER_SIDE - filled))
    return counts, filled, max(0, dots - SIDE_CAPACITY)


def setup_next_stage(state: GameState) -> GameState:
    """
    Seed the next stage from the scores of the one just finished.

    Args:
        state: Settled state (stage_over, match not over)

    Returns:
        Opening state of the next stage
    """
    if not state.stage_over:
        raise ValueError("Cannot set up the next stage before the current one ends")
    if state.match_over:
        raise ValueError("Match is over, no further stages")

    p1_dots, p2_dots = state.player1_score, state.player2_score
    board = [0] * NUM_PITS
    disabled = set()
    carries = {}

    for player, dots in ((1, p1_dots), (2, p2_dots)):
        counts, filled, carry = pack_side(dots)
        pits = side_pits(player)
        for offset, pit in enumerate(pits):
            board[pit] = counts[offset]
            if offset >= filled:
                disabled.add(pit)
        carries[player] = carry

    next_state = GameState(
        board=tuple(board),
        current_player=state.last_stage_winner or 1,
        disabled_pits=frozenset(disabled),
        player1_score=carries[1],
        player2_score=carries[2],
        stage_scores=state.stage_scores.add(p1_dots, p2_dots),
        stage=state.stage + 1,
        stage_dots=p1_dots + p2_dots,
        last_stage_winner=state.last_stage_winner,
    )
    logger.info(
        f"Stage {next_state.stage} set up: player {next_state.current_player} opens, "
        f"disabled pits {sorted(disabled)}, carried {carries[1]}/{carries[2]}"
    )
    return next_state


def new_game() -> GameState:
    """Fresh match: fourteen pits of five, stage 1, no scores."""
    return create_starting_state()


def reset_to_new_game(state: GameState) -> GameState:
    """Discard `state` entirely and start a fresh match."""
    return new_game()


def reset_to_stage(state: GameState) -> GameState:
    """
    Replay the current stage from a full board.

    The cumulative ledger and stage number are kept; the stage is restarted
    with fourteen pits of five and no disabled pits, opened by the winner of
    the previous stage (player 1 if there was none).
    """
    fresh = create_starting_state(current_player=state.last_stage_winner or 1)
    return replace(
        fresh,
        stage_scores=state.stage_scores,
        stage=state.stage,
        last_stage_winner=state.last_stage_winner,
    )


def win_probability(state: GameState) -> Tuple[int, int]:
    """
    Share of all points scored so far, as rounded percentages.

    Returns:
        (player1_percent, player2_percent), 50/50 before anyone scores
    """
    p1_total = state.total_score_of(1)
    p2_total = state.total_score_of(2)
    if p1_total + p2_total == 0:
        return 50, 50
    p1 = int(p1_total * 100 / (p1_total + p2_total) + 0.5)
    return p1, 100 - p1
