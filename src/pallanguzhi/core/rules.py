"""
Pallanguzhi rules implementation.

Implements the sowing cycle used for both real turns and CPU lookahead:
- Counter-clockwise sowing (0 -> 13 -> 0), skipping disabled pits
- After a sow, the turn continues from the pit after the landing pit if that
  pit holds counters
- If the pit after the landing pit is empty, the pit after that is captured
- Two empty pits in a row end the turn with no capture
"""

import logging
from dataclasses import dataclass, replace
from typing import AbstractSet, List, Optional, Sequence, Tuple

from .errors import IllegalMoveError, InvariantViolation
from .game_state import NUM_PITS, GameState, opponent, side_pits
from .stages import StageEnd, stage_end_reason, settle_stage

logger = logging.getLogger(__name__)

# A turn that keeps continuing past this many pickups is cut short.
MAX_PICKUPS_PER_TURN = 500


@dataclass(frozen=True)
class CaptureEvent:
    """Counters taken from a pit during a turn."""

    pit: int
    count: int


@dataclass(frozen=True)
class SowStep:
    """One pickup-and-distribute cycle within a turn."""

    pickup_pit: int
    counters: int
    landing_pit: int
    continues: bool
    capture: Optional[CaptureEvent] = None


@dataclass(frozen=True)
class SowingResult:
    """Outcome of a full turn computed on a copy of the board."""

    final_board: Tuple[int, ...]
    captured: int
    capture_events: Tuple[CaptureEvent, ...]
    continues_turn: bool  # True if at least one continuation happened
    turn_length: int  # Number of pickups
    final_pit: int
    steps: Tuple[SowStep, ...] = ()


@dataclass(frozen=True)
class TurnResult:
    """A committed turn: the new state plus what happened on the way."""

    state: GameState
    capture_events: Tuple[CaptureEvent, ...]
    turn_ended_at_pit: int
    game_over: bool  # The turn ended the stage (or the match)
    sowing: SowingResult
    stage_end: Optional[StageEnd] = None


def next_pit(pit: int, disabled_pits: AbstractSet[int] = frozenset()) -> int:
    """
    Get the traversal successor of a pit, skipping disabled pits.

    If every other pit is disabled the search wraps back to `pit` and stops.

    Args:
        pit: Current pit index
        disabled_pits: Pits excluded from play this stage

    Returns:
        Next pit index in counter-clockwise order
    """
    nxt = (pit + 1) % NUM_PITS
    while nxt in disabled_pits:
        nxt = (nxt + 1) % NUM_PITS
        if nxt == pit:
            break
    return nxt


def landing_pit(
    board: Sequence[int], disabled_pits: AbstractSet[int], pit: int
) -> Optional[int]:
    """Pit where the last counter of a sow from `pit` would fall (None if empty)."""
    counters = board[pit]
    if counters == 0:
        return None
    current = pit
    for _ in range(counters):
        current = next_pit(current, disabled_pits)
    return current


def should_continue(
    board: Sequence[int], disabled_pits: AbstractSet[int], landing: int
) -> bool:
    """The turn continues iff the pit after the landing pit holds counters."""
    return board[next_pit(landing, disabled_pits)] > 0


def resolve_capture(
    board: List[int], disabled_pits: AbstractSet[int], landing: int
) -> Optional[CaptureEvent]:
    """
    Apply the capture rule at a landing pit, mutating `board`.

    Pattern: landing -> empty pit -> occupied pit. The occupied pit is
    emptied and its counters returned as a CaptureEvent. If the two pits
    after the landing pit are both empty nothing is captured.

    Args:
        board: Mutable board copy
        disabled_pits: Pits excluded from play this stage
        landing: Pit where the last counter fell

    Returns:
        CaptureEvent or None
    """
    nxt = next_pit(landing, disabled_pits)
    if board[nxt] != 0:
        return None

    after = next_pit(nxt, disabled_pits)
    if board[after] == 0:
        # Two consecutive empty pits: turn ends without capture
        return None

    captured = board[after]
    board[after] = 0
    return CaptureEvent(pit=after, count=captured)


def simulate_full_turn(
    board: Sequence[int],
    disabled_pits: AbstractSet[int],
    start_pit: int,
    player: int,
) -> SowingResult:
    """
    Run a complete turn (sow, capture, continue) on a copy of the board.

    This is the single turn primitive: real play commits its result through
    play_turn() and the CPU players use it for lookahead, so both always
    resolve a turn the same way.

    Args:
        board: Board to start from (not modified)
        disabled_pits: Pits excluded from play this stage
        start_pit: Pit the mover picks up first
        player: Mover (only used for logging; captures are credited by caller)

    Returns:
        SowingResult describing the finished turn
    """
    work = list(board)
    current = start_pit
    final_pit = start_pit
    captured = 0
    events: List[CaptureEvent] = []
    steps: List[SowStep] = []
    continues_turn = False
    turn_length = 0

    while True:
        if work[current] == 0:
            # Nothing to pick up; covers the two-empty-pits stop as well
            break

        if turn_length >= MAX_PICKUPS_PER_TURN:
            logger.warning(
                f"Turn for player {player} from pit {start_pit} exceeded "
                f"{MAX_PICKUPS_PER_TURN} pickups, ending it at pit {final_pit}"
            )
            break

        counters = work[current]
        work[current] = 0
        turn_length += 1

        pit = current
        for _ in range(counters):
            pit = next_pit(pit, disabled_pits)
            work[pit] += 1
        final_pit = pit

        # Continuation is decided before capture
        cont = should_continue(work, disabled_pits, pit)
        event = resolve_capture(work, disabled_pits, pit)
        if event is not None:
            captured += event.count
            events.append(event)

        steps.append(
            SowStep(
                pickup_pit=current,
                counters=counters,
                landing_pit=pit,
                continues=cont,
                capture=event,
            )
        )

        if not cont:
            break
        continues_turn = True
        current = next_pit(pit, disabled_pits)

    return SowingResult(
        final_board=tuple(work),
        captured=captured,
        capture_events=tuple(events),
        continues_turn=continues_turn,
        turn_length=turn_length,
        final_pit=final_pit,
        steps=tuple(steps),
    )


def generate_legal_moves(
    board: Sequence[int], disabled_pits: AbstractSet[int], player: int
) -> List[int]:
    """
    Generate all legal moves for a player.

    A move is legal if the chosen pit:
    - Belongs to the player
    - Is not disabled
    - Contains at least one counter

    Returns:
        Ordered list of legal pit indices
    """
    return [
        pit
        for pit in side_pits(player)
        if board[pit] > 0 and pit not in disabled_pits
    ]


def legal_moves(state: GameState, player: Optional[int] = None) -> List[int]:
    """Legal pits for `player` (default: player to move); empty once the stage is over."""
    if state.stage_over:
        return []
    if player is None:
        player = state.current_player
    return generate_legal_moves(state.board, state.disabled_pits, player)


def check_move(state: GameState, pit: int) -> Optional[str]:
    """Return why `pit` can't be played in `state`, or None if it can."""
    if state.match_over:
        return "match is over"
    if state.stage_over:
        return "stage is over"
    if not isinstance(pit, int) or not 0 <= pit < NUM_PITS:
        return "no such pit"
    if pit not in side_pits(state.current_player):
        return f"pit belongs to player {opponent(state.current_player)}"
    if pit in state.disabled_pits:
        return "pit is disabled"
    if state.board[pit] == 0:
        return "pit is empty"
    return None


def play_turn(state: GameState, pit: int) -> TurnResult:
    """
    Play a full turn from `pit` and return the resulting state.

    Rules:
    1. Validate the move (IllegalMoveError before anything is computed)
    2. Sow/capture/continue until the turn ends
    3. Credit captures to the mover
    4. Check the stage end for the mover; otherwise pass the turn and check
       again for the opponent

    Args:
        state: Current game state
        pit: Pit index to play

    Returns:
        TurnResult with the new state
    """
    reason = check_move(state, pit)
    if reason is not None:
        raise IllegalMoveError(pit, reason)

    mover = state.current_player
    sowing = simulate_full_turn(state.board, state.disabled_pits, pit, mover)

    next_state = replace(state, board=sowing.final_board).with_scores(mover, sowing.captured)
    logger.debug(
        f"Player {mover} played pit {pit}: {sowing.turn_length} pickups, "
        f"captured {sowing.captured}, ended at pit {sowing.final_pit}"
    )

    stage_end = None
    end_reason = stage_end_reason(next_state.board, next_state.disabled_pits, mover)
    if end_reason is not None:
        next_state, stage_end = settle_stage(next_state, end_reason)
    else:
        next_state = replace(next_state, current_player=opponent(mover))
        end_reason = stage_end_reason(
            next_state.board, next_state.disabled_pits, next_state.current_player
        )
        if end_reason is not None:
            next_state, stage_end = settle_stage(next_state, end_reason)

    return TurnResult(
        state=next_state,
        capture_events=sowing.capture_events,
        turn_ended_at_pit=sowing.final_pit,
        game_over=stage_end is not None,
        sowing=sowing,
        stage_end=stage_end,
    )


def conserved_total(state: GameState) -> int:
    """Counters on the board plus every score, current and banked."""
    return (
        state.total_dots
        + state.player1_score
        + state.player2_score
        + state.stage_scores.total
    )


def verify_conservation(state: GameState) -> None:
    """
    Check that no counters were created or lost.

    Raises:
        InvariantViolation: if board + scores drift from the stage total
    """
    expected = state.stage_scores.total + state.stage_dots
    actual = conserved_total(state)
    if actual != expected:
        raise InvariantViolation(
            f"Counter conservation broken in stage {state.stage}: "
            f"expected {expected}, found {actual} (board={list(state.board)})"
        )
