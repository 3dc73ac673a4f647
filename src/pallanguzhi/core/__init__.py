"""Core game state representation and rules."""

from .errors import IllegalMoveError, InvariantViolation
from .game_state import (
    GameState,
    StageScores,
    create_starting_state,
    NUM_PITS,
    PITS_PER_SIDE,
    SEEDS_PER_PIT,
    side_pits,
    opponent,
)
from .rules import (
    CaptureEvent,
    SowStep,
    SowingResult,
    TurnResult,
    next_pit,
    landing_pit,
    should_continue,
    resolve_capture,
    simulate_full_turn,
    generate_legal_moves,
    legal_moves,
    check_move,
    play_turn,
    conserved_total,
    verify_conservation,
)
from .stages import (
    StageEnd,
    StageEndReason,
    stage_end_reason,
    is_stage_over,
    is_game_over,
    settle_stage,
    pack_side,
    setup_next_stage,
    new_game,
    reset_to_new_game,
    reset_to_stage,
    win_probability,
)

__all__ = [
    "IllegalMoveError",
    "InvariantViolation",
    "GameState",
    "StageScores",
    "create_starting_state",
    "NUM_PITS",
    "PITS_PER_SIDE",
    "SEEDS_PER_PIT",
    "side_pits",
    "opponent",
    "CaptureEvent",
    "SowStep",
    "SowingResult",
    "TurnResult",
    "next_pit",
    "landing_pit",
    "should_continue",
    "resolve_capture",
    "simulate_full_turn",
    "generate_legal_moves",
    "legal_moves",
    "check_move",
    "play_turn",
    "conserved_total",
    "verify_conservation",
    "StageEnd",
    "StageEndReason",
    "stage_end_reason",
    "is_stage_over",
    "is_game_over",
    "settle_stage",
    "pack_side",
    "setup_next_stage",
    "new_game",
    "reset_to_new_game",
    "reset_to_stage",
    "win_probability",
]
