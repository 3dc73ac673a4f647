"""Tests for CPU players and heuristics."""

import random
from dataclasses import replace

import pytest
from pallanguzhi.ai import (
    ExpertPlayer,
    HardPlayer,
    MediumPlayer,
    RandomPlayer,
    choose_cpu_move,
    create_player,
)
from pallanguzhi.ai import heuristics as h
from pallanguzhi.config import Difficulty
from pallanguzhi.core import (
    GameState,
    create_starting_state,
    legal_moves,
    play_turn,
    simulate_full_turn,
)

TIERS = ["random", "medium", "hard", "expert"]


def _random_positions(seed: int, count: int):
    """Positions reached by random play, with either player to move."""
    rng = random.Random(seed)
    positions = []
    state = create_starting_state()
    while len(positions) < count:
        if state.stage_over:
            state = create_starting_state(current_player=rng.choice([1, 2]))
            continue
        positions.append(state)
        state = play_turn(state, rng.choice(legal_moves(state))).state
    return positions


def _capture_board() -> GameState:
    """Player 2 to move; only pit 7 captures (lands on 8, 9 empty, takes 10)."""
    board = [0] * 14
    board[0] = 3
    board[3] = 2
    board[7] = 1
    board[10] = 10
    board[12] = 2
    return GameState(
        board=tuple(board),
        current_player=2,
        player1_score=26,
        player2_score=26,
    )


@pytest.mark.parametrize("difficulty", TIERS)
def test_cpu_moves_are_legal(difficulty):
    """Every tier only ever picks legal moves, for either player."""
    player = create_player(difficulty, rng=random.Random(7))
    for state in _random_positions(seed=11, count=40):
        assert player.choose_move(state) in legal_moves(state)


@pytest.mark.parametrize("difficulty", TIERS)
def test_seeded_players_are_deterministic(difficulty):
    positions = _random_positions(seed=3, count=25)

    first = [choose_cpu_move(s, difficulty, rng=random.Random(99)) for s in positions]
    second = [choose_cpu_move(s, difficulty, rng=random.Random(99)) for s in positions]

    assert first == second


@pytest.mark.parametrize("player_class", [MediumPlayer, HardPlayer, ExpertPlayer])
def test_more_captures_score_higher(player_class):
    """Holding everything else fixed, capturing more never scores less."""
    player = player_class(rng=random.Random(0))
    for state in _random_positions(seed=5, count=15):
        for pit in legal_moves(state):
            sim = simulate_full_turn(state.board, state.disabled_pits, pit, state.current_player)
            richer = replace(sim, captured=sim.captured + 5)
            assert player.score_outcome(state, pit, richer) > player.score_outcome(state, pit, sim)


def test_medium_takes_the_capture():
    state = _capture_board()
    for seed in range(5):
        assert MediumPlayer(rng=random.Random(seed)).choose_move(state) == 7


def test_medium_scores_capture_above_alternatives():
    state = _capture_board()
    ranked = dict(MediumPlayer().rank_moves(state))

    assert set(ranked) == {7, 10, 12}
    assert ranked[7] > ranked[10]
    assert ranked[7] > ranked[12]


def test_random_player_covers_every_move():
    state = create_starting_state()
    picks = set()
    rng = random.Random(2024)
    for _ in range(200):
        picks.add(RandomPlayer(rng=rng).choose_move(state))
    assert picks == set(range(7))


def test_no_legal_moves():
    state = GameState(board=tuple([0] * 7 + [5] * 7), player1_score=35)
    for difficulty in TIERS:
        with pytest.raises(ValueError):
            choose_cpu_move(state, difficulty)


def test_create_player():
    assert isinstance(create_player("easy"), RandomPlayer)
    assert isinstance(create_player(Difficulty.HARD), HardPlayer)
    assert isinstance(create_player("Expert"), ExpertPlayer)
    assert create_player("medium").tie_window == 1.0

    with pytest.raises(ValueError):
        create_player("impossible")


def test_projected_capture():
    board = [0] * 14
    board[6] = 1
    board[9] = 4

    # 6 -> lands on 7; 8 empty; 9 occupied
    assert h.projected_capture(board, frozenset(), 6) == 4
    # Pit 8 disabled: 7 -> 9 is not empty, nothing to take
    assert h.projected_capture(board, frozenset({8}), 6) == 0
    assert h.projected_capture(board, frozenset(), 0) == 0


def test_board_control():
    board = [0] * 14
    board[0] = 1
    board[7] = 1
    board[8] = 3

    # (4 - 1) * 2 minus half the variance of [1, 3]
    assert h.board_control(board, frozenset(), 2) == pytest.approx(5.5)


def test_mobility():
    state = create_starting_state()
    assert h.mobility(state.board, state.disabled_pits, 1) == 0

    assert h.mobility(state.board, frozenset({0, 1}), 1) == -4


def test_opening_terms_follow_the_mover():
    board = [5] * 14

    assert h.middle_pits(2) == [9, 10, 11]
    assert h.edge_pits(1) == [0, 6]
    assert h.opening_hard(board, 10, 2) == 6
    assert h.opening_hard(board, 7, 2) == 0
    assert h.opening_hard(board, 3, 2) == 2
    assert h.opening_expert(3, 1) == 5
    assert h.opening_expert(0, 1) == 0


def test_endgame_terms():
    board = [0] * 14
    board[6] = 1
    board[9] = 4

    # Player 1: 1 on own side, 4 opposite, a projected capture of 4
    assert h.endgame_hard(board, frozenset(), 1) == (1 - 4) * 8 + 4 * 3

    board[9] = 0
    assert h.endgame_hard(board, frozenset(), 1) == 8 + 50
    assert h.endgame_expert(board, frozenset(), 1) == 10 + 100


def test_best_opponent_response():
    board = [0] * 14
    board[6] = 1
    board[9] = 4
    board[12] = 1

    assert h.best_opponent_response(board, frozenset(), 1) == 4
    assert h.best_opponent_response(board, frozenset(), 2) == 0
