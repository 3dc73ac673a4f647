"""Tests for game state representation."""

import pytest
from pallanguzhi.core import GameState, StageScores, create_starting_state


def test_create_game_state():
    """Test basic game state creation."""
    state = GameState(board=tuple([5] * 14))

    assert len(state.board) == 14
    assert state.current_player == 1
    assert state.total_dots == 70
    assert state.disabled_pits == frozenset()
    assert state.stage == 1
    assert state.stage_dots == 70
    assert not state.stage_over
    assert not state.match_over
    assert state.last_stage_winner is None


def test_starting_state():
    """Test the opening position."""
    state = create_starting_state()

    assert state.board == tuple([5] * 14)
    assert state.player1_score == 0
    assert state.player2_score == 0
    assert state.stage_scores == StageScores(0, 0)

    assert create_starting_state(current_player=2).current_player == 2


def test_lists_are_normalised():
    """Lists and sets from callers become tuples and frozensets."""
    state = GameState(board=[1] * 14, disabled_pits={3, 4})

    assert isinstance(state.board, tuple)
    assert isinstance(state.disabled_pits, frozenset)
    # Still hashable, so states can be compared and cached
    assert hash(state) == hash(GameState(board=tuple([1] * 14), disabled_pits=frozenset({3, 4})))


def test_player_pits():
    """Test getting player pit indices."""
    state = create_starting_state()

    assert state.get_player_pits(1) == [0, 1, 2, 3, 4, 5, 6]
    assert state.get_player_pits(2) == [7, 8, 9, 10, 11, 12, 13]


def test_side_totals_and_scores():
    """Test per-side counts and score lookups."""
    board = (1, 2, 3, 0, 0, 0, 0, 4, 0, 0, 0, 0, 0, 5)
    state = GameState(
        board=board,
        player1_score=7,
        player2_score=3,
        stage_scores=StageScores(20, 30),
    )

    assert state.dots_on_side(1) == 6
    assert state.dots_on_side(2) == 9
    assert state.score_of(1) == 7
    assert state.total_score_of(1) == 27
    assert state.total_score_of(2) == 33


def test_with_scores():
    """Crediting a player returns a new state."""
    state = create_starting_state()
    credited = state.with_scores(2, 4)

    assert credited.player2_score == 4
    assert credited.player1_score == 0
    assert state.player2_score == 0


def test_stage_scores():
    """Test the cumulative ledger."""
    scores = StageScores(10, 5).add(3, 4)

    assert scores == StageScores(13, 9)
    assert scores.total == 22


def test_str_marks_disabled_pits():
    """Disabled pits are blacked out in the text rendering."""
    state = GameState(board=tuple([5] * 5 + [0, 0] + [5] * 7), disabled_pits={5, 6})
    text = str(state)

    assert "--" in text
    assert "Player 1's turn" in text


def test_state_validation():
    """Test state validation catches errors."""
    # Wrong board size
    with pytest.raises(ValueError):
        GameState(board=tuple([0] * 12))

    # Invalid player
    with pytest.raises(ValueError):
        GameState(board=tuple([0] * 14), current_player=0)

    # Negative counters
    with pytest.raises(ValueError):
        GameState(board=tuple([0, -1] + [0] * 12))

    # Disabled pit out of range
    with pytest.raises(ValueError):
        GameState(board=tuple([0] * 14), disabled_pits={14})

    # Invalid stage winner
    with pytest.raises(ValueError):
        GameState(board=tuple([0] * 14), last_stage_winner=3)
