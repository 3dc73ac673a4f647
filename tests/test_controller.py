"""Tests for the game controller and session config."""

import random

import pytest
from pallanguzhi.config import Difficulty, GameConfig, GameMode
from pallanguzhi.core import GameState, StageScores, TurnResult, create_starting_state
from pallanguzhi.game import GameController, MoveRejected


def _cpu_controller(difficulty="medium", seed=1):
    return GameController(GameConfig(mode="cpu", difficulty=difficulty, seed=seed))


def test_config_defaults():
    config = GameConfig()

    assert config.mode is GameMode.PVP
    assert config.difficulty is None
    assert config.cpu_player is None


def test_config_normalises_names():
    config = GameConfig(mode="cpu", difficulty="easy", seed=3)

    assert config.mode is GameMode.CPU
    assert config.difficulty is Difficulty.RANDOM
    assert config.cpu_player == 2


def test_config_validation():
    with pytest.raises(ValueError):
        GameConfig(mode="cpu")

    with pytest.raises(ValueError):
        GameConfig(mode="online")

    with pytest.raises(ValueError):
        Difficulty.parse("grandmaster")


def test_pvp_turns_alternate():
    controller = GameController()

    result = controller.play_turn(0)

    assert isinstance(result, TurnResult)
    assert controller.state is result.state
    assert controller.state.current_player == 2
    assert not controller.is_cpu_turn


def test_rejected_move_leaves_state_alone():
    controller = GameController()
    before = controller.state

    rejected = controller.play_turn(9)

    assert rejected == MoveRejected(9, "pit belongs to player 2")
    assert controller.state is before


def test_human_cannot_move_for_cpu():
    controller = _cpu_controller()
    controller.play_turn(0)
    before = controller.state

    assert controller.is_cpu_turn
    rejected = controller.play_turn(8)

    assert isinstance(rejected, MoveRejected)
    assert rejected.reason == "it is the CPU's turn"
    assert controller.state is before


def test_cpu_turn():
    controller = _cpu_controller()

    # Not the CPU's turn yet
    assert controller.play_cpu_turn() is None

    controller.play_turn(0)
    result = controller.play_cpu_turn(controller.generation)

    assert isinstance(result, TurnResult)
    assert not controller.cpu_move_pending
    assert controller.state is result.state


def test_stale_cpu_turn_is_dropped():
    controller = _cpu_controller()
    controller.play_turn(0)
    scheduled = controller.generation

    controller.abort()
    before = controller.state

    assert controller.play_cpu_turn(scheduled) is None
    assert controller.state is before
    assert controller.play_cpu_turn(controller.generation) is not None


def test_moves_rejected_while_cpu_is_thinking():
    controller = _cpu_controller()
    controller.cpu_move_pending = True

    assert controller.play_turn(0) == MoveRejected(0, "CPU move in progress")

    controller.abort()
    assert not controller.cpu_move_pending
    assert isinstance(controller.play_turn(0), TurnResult)


def test_abort_during_cpu_choice_discards_the_move():
    """A reset that lands while the CPU is choosing wins over the CPU move."""
    controller = _cpu_controller()
    controller.play_turn(0)

    real_choose = controller.cpu.choose_move

    def choose_then_reset(state):
        pit = real_choose(state)
        controller.reset_to_new_game()
        return pit

    controller.cpu.choose_move = choose_then_reset

    assert controller.play_cpu_turn(controller.generation) is None
    assert controller.state == create_starting_state()
    assert not controller.cpu_move_pending


def test_resets_bump_generation():
    controller = GameController()
    generation = controller.generation

    controller.play_turn(2)
    controller.reset_to_stage()
    assert controller.generation == generation + 1
    assert controller.state.board == tuple([5] * 14)

    controller.reset_to_new_game()
    assert controller.generation == generation + 2
    assert controller.is_current(controller.generation)
    assert not controller.is_current(generation)


def test_stage_transition():
    settled = GameState(
        board=tuple([0] * 14),
        player1_score=40,
        player2_score=30,
        stage_over=True,
        last_stage_winner=1,
    )
    controller = GameController(state=settled)

    assert controller.is_stage_over()
    assert not controller.is_game_over()
    assert controller.legal_moves() == []

    nxt = controller.setup_next_stage()

    assert nxt is controller.state
    assert nxt.stage == 2
    assert nxt.stage_scores == StageScores(40, 30)
    assert nxt.player1_score == 5
    assert not controller.is_stage_over()


def test_cpu_plays_whole_match():
    """CPU against CPU through the controller keeps every state consistent."""
    controller = GameController(
        GameConfig(mode="cpu", difficulty="hard"),
        rng=random.Random(8),
    )
    human = random.Random(4)

    for _ in range(400):
        if controller.is_game_over():
            break
        if controller.state.stage_over:
            controller.setup_next_stage()
        elif controller.is_cpu_turn:
            assert controller.play_cpu_turn() is not None
        else:
            pit = human.choice(controller.legal_moves())
            assert isinstance(controller.play_turn(pit), TurnResult)
