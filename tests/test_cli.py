"""Tests for the simulation runner, display and command line."""

import io
import random

import pytest
from rich.console import Console

from pallanguzhi.cli.main import build_parser, main
from pallanguzhi.core import GameState, create_starting_state, play_turn
from pallanguzhi.game.simulation import run_match, run_matches, summarize
from pallanguzhi.utils.rich_display import BoardDisplay


def test_run_match():
    record = run_match("random", "random", rng=random.Random(12))

    assert record.stages >= 1
    assert record.turns > 0
    if record.finished:
        assert min(record.player1_total, record.player2_total) >= 0
    if record.winner == 1:
        assert record.player1_total > record.player2_total


def test_run_match_stage_limit():
    record = run_match("medium", "random", rng=random.Random(1), max_stages=1)

    assert record.stages == 1


def test_run_matches_is_reproducible():
    first = run_matches("random", "medium", games=3, seed=21, progress=False)
    second = run_matches("random", "medium", games=3, seed=21, progress=False)

    assert first == second
    assert len(first) == 3


def test_summarize():
    records = run_matches("random", "random", games=4, seed=2, max_stages=2, progress=False)
    stats = summarize(records)

    assert stats["Avg stages"] <= 2
    assert stats["Avg turns"] > 0
    assert summarize([]) == {}


def test_parser():
    args = build_parser().parse_args(["play", "--mode", "pvp"])
    assert args.mode == "pvp"
    assert args.difficulty == "medium"

    args = build_parser().parse_args(["simulate", "--p1", "easy", "--p2", "expert", "--games", "5"])
    assert args.games == 5
    assert args.max_stages == 30

    with pytest.raises(SystemExit):
        build_parser().parse_args(["simulate", "--p1", "godlike", "--p2", "hard"])


def test_main_requires_command():
    with pytest.raises(SystemExit):
        main([])


def test_main_simulate(capsys):
    main(["simulate", "--p1", "random", "--p2", "medium", "--games", "2", "--seed", "5", "--no-progress"])

    out = capsys.readouterr().out
    assert "Draws" in out
    assert "Avg stages" in out


def _display():
    buffer = io.StringIO()
    return BoardDisplay({2: "CPU"}, console_=Console(file=buffer, width=120)), buffer


def test_display_state_and_turn():
    display, buffer = _display()
    state = create_starting_state()
    result = play_turn(state, 0)

    display.show_state(state)
    display.show_turn(result, 1)

    text = buffer.getvalue()
    assert "Stage 1 - Player 1's turn" in text
    assert "sows 5 from pit 0" in text
    assert "Turn ended at pit" in text


def test_display_disabled_pits_and_stage_end():
    display, buffer = _display()
    state = GameState(board=tuple([0] * 6 + [1] + [1] + [0] * 6), disabled_pits={0}, player1_score=30, player2_score=38)
    display.show_state(state)
    assert "██" in buffer.getvalue()

    result = play_turn(state, 6)
    display.show_stage_end(result.stage_end, result.state)

    text = buffer.getvalue()
    assert "Stage 1 Complete!" in text
    assert "CPU wins the stage!" in text
    assert "CPU goes first in the next stage" in text
