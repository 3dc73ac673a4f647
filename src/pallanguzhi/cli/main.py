"""
Main CLI for Pallanguzhi.
"""

import argparse
import logging
import sys

from rich.prompt import Prompt

from ..config import Difficulty, GameConfig, GameMode
from ..core import landing_pit
from ..game import GameController, MoveRejected
from ..game.simulation import DEFAULT_MAX_STAGES, run_matches, summarize
from ..utils.rich_display import BoardDisplay, setup_rich_logging, show_simulation_summary

DIFFICULTY_CHOICES = [d.value for d in Difficulty] + ["easy"]


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _move_hints(controller: GameController) -> str:
    """Legal pits with where each sow would land, e.g. "0->5 3->8"."""
    state = controller.state
    return " ".join(
        f"{pit}->{landing_pit(state.board, state.disabled_pits, pit)}"
        for pit in controller.legal_moves()
    )


def _show_result(display: BoardDisplay, result, player: int) -> None:
    display.show_turn(result, player)
    if result.stage_end is not None:
        display.show_stage_end(result.stage_end, result.state)


def _between_stages(controller: GameController, display: BoardDisplay) -> bool:
    """Handle the pause after a stage. Returns False when the user quits."""
    if controller.is_game_over():
        again = Prompt.ask("Play a new game?", choices=["y", "n"], default="n")
        if again == "y":
            controller.reset_to_new_game()
            return True
        return False

    choice = Prompt.ask(
        "Next stage, replay this stage, new game or quit?",
        choices=["next", "replay", "new", "quit"],
        default="next",
    )
    if choice == "next":
        controller.setup_next_stage()
    elif choice == "replay":
        controller.reset_to_stage()
    elif choice == "new":
        controller.reset_to_new_game()
    else:
        return False
    return True


def play_command(args):
    """Play an interactive game in the terminal."""
    setup_rich_logging(args.log_level)
    logger = logging.getLogger(__name__)

    config = GameConfig(
        mode=GameMode(args.mode),
        difficulty=args.difficulty if args.mode == GameMode.CPU.value else None,
        seed=args.seed,
    )
    controller = GameController(config)

    names = {}
    subtitle = "Player vs Player"
    if config.mode is GameMode.CPU:
        names[2] = f"CPU ({config.difficulty.value.upper()})"
        subtitle = f"Player vs CPU ({config.difficulty.value})"
    display = BoardDisplay(player_names=names)
    display.show_header("Pallanguzhi", subtitle)
    logger.info(f"Session started: {subtitle}")

    try:
        while True:
            state = controller.state
            display.show_state(state)

            if state.stage_over:
                if not _between_stages(controller, display):
                    break
                continue

            player = state.current_player
            if controller.is_cpu_turn:
                result = controller.play_cpu_turn(controller.generation)
                if result is not None:
                    _show_result(display, result, player)
                continue

            raw = Prompt.ask(
                f"{display.names[player]}, pick a pit [{_move_hints(controller)}] "
                f"(r=restart stage, n=new game, q=quit)"
            ).strip().lower()

            if raw == "q":
                break
            if raw == "r":
                controller.reset_to_stage()
                display.log_warning("Stage restarted")
                continue
            if raw == "n":
                controller.reset_to_new_game()
                display.log_warning("New game")
                continue

            try:
                pit = int(raw)
            except ValueError:
                display.log_error(f"Not a pit number: {raw!r}")
                continue

            result = controller.play_turn(pit)
            if isinstance(result, MoveRejected):
                display.log_error(f"Can't play pit {pit}: {result.reason}")
                continue
            _show_result(display, result, player)
    except (KeyboardInterrupt, EOFError):
        controller.abort()
        display.log("")

    display.log_info("Thanks for playing!")


def simulate_command(args):
    """Run CPU-vs-CPU matches and summarise the results."""
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    p1 = Difficulty.parse(args.p1).value
    p2 = Difficulty.parse(args.p2).value

    records = run_matches(
        p1,
        p2,
        games=args.games,
        seed=args.seed,
        max_stages=args.max_stages,
        progress=not args.no_progress,
    )

    results = {
        f"P1 ({p1}) wins": sum(1 for r in records if r.winner == 1),
        f"P2 ({p2}) wins": sum(1 for r in records if r.winner == 2),
        "Draws": sum(1 for r in records if r.winner is None),
    }
    logger.info(f"Finished {len(records)} matches: {results}")
    show_simulation_summary(f"{p1} vs {p2} ({len(records)} matches)", results, summarize(records))
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pallanguzhi counter-sowing game")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument(
        "--mode",
        choices=[m.value for m in GameMode],
        default=GameMode.CPU.value,
        help="pvp = two humans, cpu = human (player 1) vs computer (player 2)",
    )
    play_parser.add_argument(
        "--difficulty",
        choices=DIFFICULTY_CHOICES,
        default=Difficulty.MEDIUM.value,
        help="CPU difficulty (cpu mode only)",
    )
    play_parser.add_argument("--seed", type=int, default=None, help="Seed for the CPU's tie-breaks")
    play_parser.set_defaults(func=play_command)

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Run CPU-vs-CPU matches")
    sim_parser.add_argument("--p1", choices=DIFFICULTY_CHOICES, required=True, help="Player 1 difficulty")
    sim_parser.add_argument("--p2", choices=DIFFICULTY_CHOICES, required=True, help="Player 2 difficulty")
    sim_parser.add_argument("--games", type=int, default=20, help="Number of matches")
    sim_parser.add_argument(
        "--max-stages",
        type=int,
        default=DEFAULT_MAX_STAGES,
        help="Stop a match (unfinished) after this many stages",
    )
    sim_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    sim_parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    sim_parser.set_defaults(func=simulate_command)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
