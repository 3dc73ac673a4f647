"""
Rich-based terminal display for games and simulations.

Provides clean, formatted output with:
- The board as a two-row table (player 2 on top, right to left)
- Per-turn summaries (pickups, captures, where the turn ended)
- Stage and match results
- Simulation summary tables
"""

import logging
from typing import Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core import GameState, StageEnd, TurnResult, side_pits, win_probability

console = Console()
logger = logging.getLogger(__name__)


class BoardDisplay:
    """
    Rich display for an interactive session.

    Shows:
    - Board with disabled pits blacked out
    - Stage scores and cumulative totals
    - Share-of-points bar
    """

    def __init__(self, player_names: Optional[Dict[int, str]] = None, console_: Optional[Console] = None):
        """
        Initialize board display.

        Args:
            player_names: Labels for players 1 and 2 (e.g. {2: "CPU (HARD)"})
            console_: Console to print to (module console by default)
        """
        self.names = {1: "Player 1", 2: "Player 2"}
        if player_names:
            self.names.update(player_names)
        self.console = console_ or console

    def log(self, message: str, style: str = ""):
        """Log a message using rich console."""
        self.console.print(message, style=style)

    def log_info(self, message: str):
        """Log info message."""
        self.console.print(f"[blue]ℹ[/blue] {message}")

    def log_success(self, message: str):
        """Log success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def log_warning(self, message: str):
        """Log warning message."""
        self.console.print(f"[yellow]⚠[/yellow]  {message}")

    def log_error(self, message: str):
        """Log error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def show_header(self, title: str, subtitle: str = ""):
        """Show session header."""
        self.console.rule(f"[bold blue]{title}[/bold blue]")
        if subtitle:
            self.console.print(subtitle)
        self.console.print()

    def _pit_cell(self, state: GameState, pit: int) -> Text:
        if pit in state.disabled_pits:
            return Text("██", style="dim")
        style = "bold" if state.board[pit] else "dim"
        return Text(f"{state.board[pit]}", style=style)

    def board_table(self, state: GameState) -> Table:
        """Create the board table: pit numbers above/below the counts."""
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Side", style="cyan")
        for _ in range(7):
            table.add_column(justify="right")

        p2 = list(reversed(side_pits(2)))
        p1 = list(side_pits(1))
        table.add_row("", *[Text(f"{pit}", style="dim italic") for pit in p2])
        table.add_row(self.names[2], *[self._pit_cell(state, pit) for pit in p2])
        table.add_row(self.names[1], *[self._pit_cell(state, pit) for pit in p1])
        table.add_row("", *[Text(f"{pit}", style="dim italic") for pit in p1])
        return table

    def score_table(self, state: GameState) -> Table:
        """Create score status table."""
        table = Table(show_header=True, box=None, padding=(0, 1))
        table.add_column("Player", style="cyan")
        table.add_column("Stage", justify="right")
        table.add_column("Total", justify="right", style="bold")
        table.add_column("Share", justify="right")

        share = win_probability(state)
        for player in (1, 2):
            table.add_row(
                self.names[player],
                f"{state.score_of(player)}",
                f"{state.total_score_of(player)}",
                f"{share[player - 1]}%",
            )
        return table

    def show_state(self, state: GameState):
        """Render the board and scores."""
        if state.match_over:
            title = "Match over"
        elif state.stage_over:
            title = f"Stage {state.stage} complete"
        else:
            title = f"Stage {state.stage} - {self.names[state.current_player]}'s turn"
        self.console.print(Panel(self.board_table(state), title=title, expand=False))
        self.console.print(self.score_table(state))
        self.console.print()

    def show_turn(self, result: TurnResult, player: int):
        """Summarise a finished turn."""
        for step in result.sowing.steps:
            line = (
                f"{self.names[player]} sows {step.counters} from pit {step.pickup_pit}, "
                f"lands on {step.landing_pit}"
            )
            if step.capture is not None:
                line += f" and captures {step.capture.count} from pit {step.capture.pit}"
            if step.continues:
                line += " [dim](continues)[/dim]"
            self.log_info(line)
        captured = sum(event.count for event in result.capture_events)
        if captured:
            self.log_success(f"{self.names[player]} captured {captured} this turn")
        self.log(f"[dim]Turn ended at pit {result.turn_ended_at_pit}[/dim]")

    def show_stage_end(self, stage_end: StageEnd, state: GameState):
        """Show stage (or match) result."""
        if stage_end.remaining:
            self.log_info(
                f"{self.names[stage_end.awarded_to]} takes the {stage_end.remaining} "
                f"remaining counter(s)"
            )
        winner = (
            f"{self.names[stage_end.winner]} wins the stage!"
            if stage_end.winner
            else "The stage is a tie"
        )
        heading = "Game Over!" if stage_end.match_over else f"Stage {state.stage} Complete!"
        body = Table.grid(padding=(0, 2))
        body.add_row(Text(winner, style="bold"))
        for player in (1, 2):
            body.add_row(
                f"{self.names[player]}: {state.score_of(player)} counters "
                f"(total {state.total_score_of(player)})"
            )
        if not stage_end.match_over:
            opener = self.names[stage_end.winner or 1]
            suffix = " (tie)" if stage_end.winner is None else ""
            body.add_row(Text(f"{opener} goes first in the next stage{suffix}", style="dim"))
        self.console.print(Panel(body, title=heading, expand=False))


def show_simulation_summary(title: str, results: Dict[str, int], stats: Dict[str, float]):
    """Print win/draw counts and averages for a batch of simulated matches."""
    table = Table(title=title)
    table.add_column("Outcome", style="cyan")
    table.add_column("Matches", justify="right")
    total = sum(results.values()) or 1
    for outcome, count in results.items():
        table.add_row(outcome, f"{count} ({count / total * 100:.0f}%)")
    console.print(table)

    stats_table = Table(show_header=False, box=None, padding=(0, 1))
    stats_table.add_column("Metric", style="cyan")
    stats_table.add_column("Value", style="white")
    for name, value in stats.items():
        stats_table.add_row(name, f"{value:.1f}")
    console.print(stats_table)


def setup_rich_logging(level: str = "WARNING"):
    """Configure logging to work nicely with rich console."""
    from rich.logging import RichHandler

    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Add rich handler
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[rich_handler],
        format="%(message)s",
    )
