"""
Game state representation for Pallanguzhi.

A Pallanguzhi position consists of:
- 14 pits (no stores), seven per player
- The set of pits blacked out for the current stage
- Per-stage scores plus the cumulative ledger across stages
- Turn bookkeeping (who moves, whether the stage/match has ended)
"""

from typing import FrozenSet, List, Optional, Tuple
from dataclasses import dataclass, field, replace

NUM_PITS = 14
PITS_PER_SIDE = 7
SEEDS_PER_PIT = 5
STARTING_DOTS = NUM_PITS * SEEDS_PER_PIT  # 70
SIDE_CAPACITY = PITS_PER_SIDE * SEEDS_PER_PIT  # 35


def side_pits(player: int) -> range:
    """Pit indices owned by a player (1 -> 0..6, 2 -> 7..13)."""
    if player == 1:
        return range(0, PITS_PER_SIDE)
    if player == 2:
        return range(PITS_PER_SIDE, NUM_PITS)
    raise ValueError(f"Invalid player {player}, must be 1 or 2")


def opponent(player: int) -> int:
    return 2 if player == 1 else 1


def owner_of(pit: int) -> int:
    return 1 if pit < PITS_PER_SIDE else 2


@dataclass(frozen=True)
class StageScores:
    """Cumulative scores folded in at the end of every completed stage."""

    player1: int = 0
    player2: int = 0

    @property
    def total(self) -> int:
        return self.player1 + self.player2

    def add(self, player1: int, player2: int) -> "StageScores":
        return StageScores(self.player1 + player1, self.player2 + player2)


@dataclass(frozen=True)
class GameState:
    """
    Immutable game state.

    Board layout (counter-clockwise sowing 0 -> 13 -> 0):
          P2 Pits (13-7)
       [13][12][11][10][9][8][7]
       [0] [1] [2] [3] [4] [5][6]
          P1 Pits (0-6)

    stage_dots is the number of dots put into play when the current stage
    was seeded. Within a stage, board + stage scores always add up to it.
    """

    board: Tuple[int, ...]  # Counters in each pit (immutable)
    current_player: int = 1  # 1 or 2
    disabled_pits: FrozenSet[int] = field(default_factory=frozenset)
    player1_score: int = 0
    player2_score: int = 0
    stage_scores: StageScores = field(default_factory=StageScores)
    stage: int = 1
    stage_dots: int = STARTING_DOTS
    stage_over: bool = False
    match_over: bool = False
    last_stage_winner: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate state invariants."""
        if len(self.board) != NUM_PITS:
            raise ValueError(
                f"Board size {len(self.board)} doesn't match expected {NUM_PITS}"
            )
        if self.current_player not in (1, 2):
            raise ValueError(
                f"Invalid player {self.current_player}, must be 1 or 2"
            )
        if any(dots < 0 for dots in self.board):
            raise ValueError("Negative counter count not allowed")
        if any(not 0 <= pit < NUM_PITS for pit in self.disabled_pits):
            raise ValueError(f"Disabled pits out of range: {sorted(self.disabled_pits)}")
        if self.last_stage_winner not in (None, 1, 2):
            raise ValueError(f"Invalid stage winner {self.last_stage_winner}")
        # Accept lists/sets from callers but keep the dataclass hashable
        if not isinstance(self.board, tuple):
            object.__setattr__(self, "board", tuple(self.board))
        if not isinstance(self.disabled_pits, frozenset):
            object.__setattr__(self, "disabled_pits", frozenset(self.disabled_pits))

    @property
    def total_dots(self) -> int:
        """Counters remaining on the board."""
        return sum(self.board)

    def score_of(self, player: int) -> int:
        return self.player1_score if player == 1 else self.player2_score

    def total_score_of(self, player: int) -> int:
        """Stage score plus everything banked in earlier stages."""
        banked = self.stage_scores.player1 if player == 1 else self.stage_scores.player2
        return banked + self.score_of(player)

    def dots_on_side(self, player: int) -> int:
        return sum(self.board[pit] for pit in side_pits(player))

    def get_player_pits(self, player: int) -> List[int]:
        """Get pit indices for a player."""
        return list(side_pits(player))

    def with_scores(self, player: int, gained: int) -> "GameState":
        """Return a copy with `gained` counters credited to `player`."""
        if player == 1:
            return replace(self, player1_score=self.player1_score + gained)
        return replace(self, player2_score=self.player2_score + gained)

    def __str__(self) -> str:
        """Human-readable board representation."""

        def cell(pit: int) -> str:
            return " --" if pit in self.disabled_pits else f"{self.board[pit]:>3}"

        p2_str = " ".join(cell(pit) for pit in reversed(side_pits(2)))
        p1_str = " ".join(cell(pit) for pit in side_pits(1))

        if self.match_over:
            status = "Match over"
        elif self.stage_over:
            status = f"Stage {self.stage} complete"
        else:
            status = f"Stage {self.stage} - Player {self.current_player}'s turn"

        board_str = f"""
P2 [{self.player2_score:>2}]  {p2_str}
P1 [{self.player1_score:>2}]  {p1_str}

{status}
"""
        return board_str


def create_starting_state(current_player: int = 1) -> GameState:
    """
    Create the opening position: fourteen pits of five, stage 1.

    Args:
        current_player: Player who opens

    Returns:
        Starting GameState
    """
    return GameState(board=tuple([SEEDS_PER_PIT] * NUM_PITS), current_player=current_player)
