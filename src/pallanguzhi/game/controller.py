"""
Game controller: the single owner of the authoritative GameState.

The controller holds exactly one current state and replaces it wholesale on
every operation. Presentation code that defers work (animation pacing, a
delayed CPU move) grabs `generation` when it schedules the work and passes
it back later; any reset or abort bumps the generation so stale callbacks
are dropped instead of acting on a newer game.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Union

from ..ai import CpuPlayer, create_player
from ..config import GameConfig, GameMode
from ..core import (
    GameState,
    IllegalMoveError,
    TurnResult,
    is_game_over,
    is_stage_over,
    legal_moves,
    new_game,
    play_turn,
    reset_to_new_game,
    reset_to_stage,
    setup_next_stage,
    verify_conservation,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveRejected:
    """A move attempt that was refused; the state is unchanged."""

    pit: int
    reason: str


class GameController:
    """
    Turn sequencing for one PvP or CPU session.

    In CPU mode player 2 is driven by play_cpu_turn(); play_turn() only
    accepts moves for the human side.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        state: Optional[GameState] = None,
    ):
        """
        Initialize controller.

        Args:
            config: Session settings (PvP by default)
            rng: Random source for the CPU (defaults to one seeded from config.seed)
            state: Starting position (a fresh game by default)
        """
        self.config = config or GameConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.cpu: Optional[CpuPlayer] = None
        if self.config.mode is GameMode.CPU:
            self.cpu = create_player(self.config.difficulty, rng=self.rng)

        self._state = state if state is not None else new_game()
        self.generation = 0
        self.cpu_move_pending = False

    @property
    def state(self) -> GameState:
        return self._state

    def _commit(self, state: GameState) -> None:
        verify_conservation(state)
        self._state = state

    def is_current(self, generation: int) -> bool:
        """True if work issued at `generation` may still act on the game."""
        return generation == self.generation

    @property
    def is_cpu_turn(self) -> bool:
        return (
            self.cpu is not None
            and self.config.cpu_player == self._state.current_player
            and not self._state.stage_over
        )

    def legal_moves(self, player: Optional[int] = None) -> List[int]:
        return legal_moves(self._state, player)

    def play_turn(self, pit: int) -> Union[TurnResult, MoveRejected]:
        """
        Play a human move.

        Returns:
            TurnResult on success, MoveRejected (state untouched) otherwise
        """
        if self.cpu_move_pending:
            return MoveRejected(pit, "CPU move in progress")
        if self.is_cpu_turn:
            return MoveRejected(pit, "it is the CPU's turn")
        return self._play(pit)

    def _play(self, pit: int) -> Union[TurnResult, MoveRejected]:
        try:
            result = play_turn(self._state, pit)
        except IllegalMoveError as exc:
            logger.debug(f"Rejected move {pit}: {exc.reason}")
            return MoveRejected(pit, exc.reason)
        self._commit(result.state)
        return result

    def play_cpu_turn(self, generation: Optional[int] = None) -> Optional[TurnResult]:
        """
        Let the CPU choose and play its move.

        Args:
            generation: Generation the caller captured when scheduling this
                call; a stale value makes the call a no-op

        Returns:
            TurnResult, or None if there was nothing to do
        """
        if generation is not None and not self.is_current(generation):
            logger.debug(f"Dropping stale CPU turn (generation {generation} != {self.generation})")
            return None
        if self.cpu_move_pending or not self.is_cpu_turn:
            return None

        self.cpu_move_pending = True
        issued = self.generation
        try:
            pit = self.cpu.choose_move(self._state)
            if not self.is_current(issued):
                return None
            result = self._play(pit)
            # CPU moves come from legal_moves(), so a rejection is a bug
            if isinstance(result, MoveRejected):
                raise RuntimeError(f"CPU chose an illegal move {pit}: {result.reason}")
            logger.info(f"CPU ({self.cpu.difficulty.value}) played pit {pit}")
            return result
        finally:
            self.cpu_move_pending = False

    def abort(self) -> None:
        """Cancel any in-flight CPU turn and invalidate pending callbacks."""
        self.cpu_move_pending = False
        self.generation += 1

    def is_stage_over(self) -> bool:
        return is_stage_over(self._state)

    def is_game_over(self) -> bool:
        return is_game_over(self._state)

    def setup_next_stage(self) -> GameState:
        self._commit(setup_next_stage(self._state))
        return self._state

    def reset_to_new_game(self) -> GameState:
        self.abort()
        self._commit(reset_to_new_game(self._state))
        return self._state

    def reset_to_stage(self) -> GameState:
        self.abort()
        self._commit(reset_to_stage(self._state))
        return self._state
