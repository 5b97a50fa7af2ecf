"""
The authoritative state of one game of checkers.

A GameState is a value: the TurnController builds a new one for every accepted move and never changes an old one, so
whoever holds on to a previous state (UI, tests) keeps seeing exactly what it saw before.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.checkers.board import Board
from src.checkers.position import Position
from src.core.shared_types import Outcome, Phase, Player


@dataclass(frozen=True)
class GameResult:
    outcome: Outcome = Outcome.IN_PROGRESS
    winner: Optional[Player] = None

    @classmethod
    def in_progress(cls) -> Self:
        return cls()

    @classmethod
    def win(cls, player: Player) -> Self:
        return cls(Outcome.WIN, player)

    @property
    def is_over(self) -> bool:
        return self.outcome != Outcome.IN_PROGRESS


@dataclass(frozen=True)
class GameState:
    board: Board
    active_player: Player = Player.ONE
    forced_continuation_from: Optional[Position] = None
    result: GameResult = field(default_factory=GameResult.in_progress)

    @classmethod
    def new_game(cls) -> Self:
        """Player ONE moves first"""
        return cls(board=Board.starting_position(), active_player=Player.ONE)

    @property
    def phase(self) -> Phase:
        if self.result.is_over:
            return Phase.GAME_OVER
        if self.forced_continuation_from is not None:
            return Phase.CONTINUING_CAPTURE
        return Phase.AWAITING_SELECTION

    @property
    def winner(self) -> Optional[Player]:
        return self.result.winner
