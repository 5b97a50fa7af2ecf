"""
The TurnController is the entrypoint into the domain layer for the service layer.
It owns the authoritative GameState and is the only place where a board ever gets changed:
validate a move against the legal set, apply it, crown, decide whether the capture chain continues, and detect the end of the game.

States
----
* AWAITING_SELECTION(player): any legal move of the active player is accepted.
* CONTINUING_CAPTURE(player, position): only further captures of the piece that just jumped are accepted.
* GAME_OVER(result): nothing is accepted anymore.
"""

from __future__ import annotations

import asyncio
import logging
import random
from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.checkers.board import Board
from src.checkers.captures import has_capture
from src.checkers.game_state import GameResult, GameState
from src.checkers.moves import Move, continuation_moves, has_legal_move, legal_moves
from src.checkers.pieces import PROMOTION_ROW
from src.checkers.position import Position
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvariantViolationError,
    SuggestionError,
    SuggestionTimeoutError,
    SuggestionUnavailableError,
)
from src.core.models import GameModel
from src.core.shared_types import Phase, Player, opponent
from src.suggestions.adapter import MoveSuggester, build_request, resolve_suggestion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveResult:
    """What the caller gets back for every move attempt. Rejections leave `state` untouched."""

    accepted: bool
    state: GameState
    move: Optional[Move] = None
    reason: Optional[str] = None
    used_fallback: bool = False


class TurnController:
    def __init__(
        self,
        state: GameState,
        computer_player: Optional[Player] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.state = state
        self.computer_player = computer_player
        self.rng = rng or random.Random()
        self._suggestion_pending = False

    @classmethod
    def new_game(
        cls,
        computer_player: Optional[Player] = None,
        rng: Optional[random.Random] = None,
    ) -> Self:
        return cls(GameState.new_game(), computer_player, rng)

    @classmethod
    def from_state(
        cls,
        state: GameState,
        computer_player: Optional[Player] = None,
        rng: Optional[random.Random] = None,
    ) -> Self:
        """Resume from any position (a custom setup, or a state kept by the caller)"""
        continuation = state.forced_continuation_from
        if continuation is not None:
            piece = state.board.piece_at(continuation)
            if piece is None or piece.owner != state.active_player:
                raise GameStateError(
                    f"Capture chain bound to {continuation.to_notation()}, which holds no piece of {state.active_player}."
                )
            if not has_capture(state.board, continuation):
                raise GameStateError(
                    f"Capture chain bound to {continuation.to_notation()}, which has no capture."
                )
        return cls(state, computer_player, rng)

    @classmethod
    def from_model(cls, model: GameModel, rng: Optional[random.Random] = None) -> Self:
        """Define how to construct a TurnController from the information the Service layer actually has"""

        # Validation
        if model.status not in [phase.value for phase in Phase]:
            raise GameStateError(
                f"Invalid status: {model.status!r}. \nPick one from {','.join(phase.value for phase in Phase)}"
            )
        if model.status == Phase.GAME_OVER and not model.winner:
            raise GameStateError("A finished game must name its winner.")
        if model.status != Phase.GAME_OVER and model.winner:
            raise GameStateError(f"Game with status {model.status!r} cannot have a winner.")
        if (model.status == Phase.CONTINUING_CAPTURE) != bool(model.forced_continuation_from):
            raise GameStateError(
                f"Status {model.status!r} does not match continuation square {model.forced_continuation_from!r}."
            )

        # create the TurnController
        winner = Player(model.winner) if model.winner else None
        state = GameState(
            board=Board.from_rows(model.board_rows),
            active_player=Player(model.active_player),
            forced_continuation_from=(
                Position.from_notation(model.forced_continuation_from)
                if model.forced_continuation_from
                else None
            ),
            result=GameResult.win(winner) if winner else GameResult.in_progress(),
        )
        computer_player = Player(model.computer_player) if model.computer_player else None
        return cls.from_state(state, computer_player, rng)

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        continuation = self.state.forced_continuation_from
        return GameModel(
            board_rows=self.state.board.to_rows(),
            active_player=self.state.active_player.value,
            forced_continuation_from=continuation.to_notation() if continuation else None,
            status=self.state.phase.value,
            winner=self.state.winner.value if self.state.winner else None,
            computer_player=self.computer_player.value if self.computer_player else None,
        )

    # --- QUERIES ---
    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def suggestion_pending(self) -> bool:
        return self._suggestion_pending

    def legal_moves(self) -> list[Move]:
        """
        Legal moves in the current state
        ----

        * game over: nothing
        * continuing a capture chain: only the captures of the bound piece
        * otherwise: the full legal set of the active player (forced capture applied globally)
        """
        if self.state.result.is_over:
            return []
        if self.state.forced_continuation_from is not None:
            return continuation_moves(self.state.board, self.state.forced_continuation_from)
        return legal_moves(self.state.board, self.state.active_player)

    def selectable_pieces(self) -> list[Position]:
        """Pieces with at least one legal move. Everything else cannot be selected."""
        selectable: list[Position] = []
        for move in self.legal_moves():
            if move.from_position not in selectable:
                selectable.append(move.from_position)
        return selectable

    def targets_for(self, position: Position) -> list[Position]:
        """Landing squares for the selected piece (to highlight in the UI)"""
        return [
            move.to_position for move in self.legal_moves() if move.from_position == position
        ]

    # --- MOVES ---
    def request_move(self, from_position: Position, to_position: Position) -> MoveResult:
        """A selection coming from the UI: 'the piece on from_position goes to to_position'"""
        return self.apply_move(Move.between(from_position, to_position))

    def apply_move(self, move: Move) -> MoveResult:
        """
        Attempt to make a move
        -----

        1. reject anything that is not in the legal set (state stays as it is)
        2. relocate the piece, remove the captured piece
        3. crown the piece if it reached the far rank
        4. keep the same player on the move if the piece can capture again, otherwise hand the turn over
        5. check for the end of the game
        """
        if self._suggestion_pending:
            return self._reject(
                move, GameStateError("Waiting for the pending move suggestion.")
            )
        return self._apply(move)

    async def request_suggested_move(
        self, suggester: MoveSuggester, timeout: Optional[float] = None
    ) -> MoveResult:
        """
        Let the computer-controlled side play a single move.
        ----

        Only one request can be outstanding at a time, and while it is, no other move gets applied.
        If the suggester fails, times out, or suggests something illegal, a random legal move is played instead.
        """
        if self.state.result.is_over:
            return self._reject(None, GameStateError("Game is already over."))
        if self.computer_player is None or self.state.active_player != self.computer_player:
            return self._reject(
                None, GameStateError("It is not the computer-controlled side's turn.")
            )
        if self._suggestion_pending:
            return self._reject(
                None, GameStateError("A move suggestion is already pending for this turn.")
            )

        candidates = self.legal_moves()
        if not candidates:
            return self._reject(None, GameStateError("No legal moves available."))

        self._suggestion_pending = True
        try:
            move, used_fallback = await self._fetch_suggestion(suggester, candidates, timeout)
        finally:
            self._suggestion_pending = False

        result = self._apply(move)
        return MoveResult(
            accepted=result.accepted,
            state=result.state,
            move=result.move,
            reason=result.reason,
            used_fallback=used_fallback,
        )

    # -- PRIVATE HELPERS ---
    def _apply(self, move: Move) -> MoveResult:
        try:
            self._assert_can_move()
            self._assert_legal(move)
        except (GameStateError, IllegalMoveError) as error:
            return self._reject(move, error)

        self.state = self._next_state(move)
        logger.info(
            "Played %s, phase: %s, next to move: %s",
            move.to_notation(),
            self.state.phase,
            self.state.active_player,
        )
        if self.state.result.is_over:
            logger.info("Game over, winner: %s", self.state.winner)
        return MoveResult(accepted=True, state=self.state, move=move)

    def _reject(self, move: Optional[Move], error: Exception) -> MoveResult:
        notation = move.to_notation() if move else "suggestion"
        logger.warning("Rejected %s: %s", notation, error)
        return MoveResult(accepted=False, state=self.state, move=move, reason=str(error))

    def _assert_can_move(self) -> None:
        if self.state.result.is_over:
            raise GameStateError(f"Game is over. winner: {self.state.winner}")

    def _assert_legal(self, move: Move) -> None:
        if move not in self.legal_moves():
            continuation = self.state.forced_continuation_from
            if continuation is not None:
                raise IllegalMoveError(
                    f"Move not allowed: {move.to_notation()}. The piece on {continuation.to_notation()} must keep capturing."
                )
            raise IllegalMoveError(f"Move not allowed: {move.to_notation()}")

    def _next_state(self, move: Move) -> GameState:
        """Build the state after the move. The current state (and its board) stays untouched."""
        board = deepcopy(self.state.board)
        mover = self.state.active_player
        pieces_before = board.total_pieces()

        board.move_piece(move.from_position, move.to_position)
        if move.is_capture:
            # for the type checker: captures always know which square they jump over
            assert move.captured_at is not None
            board.remove_piece(move.captured_at)

        if self._reaches_promotion_row(board, move.to_position):
            board.promote_piece(move.to_position)

        # capture chain: the same piece has to continue jumping if it can
        if move.is_capture and has_capture(board, move.to_position):
            next_state = GameState(
                board=board,
                active_player=mover,
                forced_continuation_from=move.to_position,
            )
        else:
            next_state = GameState(
                board=board,
                active_player=opponent(mover),
                result=self._determine_result(board, mover),
            )

        self._check_invariants(pieces_before, move, next_state)
        return next_state

    def _reaches_promotion_row(self, board: Board, position: Position) -> bool:
        piece = board.piece_at(position)
        assert piece is not None
        return not piece.is_king and position.row == PROMOTION_ROW[piece.owner]

    def _determine_result(self, board: Board, mover: Player) -> GameResult:
        """The turn just ended: if the opponent has no pieces, or none of them can move, the mover wins."""
        next_player = opponent(mover)
        if board.count_pieces()[next_player] == 0:
            return GameResult.win(mover)
        if not has_legal_move(board, next_player):
            return GameResult.win(mover)
        return GameResult.in_progress()

    def _check_invariants(self, pieces_before: int, move: Move, state: GameState) -> None:
        """Bugs in the engine, not something a player can trigger"""
        expected = pieces_before - 1 if move.is_capture else pieces_before
        if state.board.total_pieces() != expected:
            raise InvariantViolationError(
                f"Piece count went from {pieces_before} to {state.board.total_pieces()} after {move.to_notation()}"
            )

        continuation = state.forced_continuation_from
        if continuation is None:
            return
        piece = state.board.piece_at(continuation)
        if piece is None or piece.owner != state.active_player:
            raise InvariantViolationError(
                f"Capture chain bound to {continuation.to_notation()}, which holds no piece of {state.active_player}"
            )
        if not has_capture(state.board, continuation):
            raise InvariantViolationError(
                f"Capture chain bound to {continuation.to_notation()}, which has no capture left"
            )

    async def _fetch_suggestion(
        self,
        suggester: MoveSuggester,
        candidates: list[Move],
        timeout: Optional[float],
    ) -> tuple[Move, bool]:
        """Returns the move to play and whether it was the random fallback"""
        request = build_request(
            self.state.board,
            self.state.active_player,
            self.state.forced_continuation_from,
            candidates,
        )
        try:
            try:
                payload = await asyncio.wait_for(suggester.suggest(request), timeout)
            except TimeoutError as error:
                raise SuggestionTimeoutError(
                    f"No suggestion within {timeout}s."
                ) from error
            except (SuggestionError, AssertionError):
                raise
            except Exception as error:
                # any other client failure counts as an unavailable collaborator
                raise SuggestionUnavailableError(
                    f"Suggester failed: {error!r}"
                ) from error
            move = resolve_suggestion(
                payload, candidates, self.state.forced_continuation_from
            )
        except SuggestionError as error:
            move = self.rng.choice(candidates)
            logger.warning(
                "Move suggestion failed (%s), playing random move %s instead",
                error,
                move.to_notation(),
            )
            return move, True
        return move, False
