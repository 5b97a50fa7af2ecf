"""Orchestration of communication from API router to business logic and session storage (and the reverse direction)."""

import logging
import random
from typing import Optional
from uuid import UUID

from src.api.models import (
    ComputerTurnRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
)
from src.checkers.game import TurnController
from src.checkers.position import Position
from src.core.config import Settings
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Phase, Player
from src.db.repository import GameRepository
from src.suggestions.adapter import HttpMoveSuggester, MoveSuggester, RandomSuggester

logger = logging.getLogger(__name__)


class CheckersService:
    """Orchestration of layers for checkers game."""

    def __init__(
        self,
        repository: GameRepository,
        suggester: Optional[MoveSuggester] = None,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings()
        self.rng = rng or random.Random(self.settings.random_seed)
        self.suggester = suggester or self._default_suggester()
        # games with a move suggestion in flight: no other move is applied to them until it resolves
        self._pending: set[UUID] = set()

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start from the standard opening position. Player ONE moves first."""
        new_game = TurnController.new_game(computer_player=request.computer_player)
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s (computer: %s)", game_id, request.computer_player)
        return self._create_game_response(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves (empty once the game is over)."""
        game = TurnController.from_model(self._fetch_game(request.game_id))
        return LegalMovesResponse(
            game_id=request.game_id,
            active_player=game.state.active_player,
            legal_moves=[move.to_notation() for move in game.legal_moves()],
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. Illegal moves come back as a rejected response, the stored game stays as it was."""
        stored_model = self._fetch_game(request.game_id)

        if request.game_id in self._pending:
            return MoveResponse(
                accepted=False,
                reason="Waiting for the pending move suggestion.",
                game=self._create_game_response(request.game_id, stored_model),
            )

        game = TurnController.from_model(stored_model, rng=self.rng)
        result = game.request_move(
            Position.from_notation(request.from_position),
            Position.from_notation(request.to_position),
        )
        if not result.accepted:
            return MoveResponse(
                accepted=False,
                reason=result.reason,
                game=self._create_game_response(request.game_id, stored_model),
            )

        after_move = game.to_model()
        self.repo.update_game(request.game_id, after_move)
        assert result.move is not None
        return MoveResponse(
            accepted=True,
            moves_played=[result.move.to_notation()],
            game=self._create_game_response(request.game_id, after_move),
        )

    async def play_computer_turn(self, request: ComputerTurnRequest) -> MoveResponse:
        """
        Let the computer-controlled side play until it is the human's turn again (or the game ends).
        A capture chain takes multiple moves, each one asked from the suggester separately.
        """
        stored_model = self._fetch_game(request.game_id)
        if request.game_id in self._pending:
            return MoveResponse(
                accepted=False,
                reason="A move suggestion is already pending for this game.",
                game=self._create_game_response(request.game_id, stored_model),
            )

        game = TurnController.from_model(stored_model, rng=self.rng)
        moves_played: list[str] = []
        reason: Optional[str] = None

        self._pending.add(request.game_id)
        try:
            while (
                game.phase != Phase.GAME_OVER
                and game.state.active_player == game.computer_player
            ):
                result = await game.request_suggested_move(
                    self.suggester, timeout=self.settings.suggestion_timeout
                )
                if not result.accepted:
                    reason = result.reason
                    break
                assert result.move is not None
                moves_played.append(result.move.to_notation())
        finally:
            self._pending.discard(request.game_id)

        if not moves_played:
            return MoveResponse(
                accepted=False,
                reason=reason or "It is not the computer-controlled side's turn.",
                game=self._create_game_response(request.game_id, stored_model),
            )

        after_turn = game.to_model()
        self.repo.update_game(request.game_id, after_turn)
        return MoveResponse(
            accepted=True,
            moves_played=moves_played,
            game=self._create_game_response(request.game_id, after_turn),
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _default_suggester(self) -> MoveSuggester:
        """The remote endpoint when one is configured, random play otherwise"""
        if self.settings.suggestion_url:
            return HttpMoveSuggester(
                self.settings.suggestion_url, timeout=self.settings.suggestion_timeout
            )
        return RandomSuggester(self.rng)

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            board=model.board_rows,
            active_player=Player(model.active_player),
            phase=Phase(model.status),
            forced_continuation_from=model.forced_continuation_from,
            winner=Player(model.winner) if model.winner else None,
            computer_player=(
                Player(model.computer_player) if model.computer_player else None
            ),
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
