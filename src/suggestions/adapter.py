"""
Move suggestion adapter
----

The computer-controlled side asks an external collaborator (a remote text-completion endpoint) which move to play.
The core only knows the request/response contract; anything that comes back is checked against the legal move set.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Optional, Protocol

import requests
from pydantic import ValidationError

from src.checkers.board import Board
from src.checkers.moves import Move
from src.checkers.position import BOARD_DIMENSIONS, Position
from src.core.exceptions import (
    InvalidSuggestionError,
    SuggestionTimeoutError,
    SuggestionUnavailableError,
)
from src.core.shared_types import Player
from src.suggestions.models import (
    SuggestionRequest,
    SuggestionResponse,
    WirePiece,
    WirePosition,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a checkers AI. Play as strongly as possible. Given the current board and possible moves, "
    "select the best move for the player. Respond ONLY with the move object as JSON."
)


class MoveSuggester(Protocol):
    """Anything that can answer a SuggestionRequest with a raw response payload"""

    async def suggest(self, request: SuggestionRequest) -> dict[str, Any]: ...


# --- REQUEST / RESPONSE HANDLING ---
def build_request(
    board: Board,
    active_player: Player,
    forced_continuation_from: Optional[Position],
    legal_moves: list[Move],
) -> SuggestionRequest:
    """Legal targets are the destinations of the legal moves (without duplicates, in generator order)"""
    targets: list[Position] = []
    for move in legal_moves:
        if move.to_position not in targets:
            targets.append(move.to_position)

    grid: list[list[Optional[WirePiece]]] = []
    for row in range(BOARD_DIMENSIONS[0]):
        wire_row: list[Optional[WirePiece]] = []
        for col in range(BOARD_DIMENSIONS[1]):
            piece = board.piece_at(Position(row, col))
            wire_row.append(
                WirePiece(owner=piece.owner, is_king=piece.is_king) if piece else None
            )
        grid.append(wire_row)

    return SuggestionRequest(
        board=grid,
        active_player=active_player,
        forced_continuation_from=(
            WirePosition.from_position(forced_continuation_from)
            if forced_continuation_from
            else None
        ),
        legal_targets=[WirePosition.from_position(target) for target in targets],
    )


def resolve_suggestion(
    payload: Any,
    legal_moves: list[Move],
    forced_continuation_from: Optional[Position] = None,
) -> Move:
    """
    Turn a raw response into one of the legal moves.
    ----

    * {"from", "to"}: must match a legal move exactly.
    * {"move"} (destination only): during a capture chain the origin is the bound piece, otherwise the first legal move
      (generator order) landing on that square is taken.

    Anything else raises InvalidSuggestionError.
    """
    try:
        response = SuggestionResponse.model_validate(payload)
    except ValidationError as error:
        raise InvalidSuggestionError(f"Malformed suggestion: {payload!r}") from error

    if response.from_position is not None and response.to_position is not None:
        from_position = response.from_position.to_position()
        to_position = response.to_position.to_position()
        for move in legal_moves:
            if move.from_position == from_position and move.to_position == to_position:
                return move
        raise InvalidSuggestionError(
            f"Suggested move {from_position.to_notation()} -> {to_position.to_notation()} is not legal."
        )

    # for the type checker: the response model guarantees a destination when there is no explicit pair
    assert response.move is not None
    destination = response.move.to_position()
    for move in legal_moves:
        if move.to_position != destination:
            continue
        if forced_continuation_from is None or move.from_position == forced_continuation_from:
            return move
    raise InvalidSuggestionError(
        f"Suggested destination {destination.to_notation()} is not a legal target."
    )


# --- SUGGESTERS ---
class HttpMoveSuggester:
    """Asks the remote AI endpoint. The blocking HTTP call runs in a worker thread so the event loop stays free."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    async def suggest(self, request: SuggestionRequest) -> dict[str, Any]:
        body = {"checkers": {**request.to_payload(), "systemPrompt": SYSTEM_PROMPT}}
        return await asyncio.to_thread(self._post, body)

    def _post(self, body: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self.session.post(self.url, json=body, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout as error:
            raise SuggestionTimeoutError(
                f"Suggestion endpoint {self.url} timed out after {self.timeout}s."
            ) from error
        except requests.RequestException as error:
            raise SuggestionUnavailableError(
                f"Suggestion endpoint {self.url} failed: {error}"
            ) from error

        try:
            data = response.json()
        except ValueError as error:
            raise InvalidSuggestionError("Suggestion endpoint did not return JSON.") from error
        logger.debug("Suggestion endpoint answered %s", data)
        return data


class RandomSuggester:
    """Picks one of the legal targets. Seedable, so games against it are reproducible."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    async def suggest(self, request: SuggestionRequest) -> dict[str, Any]:
        if not request.legal_targets:
            raise SuggestionUnavailableError("No legal targets to choose from.")
        target = self.rng.choice(request.legal_targets)
        return {"move": target.model_dump()}
