"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Phase, Player

BoardRow = str
PositionNotation = str


def _is_position_notation(value: str) -> bool:
    """'<row>,<col>' with both parts single digits"""
    parts = value.split(",")
    if len(parts) != 2:
        return False
    return all(len(part) == 1 and part.isdigit() for part in parts)


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    computer_player: Optional[Player] = None


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    from_position: PositionNotation
    to_position: PositionNotation

    @field_validator(*["from_position", "to_position"])
    @classmethod
    def validate_position(cls, value: str) -> str:
        value = value.strip()
        if not _is_position_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a square. Expected '<row>,<col>'."
            )
        return value


class ComputerTurnRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    board: list[BoardRow]
    active_player: Player
    phase: Phase
    forced_continuation_from: Optional[PositionNotation]
    winner: Optional[Player]
    computer_player: Optional[Player]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    active_player: Player
    legal_moves: list[str]


class MoveResponse(BaseModel):
    accepted: bool
    reason: Optional[str] = None
    moves_played: list[str] = []
    game: GameResponse
