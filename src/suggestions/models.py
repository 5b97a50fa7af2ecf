"""
Wire format of the move suggestion adapter.

Request (core -> collaborator)::

    {"board": [[{"owner": "one", "isKing": false} | null, ...8], ...8],
     "activePlayer": "two",
     "forcedContinuationFrom": {"row": 3, "col": 2} | null,
     "legalTargets": [{"row": 4, "col": 1}, ...]}

Response (collaborator -> core), one of::

    {"move": {"row": 4, "col": 1}}                              # destination only
    {"from": {"row": 5, "col": 0}, "to": {"row": 4, "col": 1}}  # explicit pair
"""

from typing import Optional, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from src.checkers.position import Position
from src.core.shared_types import Player


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WirePosition(WireModel):
    row: int
    col: int

    @classmethod
    def from_position(cls, position: Position) -> Self:
        return cls.model_validate(position.to_dict())

    def to_position(self) -> Position:
        return Position.from_dict(self.model_dump())


class WirePiece(WireModel):
    owner: Player
    is_king: bool


class SuggestionRequest(WireModel):
    board: list[list[Optional[WirePiece]]]
    active_player: Player
    forced_continuation_from: Optional[WirePosition]
    legal_targets: list[WirePosition]

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SuggestionResponse(WireModel):
    move: Optional[WirePosition] = None
    from_position: Optional[WirePosition] = Field(default=None, alias="from")
    to_position: Optional[WirePosition] = Field(default=None, alias="to")

    @model_validator(mode="after")
    def check_shape(self) -> Self:
        has_pair = self.from_position is not None and self.to_position is not None
        if self.move is None and not has_pair:
            raise ValueError(
                "Suggestion must contain either 'move' or both 'from' and 'to'."
            )
        return self
