"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/repository layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the repository, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass
from typing import Optional

# Type aliases to make GameModel easier to read
BoardRow = str
PlayerName = str
PositionNotation = str


@dataclass
class GameModel:
    """Transport-safe representation of a checkers game used between API, Service, repository, and Game layers."""

    board_rows: list[BoardRow]
    active_player: PlayerName
    forced_continuation_from: Optional[PositionNotation]
    status: str
    winner: Optional[PlayerName] = None
    computer_player: Optional[PlayerName] = None
