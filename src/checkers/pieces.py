"""Defines the checkers pieces and the directions they are allowed to move in"""

from dataclasses import dataclass
from typing import Self

from src.core.shared_types import Player

Vector = tuple[int, int]

# Player ONE moves UP the board (toward row 0), player TWO moves DOWN (toward row 7)
FORWARD_DIRECTIONS: dict[Player, list[Vector]] = {
    Player.ONE: [(-1, -1), (-1, 1)],
    Player.TWO: [(1, -1), (1, 1)],
}
KING_DIRECTIONS: list[Vector] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]

# The far rank a man has to reach to get crowned
PROMOTION_ROW: dict[Player, int] = {
    Player.ONE: 0,
    Player.TWO: 7,
}

CHAR_TO_PIECE: dict[str, tuple[Player, bool]] = {
    "o": (Player.ONE, False),
    "O": (Player.ONE, True),
    "x": (Player.TWO, False),
    "X": (Player.TWO, True),
}
PIECE_TO_CHAR: dict[tuple[Player, bool], str] = {
    value: key for key, value in CHAR_TO_PIECE.items()
}
EMPTY_CHAR = "."


@dataclass(frozen=True)
class Piece:
    owner: Player
    is_king: bool = False

    @classmethod
    def from_char(cls, character: str) -> Self:
        # lower case: men, upper case: kings
        owner, is_king = CHAR_TO_PIECE[character]
        return cls(owner, is_king)

    def to_char(self) -> str:
        return PIECE_TO_CHAR[(self.owner, self.is_king)]

    def crowned(self) -> Self:
        """Promotion never gets undone, so the king is just a new value"""
        return type(self)(self.owner, is_king=True)

    def directions(self) -> list[Vector]:
        """Men only move forward, kings move along all four diagonals"""
        if self.is_king:
            return KING_DIRECTIONS
        return FORWARD_DIRECTIONS[self.owner]
