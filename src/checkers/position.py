"""
A position (square) on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Checkers board is always 8x8 (rows, cols). Row 0 is the top of the board.
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_dict(cls, data: dict[str, int]) -> Position:
        """Wire format used by the move suggestion adapter: {"row": 5, "col": 0}"""
        return cls(int(data["row"]), int(data["col"]))

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col}

    @classmethod
    def from_notation(cls, notation: str) -> Position:
        """'5,0' -> Position(5, 0)"""
        row, col = notation.split(",")
        return cls(int(row), int(col))

    def to_notation(self) -> str:
        return f"{self.row},{self.col}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def is_dark(self) -> bool:
        """Only the dark squares are playable: (row + col) is odd"""
        return (self.row + self.col) % 2 == 1

    def offset(self, d_row: int, d_col: int) -> Position:
        return Position(self.row + d_row, self.col + d_col)

    def midpoint(self, other: Position) -> Position:
        """The square jumped over by a capture from self to other."""
        return Position((self.row + other.row) // 2, (self.col + other.col) // 2)
