"""The Board holds the placement of the pieces. Pure data plus read-only queries; only the TurnController mutates it."""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.checkers.pieces import EMPTY_CHAR, Piece
from src.checkers.position import BOARD_DIMENSIONS, Position
from src.core.exceptions import InvalidBoardError
from src.core.shared_types import Player

# Number of rows each player fills at the start of the game
STARTING_ROWS: dict[Player, range] = {
    Player.TWO: range(0, 3),
    Player.ONE: range(5, 8),
}


@dataclass
class Board:
    # only occupied squares are stored
    cells: dict[Position, Piece] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def starting_position(cls) -> Self:
        """Standard opening: player TWO on the dark squares of rows 0-2, player ONE on rows 5-7. No kings."""
        board = cls()
        for player, rows in STARTING_ROWS.items():
            for row in rows:
                for col in range(BOARD_DIMENSIONS[1]):
                    position = Position(row, col)
                    if position.is_dark():
                        board.place_piece(Piece(player), position)
        return board

    @classmethod
    def from_rows(cls, rows: list[str]) -> Self:
        """Construct a board from a text diagram.

        One string per row, row 0 first, one character per column:
        * '.' empty square
        * 'o' / 'O': man / king of player ONE
        * 'x' / 'X': man / king of player TWO

        ex. the starting position reads
        .x.x.x.x
        x.x.x.x.
        .x.x.x.x
        ........
        ........
        o.o.o.o.
        .o.o.o.o
        o.o.o.o.
        """
        if len(rows) != BOARD_DIMENSIONS[0] or any(
            len(row) != BOARD_DIMENSIONS[1] for row in rows
        ):
            raise InvalidBoardError(
                f"Board diagram must have {BOARD_DIMENSIONS[0]} rows of {BOARD_DIMENSIONS[1]} characters."
            )

        board = cls()
        for row_idx, row in enumerate(rows):
            for col_idx, character in enumerate(row):
                if character == EMPTY_CHAR:
                    continue
                try:
                    piece = Piece.from_char(character)
                except KeyError:
                    raise InvalidBoardError(
                        f"Unknown piece character {character!r} at row {row_idx}, col {col_idx}."
                    ) from None
                board.place_piece(piece, Position(row_idx, col_idx))
        return board

    def to_rows(self) -> list[str]:
        return [
            "".join(
                self._square_to_char(Position(row, col))
                for col in range(BOARD_DIMENSIONS[1])
            )
            for row in range(BOARD_DIMENSIONS[0])
        ]

    def _square_to_char(self, position: Position) -> str:
        piece = self.piece_at(position)
        return piece.to_char() if piece else EMPTY_CHAR

    # --- QUERIES ---
    @staticmethod
    def is_in_bounds(position: Position) -> bool:
        return position.is_within_bounds()

    def piece_at(self, position: Position) -> Optional[Piece]:
        return self.cells.get(position)

    def is_empty(self, position: Position) -> bool:
        return position not in self.cells

    def pieces_of(self, player: Player) -> list[Position]:
        """Row-major order, so every consumer scans the board the same way"""
        return sorted(
            position for position, piece in self.cells.items() if piece.owner == player
        )

    def count_pieces(self) -> dict[Player, int]:
        return {player: len(self.pieces_of(player)) for player in Player}

    def total_pieces(self) -> int:
        return len(self.cells)

    # --- MUTATIONS (TurnController only) ---
    def place_piece(self, piece: Piece, position: Position) -> None:
        if not position.is_within_bounds():
            raise InvalidBoardError(f"{position} is not on the board.")
        if not position.is_dark():
            raise InvalidBoardError(
                f"{position} is a light square. Pieces can only stand on dark squares."
            )
        self.cells[position] = piece

    def remove_piece(self, position: Position) -> Piece:
        try:
            return self.cells.pop(position)
        except KeyError:
            raise InvalidBoardError(f"No piece to remove at {position}.") from None

    def move_piece(self, from_position: Position, to_position: Position) -> None:
        """Relocate the piece (the value moves, nothing stays behind on the starting square)"""
        piece = self.remove_piece(from_position)
        self.place_piece(piece, to_position)

    def promote_piece(self, position: Position) -> None:
        piece = self.piece_at(position)
        if piece is None:
            raise InvalidBoardError(f"No piece to promote at {position}.")
        self.cells[position] = piece.crowned()
