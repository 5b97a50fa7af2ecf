"""
Move generation

Key idea: the Capture Scanner decides everything. If any of your pieces can capture, captures are the only legal moves
(forced capture rule). Only when nothing can be captured do ordinary single steps become available.

This module never touches the board; applying moves is done by the TurnController.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.checkers.board import Board
from src.checkers.captures import capture_targets
from src.checkers.position import Position
from src.core.shared_types import Player

STEP_SEPARATOR = "-"
CAPTURE_SEPARATOR = "x"


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_position: Position
    to_position: Position
    is_capture: bool = False
    captured_at: Optional[Position] = None

    @classmethod
    def step(cls, from_position: Position, to_position: Position) -> Move:
        return cls(from_position, to_position)

    @classmethod
    def capture(cls, from_position: Position, to_position: Position) -> Move:
        """The captured piece is always standing halfway the 2-step diagonal jump"""
        return cls(
            from_position,
            to_position,
            is_capture=True,
            captured_at=from_position.midpoint(to_position),
        )

    @classmethod
    def between(cls, from_position: Position, to_position: Position) -> Move:
        """
        Interpret a (from, to) selection coming from the outside (UI clicks, suggestion adapter).

        A jump of two rows is a capture, anything else is treated as a step.
        NOTE: no legality is checked here, the TurnController compares the result against the legal set.
        """
        if abs(to_position.row - from_position.row) == 2:
            return cls.capture(from_position, to_position)
        return cls.step(from_position, to_position)

    @classmethod
    def from_notation(cls, notation: str) -> Move:
        """
        Notation: '<row>,<col>-<row>,<col>' for steps, '<row>,<col>x<row>,<col>' for captures

        examples:
        * "5,0-4,1": step from (5,0) to (4,1)
        * "5,0x3,2": jump from (5,0) over (4,1) onto (3,2)
        """
        if CAPTURE_SEPARATOR in notation:
            from_str, to_str = notation.split(CAPTURE_SEPARATOR)
            return cls.capture(
                Position.from_notation(from_str), Position.from_notation(to_str)
            )
        from_str, to_str = notation.split(STEP_SEPARATOR)
        return cls.step(Position.from_notation(from_str), Position.from_notation(to_str))

    def to_notation(self) -> str:
        separator = CAPTURE_SEPARATOR if self.is_capture else STEP_SEPARATOR
        return f"{self.from_position.to_notation()}{separator}{self.to_position.to_notation()}"


# --- PER PIECE ---
def capture_moves(board: Board, position: Position) -> list[Move]:
    return [
        Move.capture(position, target) for target in sorted(capture_targets(board, position))
    ]


def step_moves(board: Board, position: Position) -> list[Move]:
    """Single diagonal step into an empty square (forward only for men, any diagonal for kings)"""
    piece = board.piece_at(position)
    if piece is None:
        return []

    moves: list[Move] = []
    for d_row, d_col in piece.directions():
        target = position.offset(d_row, d_col)
        if target.is_within_bounds() and board.is_empty(target):
            moves.append(Move.step(position, target))
    return moves


def continuation_moves(board: Board, position: Position) -> list[Move]:
    """During a capture chain, only the bound piece may move, and it may only capture."""
    return capture_moves(board, position)


# --- PER PLAYER ---
def legal_moves(board: Board, player: Player) -> list[Move]:
    """
    Full legal move set for a player
    ----

    1. scan every piece of the player for captures
    2. any capture found? --> only captures are legal (for all pieces that have one)
    3. no captures at all --> ordinary steps

    Forced capture is applied globally (across all of the player's pieces), regardless of who is moving: a human
    selection or the suggestion adapter get validated against the same set.
    Order is deterministic (row-major over the pieces, then by target) so that seeded random picks are reproducible.
    """
    own_pieces = board.pieces_of(player)

    captures: list[Move] = []
    for position in own_pieces:
        captures.extend(capture_moves(board, position))
    if captures:
        return captures

    steps: list[Move] = []
    for position in own_pieces:
        steps.extend(step_moves(board, position))
    return steps


def has_legal_move(board: Board, player: Player) -> bool:
    return len(legal_moves(board, player)) > 0
