"""
Capture scanner
----

A capture is purely local: look at the adjacent diagonal square, and the one right behind it.
Only the four immediate diagonals are ever read, so it is cheap to recompute after every board mutation (nothing is cached).
"""

from src.checkers.board import Board
from src.checkers.position import Position


def capture_targets(board: Board, position: Position) -> set[Position]:
    """
    Landing squares reachable by a single jump of the piece standing on `position`.

    For every direction the piece is allowed to move in (forward for men, all diagonals for kings):
    the adjacent square must hold an enemy piece, and the square one step further must be on the board and empty.
    """
    piece = board.piece_at(position)
    if piece is None:
        return set()

    targets: set[Position] = set()
    for d_row, d_col in piece.directions():
        jumped_square = position.offset(d_row, d_col)
        landing_square = jumped_square.offset(d_row, d_col)
        if not landing_square.is_within_bounds():
            continue

        jumped_piece = board.piece_at(jumped_square)
        if jumped_piece is None or jumped_piece.owner == piece.owner:
            continue

        if board.is_empty(landing_square):
            targets.add(landing_square)
    return targets


def has_capture(board: Board, position: Position) -> bool:
    return bool(capture_targets(board, position))
