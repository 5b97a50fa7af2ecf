"""
Type definitions used across layers
"""

from enum import StrEnum


class Player(StrEnum):
    """Player ONE starts at the bottom (rows 5-7) and moves up the board. Player TWO starts at the top and moves down."""

    ONE = "one"
    TWO = "two"


class Phase(StrEnum):
    AWAITING_SELECTION = "awaiting selection"
    CONTINUING_CAPTURE = "continuing capture"
    GAME_OVER = "game over"


class Outcome(StrEnum):
    IN_PROGRESS = "in progress"
    WIN = "win"
    DRAW = "draw"  # never produced by the rules, kept for the result contract


def opponent(player: Player) -> Player:
    return Player.TWO if player == Player.ONE else Player.ONE
