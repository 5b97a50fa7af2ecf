"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

import random
from typing import Callable, Iterator

import pytest
from sqlalchemy.orm import Session

from src.checkers.board import Board
from src.checkers.game import TurnController
from src.checkers.game_state import GameState
from src.core.shared_types import Player
from src.db.database import create_db_engine, get_db
from src.db.schema import Base

EMPTY_ROW = "." * 8


@pytest.fixture
def board_from_rows() -> Callable[[dict[int, str]], Board]:
    """Call the inner function with only the rows that are not empty: {row index: row diagram}"""

    def _create_board(rows: dict[int, str]) -> Board:
        diagram = [rows.get(row_idx, EMPTY_ROW) for row_idx in range(8)]
        return Board.from_rows(diagram)

    return _create_board


@pytest.fixture
def double_jump_board(board_from_rows: Callable[[dict[int, str]], Board]) -> Board:
    """Player ONE can jump (5,0) -> (3,2) and then (3,2) -> (1,4) in the same turn"""
    return board_from_rows(
        {
            0: ".x.x....",
            2: "...x....",
            4: ".x......",
            5: "o.......",
            7: "..o.....",
        }
    )


@pytest.fixture
def controller_for() -> Callable[..., TurnController]:
    """Call the inner function with a board and (optionally) who is to move / who the computer is"""

    def _create_controller(
        board: Board,
        active_player: Player = Player.ONE,
        computer_player: Player | None = None,
        seed: int = 0,
    ) -> TurnController:
        state = GameState(board=board, active_player=active_player)
        return TurnController(state, computer_player, random.Random(seed))

    return _create_controller


@pytest.fixture
def db_session_repo() -> Iterator[Session]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    engine = create_db_engine()
    with get_db(engine) as db:
        yield db
    Base.metadata.drop_all(bind=engine)
