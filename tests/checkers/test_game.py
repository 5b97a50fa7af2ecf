"""Unit tests for /src/checkers/game.py"""

import random
from typing import Callable

import pytest

from src.checkers.board import Board
from src.checkers.game import GameModel, TurnController
from src.checkers.game_state import GameResult, GameState
from src.checkers.moves import Move
from src.checkers.pieces import Piece
from src.checkers.position import Position
from src.core.exceptions import GameStateError, InvariantViolationError
from src.core.shared_types import Outcome, Phase, Player

BoardFactory = Callable[[dict[int, str]], Board]
ControllerFactory = Callable[..., TurnController]


@pytest.fixture
def single_capture_board(board_from_rows: BoardFactory) -> Board:
    """(5,0) can jump (4,1) onto (3,2). Player TWO keeps a piece on (0,7) so the game goes on."""
    return board_from_rows({0: ".......x", 4: ".x......", 5: "o......."})


# -- CREATION LOGIC --
def test_new_game() -> None:
    game = TurnController.new_game()
    assert game.state.board == Board.starting_position()
    assert game.state.active_player == Player.ONE
    assert game.state.forced_continuation_from is None
    assert game.state.result == GameResult.in_progress()
    assert game.phase == Phase.AWAITING_SELECTION


def test_model_roundtrip(double_jump_board: Board) -> None:
    """Create a TurnController from a GameModel and convert back into GameModel"""
    model = GameModel(
        board_rows=double_jump_board.to_rows(),
        active_player="two",
        forced_continuation_from=None,
        status="awaiting selection",
        winner=None,
        computer_player="two",
    )
    game = TurnController.from_model(model)
    assert game.state.board == double_jump_board
    assert game.state.active_player == Player.TWO
    assert game.computer_player == Player.TWO
    assert game.to_model() == model


def test_model_roundtrip_during_capture_chain(double_jump_board: Board) -> None:
    game = TurnController(GameState(board=double_jump_board))
    game.request_move(Position(5, 0), Position(3, 2))

    restored = TurnController.from_model(game.to_model())
    assert restored.state == game.state
    assert restored.phase == Phase.CONTINUING_CAPTURE


@pytest.mark.parametrize(
    "status, winner, continuation",
    [
        ("not_existing", None, None),
        ("game over", None, None),  # finished game without a winner
        ("awaiting selection", "two", None),  # winner while still playing
        ("continuing capture", None, None),  # chain without its piece
        ("awaiting selection", None, "5,0"),  # bound piece without a chain
    ],
)
def test_invalid_model(status: str, winner: str | None, continuation: str | None) -> None:
    model = GameModel(
        board_rows=Board.starting_position().to_rows(),
        active_player="one",
        forced_continuation_from=continuation,
        status=status,
        winner=winner,
    )
    with pytest.raises(GameStateError):
        _ = TurnController.from_model(model)


def test_resume_from_state(double_jump_board: Board) -> None:
    state = GameState(board=double_jump_board, active_player=Player.ONE)
    game = TurnController.from_state(state, computer_player=Player.TWO)
    assert game.state is state
    assert game.legal_moves() == [Move.capture(Position(5, 0), Position(3, 2))]


def test_resume_from_chain_without_capture() -> None:
    """The opening piece on (5,0) has nothing to jump, so it cannot be the bound piece"""
    state = GameState(
        board=Board.starting_position(),
        active_player=Player.ONE,
        forced_continuation_from=Position(5, 0),
    )
    with pytest.raises(GameStateError):
        _ = TurnController.from_state(state)


def test_resume_from_chain_bound_to_the_opponent(board_from_rows: BoardFactory) -> None:
    """(2,1) holds a player TWO man that could jump, but player ONE is the one on the move"""
    state = GameState(
        board=board_from_rows({2: ".x......", 3: "..o.....", 7: "o......."}),
        active_player=Player.ONE,
        forced_continuation_from=Position(2, 1),
    )
    with pytest.raises(GameStateError):
        _ = TurnController.from_state(state)


# -- SCENARIO A: OPENING --
def test_opening_legal_moves() -> None:
    game = TurnController.new_game()
    moves = game.legal_moves()
    assert len(moves) == 7
    assert not any(move.is_capture for move in moves)
    assert game.selectable_pieces() == [
        Position(5, 0),
        Position(5, 2),
        Position(5, 4),
        Position(5, 6),
    ]
    assert game.targets_for(Position(5, 2)) == [Position(4, 1), Position(4, 3)]
    assert game.targets_for(Position(6, 1)) == []


def test_step_flips_the_active_player() -> None:
    game = TurnController.new_game()
    result = game.request_move(Position(5, 2), Position(4, 3))

    assert result.accepted
    assert result.state.active_player == Player.TWO
    assert result.state.phase == Phase.AWAITING_SELECTION
    assert result.state.board.piece_at(Position(4, 3)) == Piece(Player.ONE)
    assert result.state.board.is_empty(Position(5, 2))
    assert result.state.board.total_pieces() == 24


def test_old_states_are_not_changed() -> None:
    """Whoever holds on to a previous state keeps seeing exactly that state"""
    game = TurnController.new_game()
    before = game.state
    game.request_move(Position(5, 2), Position(4, 3))

    assert before.board == Board.starting_position()
    assert before.active_player == Player.ONE
    assert game.state is not before


# -- SCENARIO B: SINGLE CAPTURE --
def test_single_capture(
    controller_for: ControllerFactory, single_capture_board: Board
) -> None:
    game = controller_for(single_capture_board)
    assert game.legal_moves() == [Move.capture(Position(5, 0), Position(3, 2))]

    result = game.request_move(Position(5, 0), Position(3, 2))

    assert result.accepted
    board = result.state.board
    assert board.is_empty(Position(4, 1))
    assert board.is_empty(Position(5, 0))
    assert board.piece_at(Position(3, 2)) == Piece(Player.ONE)
    assert result.state.active_player == Player.TWO
    assert result.state.phase == Phase.AWAITING_SELECTION
    assert board.total_pieces() == 2


# -- SCENARIO C: DOUBLE JUMP --
def test_double_jump(controller_for: ControllerFactory, double_jump_board: Board) -> None:
    """Two applyMove calls, both in the same turn of player ONE"""
    game = controller_for(double_jump_board)

    first = game.request_move(Position(5, 0), Position(3, 2))
    assert first.accepted
    assert first.state.phase == Phase.CONTINUING_CAPTURE
    assert first.state.active_player == Player.ONE
    assert first.state.forced_continuation_from == Position(3, 2)
    assert first.state.board.is_empty(Position(4, 1))
    assert game.legal_moves() == [Move.capture(Position(3, 2), Position(1, 4))]
    assert game.selectable_pieces() == [Position(3, 2)]

    second = game.request_move(Position(3, 2), Position(1, 4))
    assert second.accepted
    assert second.state.phase == Phase.AWAITING_SELECTION
    assert second.state.active_player == Player.TWO
    assert second.state.forced_continuation_from is None
    assert second.state.board.is_empty(Position(2, 3))
    assert second.state.board.piece_at(Position(1, 4)) == Piece(Player.ONE)
    assert second.state.board.count_pieces() == {Player.ONE: 2, Player.TWO: 2}


def test_other_piece_rejected_during_capture_chain(
    controller_for: ControllerFactory, double_jump_board: Board
) -> None:
    """While the piece on (3,2) must keep jumping, (7,2) cannot be moved"""
    game = controller_for(double_jump_board)
    game.request_move(Position(5, 0), Position(3, 2))
    during_chain = game.state

    result = game.request_move(Position(7, 2), Position(6, 1))

    assert not result.accepted
    assert "must keep capturing" in (result.reason or "")
    assert game.state is during_chain
    assert result.state is during_chain


# -- FORCED CAPTURE --
def test_step_rejected_when_a_capture_exists(
    controller_for: ControllerFactory, double_jump_board: Board
) -> None:
    game = controller_for(double_jump_board)
    before = game.state

    result = game.request_move(Position(7, 2), Position(6, 3))

    assert not result.accepted
    assert result.reason is not None
    assert game.state is before


@pytest.mark.parametrize(
    "from_position, to_position",
    [
        (Position(5, 0), Position(3, 0)),  # not a diagonal
        (Position(5, 0), Position(6, 1)),  # backwards with a man
        (Position(4, 1), Position(5, 2)),  # opponent's piece
        (Position(3, 0), Position(2, 1)),  # empty square
        (Position(5, 0), Position(8, 3)),  # off the board
    ],
)
def test_illegal_moves_are_rejected_not_raised(
    controller_for: ControllerFactory,
    single_capture_board: Board,
    from_position: Position,
    to_position: Position,
) -> None:
    game = controller_for(single_capture_board)
    before = game.state
    result = game.request_move(from_position, to_position)
    assert not result.accepted
    assert game.state is before


# -- KING PROMOTION --
def test_promotion_on_the_far_rank(
    controller_for: ControllerFactory, board_from_rows: BoardFactory
) -> None:
    board = board_from_rows({1: "..o.....", 3: "......x."})
    game = controller_for(board)

    result = game.request_move(Position(1, 2), Position(0, 1))
    assert result.accepted
    assert result.state.board.piece_at(Position(0, 1)) == Piece(Player.ONE, is_king=True)

    # king stays a king, and may now move backwards
    game.request_move(Position(3, 6), Position(4, 7))
    result = game.request_move(Position(0, 1), Position(1, 0))
    assert result.accepted
    assert result.state.board.piece_at(Position(1, 0)) == Piece(Player.ONE, is_king=True)


def test_player_two_promotes_on_row_seven(
    controller_for: ControllerFactory, board_from_rows: BoardFactory
) -> None:
    board = board_from_rows({2: ".o......", 6: ".x......"})
    game = controller_for(board, active_player=Player.TWO)

    result = game.request_move(Position(6, 1), Position(7, 0))
    assert result.accepted
    assert result.state.board.piece_at(Position(7, 0)) == Piece(Player.TWO, is_king=True)


def test_crowning_jump_continues_as_a_king(
    controller_for: ControllerFactory, board_from_rows: BoardFactory
) -> None:
    """(2,1) jumps onto (0,3), gets crowned, and can then jump backwards over (1,4)"""
    board = board_from_rows({1: "..x.x...", 2: ".o......", 5: "......x."})
    game = controller_for(board)

    first = game.request_move(Position(2, 1), Position(0, 3))
    assert first.state.board.piece_at(Position(0, 3)) == Piece(Player.ONE, is_king=True)
    assert first.state.phase == Phase.CONTINUING_CAPTURE

    second = game.request_move(Position(0, 3), Position(2, 5))
    assert second.accepted
    assert second.state.active_player == Player.TWO
    assert second.state.board.count_pieces() == {Player.ONE: 1, Player.TWO: 1}


# -- GAME OVER --
def test_capturing_the_last_piece_wins(
    controller_for: ControllerFactory, board_from_rows: BoardFactory
) -> None:
    board = board_from_rows({4: ".x......", 5: "o......."})
    game = controller_for(board)

    result = game.request_move(Position(5, 0), Position(3, 2))

    assert result.state.phase == Phase.GAME_OVER
    assert result.state.result == GameResult(Outcome.WIN, Player.ONE)
    assert game.legal_moves() == []


def test_blocked_opponent_loses(
    controller_for: ControllerFactory, board_from_rows: BoardFactory
) -> None:
    """Player TWO still has a piece on (6,7), but it cannot move anymore"""
    board = board_from_rows({5: "o.......", 6: ".......x", 7: "......o."})
    game = controller_for(board)

    result = game.request_move(Position(5, 0), Position(4, 1))

    assert result.state.phase == Phase.GAME_OVER
    assert result.state.winner == Player.ONE


def test_no_moves_after_game_over(
    controller_for: ControllerFactory, board_from_rows: BoardFactory
) -> None:
    board = board_from_rows({4: ".x......", 5: "o......."})
    game = controller_for(board)
    game.request_move(Position(5, 0), Position(3, 2))
    finished = game.state

    result = game.request_move(Position(3, 2), Position(2, 1))
    assert not result.accepted
    assert game.state is finished


# -- INVARIANTS --
def test_piece_conservation_over_a_random_game() -> None:
    """Random (seeded) legal play: pieces only disappear through captures, one at a time, kings stay kings"""
    rng = random.Random(2024)
    game = TurnController.new_game(rng=rng)

    for _ in range(300):
        if game.phase == Phase.GAME_OVER:
            break
        before = game.state
        kings_before = {
            position
            for position, piece in before.board.cells.items()
            if piece.is_king
        }
        move = rng.choice(game.legal_moves())

        result = game.apply_move(move)

        assert result.accepted
        expected = before.board.total_pieces() - (1 if move.is_capture else 0)
        assert result.state.board.total_pieces() == expected
        # only the moving piece and the captured piece change
        for position in kings_before - {move.from_position, move.captured_at}:
            assert result.state.board.piece_at(position) == before.board.piece_at(position)
        if move.from_position in kings_before:
            moved = result.state.board.piece_at(move.to_position)
            assert moved is not None and moved.is_king
        if result.state.forced_continuation_from is not None:
            assert result.state.active_player == before.active_player
            assert all(m.is_capture for m in game.legal_moves())


def test_broken_invariant_is_an_assertion(
    controller_for: ControllerFactory, single_capture_board: Board
) -> None:
    """An engine bug (here: the captured piece does not get removed) is not a recoverable condition"""
    game = controller_for(single_capture_board)

    class LeakyBoard(Board):
        def remove_piece(self, position: Position) -> Piece:  # type: ignore[override]
            piece = self.piece_at(position)
            assert piece is not None
            return piece

    game.state = GameState(board=LeakyBoard(dict(single_capture_board.cells)))
    with pytest.raises(InvariantViolationError):
        game.request_move(Position(5, 0), Position(3, 2))
