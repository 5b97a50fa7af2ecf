"""Command-line interface for playing checkers against the computer-controlled side."""

import argparse
import asyncio
import logging
import random
from contextlib import ExitStack
from typing import Optional

from src.api.models import (
    ComputerTurnRequest,
    CreateGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    MoveRequest,
)
from src.core.config import Settings, configure_logging
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Phase, Player, opponent
from src.db.database import create_db_engine, get_db
from src.db.memory_repository import InMemoryGameRepository
from src.db.repository import GameRepository
from src.db.sql_repository import SQLGameRepository
from src.services.checkers_service import CheckersService

LOG = logging.getLogger("src.cli")

NO_COMPUTER = "none"


def _render_board(game: GameResponse) -> None:
    print("\n   " + "".join(str(col) for col in range(8)))
    for row_idx, row in enumerate(game.board):
        print(f"{row_idx}  {row}")
    print()


def _prompt(prompt: str) -> Optional[str]:
    try:
        value = input(prompt).strip()
    except EOFError:
        return None
    if value.lower() in {"q", "quit", "exit"}:
        return None
    return value


def _human_turn(service: CheckersService, game: GameResponse) -> bool:
    """Ask for moves until one is accepted. False when the player quits."""
    while True:
        _render_board(game)
        if game.phase == Phase.CONTINUING_CAPTURE:
            print(f"Keep jumping with the piece on {game.forced_continuation_from}.")
        legal = service.legal_moves(LegalMovesRequest(game_id=game.game_id))
        print("Legal moves: " + ", ".join(legal.legal_moves))

        origin = _prompt("Piece to move (row,col or q to quit): ")
        if origin is None:
            return False
        target = _prompt("Destination (row,col): ")
        if target is None:
            return False

        try:
            request = MoveRequest(game_id=game.game_id, from_position=origin, to_position=target)
        except InvalidRequestError as e:
            print(e)
            continue

        response = service.make_move(request)
        if response.accepted:
            return True
        print(f"Illegal move: {response.reason}. Try again.")


async def amain(args: argparse.Namespace, settings: Settings, repository: GameRepository) -> None:
    rng = random.Random(args.seed if args.seed is not None else settings.random_seed)
    if args.url:
        settings = settings.model_copy(update={"suggestion_url": args.url})
    service = CheckersService(repository, settings=settings, rng=rng)

    computer = None if args.computer == NO_COMPUTER else Player(args.computer)
    game = service.create_new_game(CreateGameRequest(computer_player=computer))

    while game.phase != Phase.GAME_OVER:
        if computer is not None and game.active_player == computer:
            response = await service.play_computer_turn(ComputerTurnRequest(game_id=game.game_id))
            print(f"Computer plays {', '.join(response.moves_played)}")
        elif not _human_turn(service, game):
            LOG.info("Player quit game %s", game.game_id)
            return
        game = service.get_game_state(GetGameRequest(game_id=game.game_id))

    _render_board(game)
    if computer is None:
        print(f"Player {game.winner} wins.")
    else:
        print("You win!" if game.winner == opponent(computer) else "The computer wins.")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Defaults come from the CHECKERS_* environment (see Settings)"""
    parser = argparse.ArgumentParser(description="Play checkers against the computer")
    parser.add_argument(
        "--computer",
        choices=[p.value for p in Player] + [NO_COMPUTER],
        default=settings.computer_player.value if settings.computer_player else NO_COMPUTER,
        help=f"side played by the computer, '{NO_COMPUTER}' for two human players",
    )
    parser.add_argument("--url", default=None, help="move suggestion endpoint")
    parser.add_argument("--database-url", default=settings.database_url, help="keep the session in a database")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def main() -> None:
    settings = Settings.from_env()
    args = build_parser(settings).parse_args()

    configure_logging(args.log_level)

    with ExitStack() as stack:
        repository: GameRepository
        if args.database_url:
            db = stack.enter_context(get_db(create_db_engine(args.database_url)))
            repository = SQLGameRepository(db)
        else:
            repository = InMemoryGameRepository()

        try:
            asyncio.run(amain(args, settings, repository))
        except KeyboardInterrupt:
            LOG.info("Game interrupted")


if __name__ == "__main__":
    main()
