"""Pytest configuration and fixtures."""

import pytest

from khet.game.board import Board, Position
from khet.game.engine import GameEngine
from khet.game.pieces import Facing, Piece, PieceType, Player
from khet.game.state import GameState
from khet.settings import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make each test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def classic_state() -> GameState:
    """A fresh classic game with Silver to move."""
    return GameEngine.create_game()


def _make_state(
    pieces: dict[Position, tuple[PieceType, Player, Facing]],
    current_player: Player = Player.SILVER,
) -> GameState:
    """Build a state from {(row, col): (type, player, facing)}."""
    board = Board.create_empty()
    for pos, (piece_type, player, facing) in pieces.items():
        board.place(pos, Piece(piece_type, player, facing))
    return GameEngine.create_game_from_board(board, starting_player=current_player)


@pytest.fixture
def make_state():
    """Factory fixture building a state from a piece map."""
    return _make_state
