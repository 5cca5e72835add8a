"""Game state management for Khet."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from khet.game.board import Board, Position
from khet.game.pieces import Piece, PieceType, Player


class GameStatus(Enum):
    """Game lifecycle status."""

    PLAYING = "playing"  # Game in progress
    FINISHED = "finished"  # A Pharaoh has been destroyed


@dataclass
class GameState:
    """Complete state of a Khet game.

    States are treated as values: engine operations return a new state and
    never modify the one they were given. Use copy() before changing a state.

    Attributes:
        board: Current board state
        current_player: Player to act
        game_over: Whether a Pharaoh has been destroyed
        winner: Winning player once the game is over
        turn: Number of completed turns
    """

    board: Board
    current_player: Player = Player.SILVER
    game_over: bool = False
    winner: Player | None = None
    turn: int = 0

    @property
    def status(self) -> GameStatus:
        return GameStatus.FINISHED if self.game_over else GameStatus.PLAYING

    @property
    def is_finished(self) -> bool:
        """Check if the game has finished."""
        return self.game_over

    def piece_at(self, pos: Position) -> Piece | None:
        return self.board.piece_at(pos)

    def pieces_of(self, player: Player) -> list[tuple[Position, Piece]]:
        return self.board.pieces_for_player(player)

    def find_piece(self, piece_type: PieceType, player: Player) -> tuple[Position, Piece] | None:
        return self.board.find_piece(piece_type, player)

    def find_sphinx(self, player: Player) -> tuple[Position, Piece] | None:
        return self.board.find_piece(PieceType.SPHINX, player)

    def find_pharaoh(self, player: Player) -> tuple[Position, Piece] | None:
        return self.board.find_piece(PieceType.PHARAOH, player)

    def copy(self) -> "GameState":
        """Create a deep copy of the game state."""
        return GameState(
            board=self.board.copy(),
            current_player=self.current_player,
            game_over=self.game_over,
            winner=self.winner,
            turn=self.turn,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize game state to a dictionary."""
        return {
            "current_player": self.current_player.value,
            "status": self.status.value,
            "game_over": self.game_over,
            "winner": self.winner.value if self.winner else None,
            "turn": self.turn,
            "board": {
                "width": self.board.width,
                "height": self.board.height,
                "pieces": [
                    {
                        "row": row,
                        "col": col,
                        "type": piece.type.value,
                        "player": piece.player.value,
                        "facing": piece.facing.name,
                    }
                    for (row, col), piece in sorted(self.board.cells.items())
                ],
            },
        }
