"""Board representation for Khet."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from khet.game.pieces import CARDINAL_FACINGS, Facing, Piece, PieceType, Player

logger = logging.getLogger(__name__)

# (row, col); row 0 is Red's home edge, row 7 is Silver's
Position = tuple[int, int]

BOARD_ROWS = 8
BOARD_COLS = 10


class BoardPreset(Enum):
    """Starting layouts."""

    CLASSIC = "classic"


def _column(col: int) -> set[Position]:
    return {(row, col) for row in range(BOARD_ROWS)}


# Squares each player's pieces may never move onto (Khet 2.0 board markings).
# Red is kept off Silver's ankh squares, Silver off Red's eye-of-Horus squares.
RESERVED_SQUARES: dict[Player, frozenset[Position]] = {
    Player.RED: frozenset(_column(BOARD_COLS - 1) | {(0, 1), (BOARD_ROWS - 1, 1)}),
    Player.SILVER: frozenset(_column(0) | {(0, BOARD_COLS - 2), (BOARD_ROWS - 1, BOARD_COLS - 2)}),
}


# Classic Khet 2.0 starting positions: (row, col, type, player, facing)
CLASSIC_SETUP: list[tuple[int, int, PieceType, Player, Facing]] = [
    # Red (top)
    (0, 0, PieceType.SPHINX, Player.RED, Facing.S),
    (0, 4, PieceType.ANUBIS, Player.RED, Facing.S),
    (0, 5, PieceType.PHARAOH, Player.RED, Facing.S),
    (0, 6, PieceType.ANUBIS, Player.RED, Facing.S),
    (0, 9, PieceType.PYRAMID, Player.RED, Facing.SE),
    (1, 2, PieceType.PYRAMID, Player.RED, Facing.SW),
    (2, 3, PieceType.PYRAMID, Player.SILVER, Facing.NW),
    (3, 1, PieceType.PYRAMID, Player.RED, Facing.NE),
    (3, 3, PieceType.PYRAMID, Player.SILVER, Facing.SW),
    (3, 4, PieceType.SCARAB, Player.RED, Facing.NE),
    (3, 5, PieceType.SCARAB, Player.RED, Facing.SE),
    (3, 7, PieceType.PYRAMID, Player.RED, Facing.SE),
    (3, 9, PieceType.PYRAMID, Player.SILVER, Facing.NW),
    (4, 1, PieceType.PYRAMID, Player.RED, Facing.SE),
    (4, 3, PieceType.PYRAMID, Player.SILVER, Facing.NW),
    (4, 4, PieceType.SCARAB, Player.SILVER, Facing.SE),
    (4, 5, PieceType.SCARAB, Player.SILVER, Facing.NE),
    (4, 7, PieceType.PYRAMID, Player.RED, Facing.NE),
    (4, 9, PieceType.PYRAMID, Player.SILVER, Facing.SW),
    (5, 6, PieceType.PYRAMID, Player.RED, Facing.SE),
    (6, 6, PieceType.PYRAMID, Player.SILVER, Facing.NE),
    # Silver (bottom)
    (7, 3, PieceType.PYRAMID, Player.SILVER, Facing.NW),
    (7, 4, PieceType.ANUBIS, Player.SILVER, Facing.N),
    (7, 5, PieceType.PHARAOH, Player.SILVER, Facing.N),
    (7, 6, PieceType.ANUBIS, Player.SILVER, Facing.N),
    (7, 9, PieceType.SPHINX, Player.SILVER, Facing.N),
]

PRESET_SETUPS: dict[BoardPreset, list[tuple[int, int, PieceType, Player, Facing]]] = {
    BoardPreset.CLASSIC: CLASSIC_SETUP,
}


@dataclass
class Board:
    """Khet board with pieces.

    Attributes:
        cells: Occupied squares, keyed by (row, col)
        height: Board height in squares
        width: Board width in squares
    """

    cells: dict[Position, Piece] = field(default_factory=dict)
    height: int = BOARD_ROWS
    width: int = BOARD_COLS

    @classmethod
    def create(cls, preset: BoardPreset | str) -> "Board":
        """Create a board from a named preset.

        Unknown preset names produce an empty board, which is not a playable game.
        """
        try:
            preset = BoardPreset(preset)
        except ValueError:
            logger.warning(f"Unknown board preset {preset!r}, creating an empty board")
            return cls.create_empty()

        board = cls.create_empty()
        for row, col, piece_type, player, facing in PRESET_SETUPS[preset]:
            board.place((row, col), Piece(piece_type, player, facing))
        return board

    @classmethod
    def create_classic(cls) -> "Board":
        """Create a board with the classic starting layout."""
        return cls.create(BoardPreset.CLASSIC)

    @classmethod
    def create_empty(cls) -> "Board":
        """Create an empty board (useful for tests and custom positions)."""
        return cls()

    def copy(self) -> "Board":
        """Create an independent copy of the board.

        Pieces are immutable, so copying the cell mapping is enough.
        """
        return Board(cells=dict(self.cells), height=self.height, width=self.width)

    def is_valid_square(self, row: int, col: int) -> bool:
        """Check if a square is on the board."""
        return 0 <= row < self.height and 0 <= col < self.width

    def piece_at(self, pos: Position) -> Piece | None:
        """Get the piece at a position, or None if empty or off-board."""
        return self.cells.get(pos)

    def place(self, pos: Position, piece: Piece) -> None:
        """Put a piece on a square, replacing any occupant."""
        if not self.is_valid_square(*pos):
            raise ValueError(f"Position {pos} is off the board")
        self.cells[pos] = piece

    def remove(self, pos: Position) -> Piece | None:
        """Remove and return the piece on a square."""
        return self.cells.pop(pos, None)

    def pieces_for_player(self, player: Player) -> list[tuple[Position, Piece]]:
        """Get a player's pieces in row-major order."""
        return [(pos, piece) for pos, piece in self._ordered() if piece.player == player]

    def find_piece(self, piece_type: PieceType, player: Player) -> tuple[Position, Piece] | None:
        """Find the first piece of a type for a player, scanning in row-major order."""
        for pos, piece in self._ordered():
            if piece.type == piece_type and piece.player == player:
                return pos, piece
        return None

    def sphinx_facings(self, pos: Position) -> tuple[Facing, ...]:
        """Get the facings a Sphinx on this square may take.

        A Sphinx may only point into the board from its home edge, which leaves
        two facings in a corner. Away from every edge a Sphinx keeps its
        current facing.
        """
        row, col = pos
        inward = []
        if row == 0:
            inward.append(Facing.S)
        if row == self.height - 1:
            inward.append(Facing.N)
        if col == 0:
            inward.append(Facing.E)
        if col == self.width - 1:
            inward.append(Facing.W)
        if not inward:
            piece = self.piece_at(pos)
            return (piece.facing,) if piece is not None else ()
        return tuple(f for f in CARDINAL_FACINGS if f in inward)

    def render(self) -> str:
        """Plain-text grid, one line per row ('.' for empty squares)."""
        lines = []
        for row in range(self.height):
            line = []
            for col in range(self.width):
                piece = self.cells.get((row, col))
                line.append(piece.symbol if piece else ".")
            lines.append(" ".join(line))
        return "\n".join(lines)

    def _ordered(self) -> list[tuple[Position, Piece]]:
        return sorted(self.cells.items())
