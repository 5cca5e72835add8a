"""Move definitions, generation and application for Khet."""

import logging
from dataclasses import dataclass
from enum import Enum

from khet.game.board import RESERVED_SQUARES, Board, Position
from khet.game.pieces import (
    ALLOWED_FACINGS,
    Facing,
    Piece,
    PieceType,
    Player,
)
from khet.game.state import GameState

logger = logging.getLogger(__name__)

# Single-step offsets in generation order: NW, N, NE, W, E, SW, S, SE
STEP_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

# Piece types a Scarab may trade places with
SWAPPABLE_TYPES = frozenset({PieceType.PYRAMID, PieceType.ANUBIS})


class InvalidMoveError(ValueError):
    """A move does not fit the state it was applied to."""


class MoveType(Enum):
    """Kinds of action a player can take."""

    ROTATE = "rotate"  # Turn in place
    TRANSLATE = "translate"  # Step to an empty square
    SWAP = "swap"  # Scarab trades places with a Pyramid or Anubis


@dataclass(frozen=True)
class Move:
    """A single player action.

    A move describes an action; applying it is a separate step.

    Attributes:
        type: Kind of action
        from_pos: Square of the acting piece
        piece: The acting piece as it stood when the move was made
        to_pos: Destination square (translate and swap)
        facing: New facing (rotate)
        target: Piece displaced by a swap
    """

    type: MoveType
    from_pos: Position
    piece: Piece
    to_pos: Position | None = None
    facing: Facing | None = None
    target: Piece | None = None

    @classmethod
    def rotate(cls, from_pos: Position, piece: Piece, facing: Facing) -> "Move":
        return cls(MoveType.ROTATE, from_pos, piece, facing=facing)

    @classmethod
    def translate(cls, from_pos: Position, piece: Piece, to_pos: Position) -> "Move":
        return cls(MoveType.TRANSLATE, from_pos, piece, to_pos=to_pos)

    @classmethod
    def swap(cls, from_pos: Position, piece: Piece, to_pos: Position, target: Piece) -> "Move":
        return cls(MoveType.SWAP, from_pos, piece, to_pos=to_pos, target=target)

    @property
    def destination(self) -> Position:
        """Get the square the acting piece ends on."""
        return self.to_pos if self.to_pos is not None else self.from_pos

    def __str__(self) -> str:
        match self.type:
            case MoveType.ROTATE:
                return (
                    f"{self.piece.type} {self.from_pos} rotate {self.piece.facing}->{self.facing}"
                )
            case MoveType.SWAP:
                return f"{self.piece.type} {self.from_pos} swap {self.to_pos}"
            case _:
                return f"{self.piece.type} {self.from_pos} -> {self.to_pos}"


def is_reserved(pos: Position, player: Player) -> bool:
    """Check if a square is closed to a player's pieces."""
    return pos in RESERVED_SQUARES[player]


def generate_legal_moves(state: GameState, player: Player) -> list[Move]:
    """Get all legal moves for a player.

    Order is deterministic: squares in row-major order, then each piece's steps
    in STEP_OFFSETS order, then its rotations.
    """
    moves: list[Move] = []
    board = state.board

    for pos, piece in board.pieces_for_player(player):
        match piece.type:
            case PieceType.PHARAOH:
                moves.extend(_step_moves(board, pos, piece))
            case PieceType.SPHINX:
                moves.extend(_rotation_moves(board, pos, piece))
            case PieceType.PYRAMID | PieceType.ANUBIS:
                moves.extend(_step_moves(board, pos, piece))
                moves.extend(_rotation_moves(board, pos, piece))
            case PieceType.SCARAB:
                moves.extend(_step_moves(board, pos, piece, can_swap=True))
                moves.extend(_rotation_moves(board, pos, piece))

    return moves


def _step_moves(board: Board, pos: Position, piece: Piece, can_swap: bool = False) -> list[Move]:
    """Single-step translations, plus swaps for a Scarab.

    Swaps are not subject to the reserved-square rule.
    """
    moves: list[Move] = []
    row, col = pos

    for d_row, d_col in STEP_OFFSETS:
        to_pos = (row + d_row, col + d_col)
        if not board.is_valid_square(*to_pos):
            continue

        occupant = board.piece_at(to_pos)
        if occupant is None:
            if not is_reserved(to_pos, piece.player):
                moves.append(Move.translate(pos, piece, to_pos))
        elif can_swap and occupant.type in SWAPPABLE_TYPES:
            moves.append(Move.swap(pos, piece, to_pos, occupant))

    return moves


def rotation_facings(board: Board, pos: Position, piece: Piece) -> tuple[Facing, ...]:
    """Get the facings a piece may rotate to, excluding its current one."""
    match piece.type:
        case PieceType.PHARAOH:
            return ()
        case PieceType.SPHINX:
            options = board.sphinx_facings(pos)
        case PieceType.SCARAB:
            # Quarter turn either way; clockwise first
            options = (piece.facing.rotated(2), piece.facing.rotated(-2))
        case _:
            options = ALLOWED_FACINGS[piece.type]
    return tuple(facing for facing in options if facing != piece.facing)


def _rotation_moves(board: Board, pos: Position, piece: Piece) -> list[Move]:
    return [Move.rotate(pos, piece, facing) for facing in rotation_facings(board, pos, piece)]


def validate_move(state: GameState, move: Move) -> None:
    """Check that a move fits a state.

    Raises:
        InvalidMoveError: If the move references a stale or mismatched piece,
            an illegal destination, or an illegal facing
    """
    board = state.board

    if board.piece_at(move.from_pos) != move.piece:
        raise InvalidMoveError(f"No {move.piece.type} of {move.piece.player} at {move.from_pos}")

    if move.type == MoveType.ROTATE:
        if move.facing is None:
            raise InvalidMoveError("Rotation without a facing")
        if move.facing not in rotation_facings(board, move.from_pos, move.piece):
            raise InvalidMoveError(
                f"{move.piece.type} at {move.from_pos} cannot face {move.facing}"
            )
        return

    to_pos = move.to_pos
    if to_pos is None or not board.is_valid_square(*to_pos):
        raise InvalidMoveError(f"Destination {to_pos} is off the board")

    d_row = to_pos[0] - move.from_pos[0]
    d_col = to_pos[1] - move.from_pos[1]
    if (d_row, d_col) not in STEP_OFFSETS:
        raise InvalidMoveError(f"{to_pos} is not adjacent to {move.from_pos}")

    occupant = board.piece_at(to_pos)

    if move.type == MoveType.TRANSLATE:
        if move.piece.type == PieceType.SPHINX:
            raise InvalidMoveError("A Sphinx cannot move")
        if occupant is not None:
            raise InvalidMoveError(f"Destination {to_pos} is occupied")
        if is_reserved(to_pos, move.piece.player):
            raise InvalidMoveError(f"Destination {to_pos} is reserved for the other player")
        return

    if move.piece.type != PieceType.SCARAB:
        raise InvalidMoveError(f"A {move.piece.type} cannot swap")
    if occupant is None or occupant.type not in SWAPPABLE_TYPES:
        raise InvalidMoveError(f"Nothing to swap with at {to_pos}")
    if move.target is not None and occupant != move.target:
        raise InvalidMoveError(f"Swap target at {to_pos} has changed")


def apply_move(state: GameState, move: Move) -> GameState:
    """Apply a move and return the new state.

    Does not fire the laser or switch players. The given state is unchanged.

    Raises:
        InvalidMoveError: If the move does not fit the state
    """
    validate_move(state, move)

    new_state = state.copy()
    board = new_state.board

    match move.type:
        case MoveType.ROTATE:
            board.place(move.from_pos, move.piece.with_facing(move.facing))
        case MoveType.TRANSLATE:
            board.remove(move.from_pos)
            board.place(move.to_pos, move.piece)
        case MoveType.SWAP:
            displaced = board.remove(move.to_pos)
            board.place(move.to_pos, move.piece)
            board.place(move.from_pos, displaced)

    logger.debug(f"Applied move: {move}")
    return new_state
