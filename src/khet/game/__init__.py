"""Game engine module for Khet."""

from khet.game.pieces import (
    ALLOWED_FACINGS,
    CARDINAL_FACINGS,
    DIAGONAL_FACINGS,
    Facing,
    Piece,
    PieceType,
    Player,
)
from khet.game.board import (
    BOARD_COLS,
    BOARD_ROWS,
    CLASSIC_SETUP,
    RESERVED_SQUARES,
    Board,
    BoardPreset,
    Position,
)
from khet.game.state import GameState, GameStatus
from khet.game.moves import (
    InvalidMoveError,
    Move,
    MoveType,
    apply_move,
    generate_legal_moves,
    is_reserved,
)
from khet.game.laser import (
    MAX_LASER_STEPS,
    LaserOutcome,
    LaserResult,
    LaserSegment,
    resolve_laser,
    to_travel_direction,
    trace_laser,
)
from khet.game.engine import GameEngine, GameEvent, GameEventType, GameOverError, TurnResult

__all__ = [
    # Pieces
    "Facing",
    "Piece",
    "PieceType",
    "Player",
    "ALLOWED_FACINGS",
    "CARDINAL_FACINGS",
    "DIAGONAL_FACINGS",
    # Board
    "Board",
    "BoardPreset",
    "Position",
    "BOARD_ROWS",
    "BOARD_COLS",
    "CLASSIC_SETUP",
    "RESERVED_SQUARES",
    # State
    "GameState",
    "GameStatus",
    # Moves
    "Move",
    "MoveType",
    "InvalidMoveError",
    "generate_legal_moves",
    "apply_move",
    "is_reserved",
    # Laser
    "LaserOutcome",
    "LaserResult",
    "LaserSegment",
    "MAX_LASER_STEPS",
    "trace_laser",
    "resolve_laser",
    "to_travel_direction",
    # Engine
    "GameEngine",
    "GameEvent",
    "GameEventType",
    "GameOverError",
    "TurnResult",
]
