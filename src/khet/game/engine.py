"""Core game engine for Khet.

A turn is one transaction: apply the chosen move, fire the active player's
laser, then pass the turn unless a Pharaoh was destroyed. Every method
returns a new state and leaves its input untouched, so callers can keep
earlier states for lookahead or undo.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from khet.game import laser, moves
from khet.game.board import Board, BoardPreset
from khet.game.laser import LaserOutcome, LaserResult
from khet.game.moves import InvalidMoveError, Move, MoveType
from khet.game.pieces import Player
from khet.game.state import GameState

logger = logging.getLogger(__name__)


class GameOverError(RuntimeError):
    """An action was attempted on a finished game."""


class GameEventType(Enum):
    """Types of events that occur during a turn."""

    PIECE_MOVED = "piece_moved"
    PIECE_ROTATED = "piece_rotated"
    PIECES_SWAPPED = "pieces_swapped"
    LASER_FIRED = "laser_fired"
    PIECE_DESTROYED = "piece_destroyed"
    GAME_OVER = "game_over"


@dataclass
class GameEvent:
    """An event that occurred during a turn.

    Attributes:
        type: Type of event
        turn: Turn number the event belongs to
        data: Event-specific data
    """

    type: GameEventType
    turn: int
    data: dict


@dataclass
class TurnResult:
    """Outcome of one complete turn.

    Attributes:
        state: State after the move, the laser and the player switch
        move: The move that was played
        laser: Result of the active player's laser
        events: Events generated during the turn, in order
    """

    state: GameState
    move: Move
    laser: LaserResult
    events: list[GameEvent] = field(default_factory=list)


_MOVE_EVENTS: dict[MoveType, GameEventType] = {
    MoveType.TRANSLATE: GameEventType.PIECE_MOVED,
    MoveType.ROTATE: GameEventType.PIECE_ROTATED,
    MoveType.SWAP: GameEventType.PIECES_SWAPPED,
}


class GameEngine:
    """Core game logic for Khet.

    All methods are static and pure: they return new states.
    """

    @staticmethod
    def create_game(
        preset: BoardPreset | str = BoardPreset.CLASSIC,
        starting_player: Player = Player.SILVER,
    ) -> GameState:
        """Create a new game with a preset board.

        Args:
            preset: Starting layout. Unknown names give an empty board, which
                callers should treat as a misconfiguration.
            starting_player: Player who moves first

        Returns:
            New GameState instance
        """
        state = GameState(board=Board.create(preset), current_player=starting_player)
        logger.info(f"Created game (preset={preset}, starting_player={starting_player})")
        return state

    @staticmethod
    def create_game_from_board(board: Board, starting_player: Player = Player.SILVER) -> GameState:
        """Create a game with a custom board (for puzzles/tests)."""
        return GameState(board=board.copy(), current_player=starting_player)

    @staticmethod
    def get_legal_moves(state: GameState, player: Player | None = None) -> list[Move]:
        """Get all legal moves for a player (defaults to the player to act).

        A finished game has no legal moves.
        """
        if state.game_over:
            return []
        return moves.generate_legal_moves(state, player or state.current_player)

    @staticmethod
    def is_legal_move(state: GameState, move: Move) -> bool:
        """Check if a move is legal for the player to act."""
        if move.piece.player != state.current_player:
            return False
        return move in GameEngine.get_legal_moves(state)

    @staticmethod
    def apply_move(state: GameState, move: Move) -> GameState:
        """Apply a move without firing the laser or passing the turn."""
        return moves.apply_move(state, move)

    @staticmethod
    def trace_laser(state: GameState, player: Player) -> LaserResult:
        return laser.trace_laser(state, player)

    @staticmethod
    def resolve_laser(state: GameState, player: Player) -> tuple[GameState, LaserResult]:
        return laser.resolve_laser(state, player)

    @staticmethod
    def switch_player(state: GameState) -> GameState:
        """Get a copy of the state with the other player to act."""
        new_state = state.copy()
        new_state.current_player = state.current_player.opponent
        return new_state

    @staticmethod
    def end_game(state: GameState, winner: Player) -> GameState:
        """Get a finished copy of the state with the given winner."""
        new_state = state.copy()
        new_state.game_over = True
        new_state.winner = winner
        logger.info(f"Game ended, {winner} wins")
        return new_state

    @staticmethod
    def play_turn(state: GameState, move: Move, *, validate: bool = True) -> TurnResult:
        """Play one full turn for the player to act.

        This processes:
        1. Move application
        2. Laser firing and resolution
        3. Win detection
        4. Passing the turn (only if the game continues)

        Args:
            state: Current game state (not modified)
            move: Move to play
            validate: If True, reject moves that are not in get_legal_moves()

        Returns:
            TurnResult with the new state, laser result and events

        Raises:
            GameOverError: If the game is already finished
            InvalidMoveError: If the move is not legal in this state
        """
        if state.game_over:
            raise GameOverError("Game is already over")

        player = state.current_player
        if validate and not GameEngine.is_legal_move(state, move):
            raise InvalidMoveError(f"Illegal move for {player}: {move}")

        turn = state.turn + 1
        events: list[GameEvent] = []

        after_move = moves.apply_move(state, move)
        events.append(
            GameEvent(
                type=_MOVE_EVENTS[move.type],
                turn=turn,
                data={
                    "player": player.value,
                    "from": move.from_pos,
                    "to": move.destination,
                    "facing": move.facing.name if move.facing else None,
                },
            )
        )

        after_laser, result = laser.resolve_laser(after_move, player)
        events.append(
            GameEvent(
                type=GameEventType.LASER_FIRED,
                turn=turn,
                data={"player": player.value, "outcome": result.outcome.value, "path": result.path},
            )
        )

        if result.outcome == LaserOutcome.DESTROYED:
            events.append(
                GameEvent(
                    type=GameEventType.PIECE_DESTROYED,
                    turn=turn,
                    data={
                        "position": result.hit_position,
                        "type": result.hit_piece.type.value,
                        "player": result.hit_piece.player.value,
                    },
                )
            )

        if after_laser.game_over:
            events.append(
                GameEvent(
                    type=GameEventType.GAME_OVER,
                    turn=turn,
                    data={"winner": after_laser.winner.value},
                )
            )
            new_state = after_laser
        else:
            new_state = GameEngine.switch_player(after_laser)

        new_state.turn = turn
        logger.debug(f"Turn {turn}: {player} played {move}, laser {result.outcome.value}")

        return TurnResult(state=new_state, move=move, laser=result, events=events)
