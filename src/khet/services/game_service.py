"""Game service for managing active games.

This service owns the current state of each game, rejects actions on
finished games, seats AI opponents and applies the no-legal-moves policy.
Games are stored in-memory only.
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime

from khet.ai.base import AIOptions, AIPlayer
from khet.ai.dummy import DummyAI
from khet.ai.greedy import GreedyAI
from khet.game.board import BoardPreset
from khet.game.engine import GameEngine, TurnResult
from khet.game.moves import InvalidMoveError, Move
from khet.game.pieces import Player
from khet.game.state import GameState
from khet.settings import NoMovesPolicy, Settings, get_settings

logger = logging.getLogger(__name__)

# Opponent names accepted by create_game, mapped to AI factories
AI_OPPONENTS = {
    "random": DummyAI,
    "easy": GreedyAI,
}


@dataclass
class MoveResult:
    """Result of attempting to make a move."""

    success: bool
    error: str | None = None
    message: str | None = None
    turn: TurnResult | None = None


@dataclass
class ManagedGame:
    """A game being managed by the service.

    Attributes:
        state: The current game state, replaced wholesale after every action
        ai_players: Map of player to AI instance
        history: Completed turns, oldest first
        created_at: When the game was created
        last_activity: When the game was last accessed
    """

    state: GameState
    ai_players: dict[Player, AIPlayer] = field(default_factory=dict)
    history: list[TurnResult] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)


def _generate_game_id() -> str:
    """Generate a unique game ID."""
    return secrets.token_urlsafe(6).upper()[:8]


def create_ai(opponent: str) -> AIPlayer:
    """Create an AI instance from an opponent name (e.g., "bot:easy").

    Raises:
        ValueError: If the name does not match a known AI
    """
    bot_name = opponent.removeprefix("bot:")
    factory = AI_OPPONENTS.get(bot_name)
    if factory is None:
        raise ValueError(f"Unknown AI opponent: {opponent}")
    return factory()


class GameService:
    """Manages active games and their state.

    This service is responsible for:
    - Creating new games
    - Processing moves from humans and AI players
    - Enforcing turn order and finished games
    - Handling players with no legal moves
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the game service."""
        self.settings = settings or get_settings()
        self.games: dict[str, ManagedGame] = {}

    def create_game(
        self,
        preset: BoardPreset | str | None = None,
        starting_player: Player | None = None,
        opponent: str | None = None,
    ) -> tuple[str, Player]:
        """Create a new game.

        The human always plays the starting player. With an AI opponent, the
        AI takes the other side.

        Args:
            preset: Board preset (defaults to settings)
            starting_player: Player who moves first (defaults to settings)
            opponent: None or "human" for two humans, otherwise an AI name
                such as "bot:easy" or "bot:random"

        Returns:
            Tuple of (game_id, human_player)
        """
        preset = preset or self.settings.default_preset
        starting_player = starting_player or self.settings.starting_player

        ai_players: dict[Player, AIPlayer] = {}
        if opponent is not None and opponent != "human":
            ai_players[starting_player.opponent] = create_ai(opponent)

        game_id = _generate_game_id()
        # Ensure unique game ID
        while game_id in self.games:
            game_id = _generate_game_id()

        state = GameEngine.create_game(preset=preset, starting_player=starting_player)
        self.games[game_id] = ManagedGame(state=state, ai_players=ai_players)

        logger.info(f"Created game {game_id} (opponent={opponent or 'human'})")
        return game_id, starting_player

    def get_game(self, game_id: str) -> GameState | None:
        """Get the current game state, or None if not found."""
        managed_game = self.get_managed_game(game_id)
        return managed_game.state if managed_game is not None else None

    def get_managed_game(self, game_id: str) -> ManagedGame | None:
        """Get the managed game object, or None if not found."""
        managed_game = self.games.get(game_id)
        if managed_game is not None:
            managed_game.last_activity = datetime.now()
        return managed_game

    def remove_game(self, game_id: str) -> bool:
        """Remove a game. Returns True if it existed."""
        return self.games.pop(game_id, None) is not None

    def make_move(self, game_id: str, player: Player, move: Move) -> MoveResult:
        """Attempt to play a turn.

        Args:
            game_id: The game ID
            player: Player making the move
            move: Move to play (normally one from GameEngine.get_legal_moves)

        Returns:
            MoveResult indicating success or failure
        """
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return MoveResult(success=False, error="game_not_found", message="Game not found")

        state = managed_game.state
        if state.game_over:
            return MoveResult(success=False, error="game_over", message="Game is already over")

        if player != state.current_player:
            return MoveResult(success=False, error="not_your_turn", message="Not your turn")

        legal_moves = GameEngine.get_legal_moves(state)
        if not legal_moves:
            return self.check_no_moves(game_id)

        if move not in legal_moves:
            logger.warning(f"Rejected move in game {game_id}: {move}")
            return MoveResult(success=False, error="invalid_move", message="Invalid move")

        try:
            turn = GameEngine.play_turn(state, move, validate=False)
        except InvalidMoveError as exc:
            logger.warning(f"Rejected move in game {game_id}: {exc}")
            return MoveResult(success=False, error="invalid_move", message=str(exc))

        managed_game.state = turn.state
        managed_game.history.append(turn)

        if turn.state.game_over:
            logger.info(f"Game {game_id} over, {turn.state.winner} wins")

        return MoveResult(success=True, turn=turn)

    def play_ai_turn(self, game_id: str) -> MoveResult:
        """Let the AI seated at the player to act choose and play a move."""
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return MoveResult(success=False, error="game_not_found", message="Game not found")

        state = managed_game.state
        if state.game_over:
            return MoveResult(success=False, error="game_over", message="Game is already over")

        ai = managed_game.ai_players.get(state.current_player)
        if ai is None:
            return MoveResult(success=False, error="not_ai_turn", message="No AI for this player")

        options = AIOptions(
            think_time_ms=self.settings.ai_think_time_ms,
            seed=self.settings.ai_seed,
        )
        move = ai.choose_move(state, state.current_player, options)
        if move is None:
            return self.check_no_moves(game_id)

        return self.make_move(game_id, state.current_player, move)

    def check_no_moves(self, game_id: str) -> MoveResult:
        """Apply the no-legal-moves policy if the player to act is stuck.

        Returns success when the player has a move, otherwise a
        "no_legal_moves" failure. Under the forfeit policy the game is ended
        in the opponent's favour before returning.
        """
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return MoveResult(success=False, error="game_not_found", message="Game not found")

        state = managed_game.state
        if state.game_over:
            return MoveResult(success=False, error="game_over", message="Game is already over")

        if GameEngine.get_legal_moves(state):
            return MoveResult(success=True)

        stuck = state.current_player
        if self.settings.no_moves_policy == NoMovesPolicy.FORFEIT:
            managed_game.state = GameEngine.end_game(state, stuck.opponent)
            logger.info(f"Game {game_id}: {stuck} has no legal moves and forfeits")
        else:
            logger.warning(f"Game {game_id}: {stuck} has no legal moves, game stalled")

        return MoveResult(
            success=False,
            error="no_legal_moves",
            message=f"{stuck} has no legal moves",
        )
