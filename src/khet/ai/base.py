"""Base class for AI implementations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from khet.game.moves import Move
from khet.game.pieces import Player
from khet.game.state import GameState


@dataclass
class AIOptions:
    """Per-call options for choosing a move.

    Attributes:
        think_time_ms: Soft time budget for the search, None for unlimited
        seed: Random seed for reproducible choices, None for a fresh one
    """

    think_time_ms: int | None = None
    seed: int | None = None


class AIPlayer(ABC):
    """Base class for AI implementations.

    AI players pick one of the engine's legal moves for their player.
    """

    @abstractmethod
    def choose_move(
        self, state: GameState, player: Player, options: AIOptions | None = None
    ) -> Move | None:
        """Return the move the AI wants to make.

        Args:
            state: Current game state
            player: Player the AI is playing as
            options: Time budget and seed

        Returns:
            A legal move, or None if the player has no legal move
        """
