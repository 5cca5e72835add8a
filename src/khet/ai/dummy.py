"""Dummy AI that makes random legal moves.

This is used for testing gameplay mechanics with a simple opponent.
"""

import random

from khet.ai.base import AIOptions, AIPlayer
from khet.game.engine import GameEngine
from khet.game.moves import Move
from khet.game.pieces import Player
from khet.game.state import GameState


class DummyAI(AIPlayer):
    """AI that makes uniformly random legal moves."""

    def choose_move(
        self, state: GameState, player: Player, options: AIOptions | None = None
    ) -> Move | None:
        """Return a random legal move."""
        options = options or AIOptions()
        legal_moves = GameEngine.get_legal_moves(state, player)
        if not legal_moves:
            return None

        return random.Random(options.seed).choice(legal_moves)
