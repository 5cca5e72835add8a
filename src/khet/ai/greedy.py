"""Greedy one-ply AI.

Plays every legal move forward through the laser, skips moves that hand the
opponent the game, and picks among the best few by evaluation.
"""

import logging
import random
import time

from khet.ai.base import AIOptions, AIPlayer
from khet.ai.evaluation import evaluate
from khet.game.engine import GameEngine
from khet.game.moves import Move
from khet.game.pieces import Player
from khet.game.state import GameState

logger = logging.getLogger(__name__)

# Number of best-scoring moves to choose from at random
TOP_CHOICES = 3


class GreedyAI(AIPlayer):
    """AI that maximizes the evaluation one turn ahead."""

    def __init__(self, top_choices: int = TOP_CHOICES):
        self.top_choices = top_choices

    def choose_move(
        self, state: GameState, player: Player, options: AIOptions | None = None
    ) -> Move | None:
        """Return one of the best moves by one-ply evaluation."""
        options = options or AIOptions()
        start = time.monotonic()
        deadline = (
            start + options.think_time_ms / 1000 if options.think_time_ms is not None else None
        )

        legal_moves = GameEngine.get_legal_moves(state, player)
        if not legal_moves:
            return None

        outcomes: list[tuple[Move, GameState]] = []
        for move in legal_moves:
            after_move = GameEngine.apply_move(state, move)
            after_laser, _ = GameEngine.resolve_laser(after_move, player)
            outcomes.append((move, after_laser))

        # Drop moves whose own laser gives the opponent the game
        safe = [(m, s) for m, s in outcomes if s.winner is None or s.winner == player]
        candidates = safe or outcomes

        scored: list[tuple[Move, float]] = []
        for move, after_laser in candidates:
            if deadline is not None and scored and time.monotonic() >= deadline:
                logger.debug(f"Think time exhausted after {len(scored)} moves")
                break
            final = after_laser if after_laser.game_over else GameEngine.switch_player(after_laser)
            scored.append((move, evaluate(final, player)))

        scored.sort(key=lambda item: item[1], reverse=True)
        top = scored[: self.top_choices]
        move, score = random.Random(options.seed).choice(top)

        logger.debug(
            f"{player} chose {move} (score={score}, considered={len(scored)}, "
            f"elapsed={time.monotonic() - start:.3f}s)"
        )
        return move
