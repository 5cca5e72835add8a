"""Self-play entry point: two AI players play one game of Khet."""

import logging
import sys

from khet.game.pieces import Player
from khet.game.state import GameState
from khet.services.game_service import GameService, create_ai
from khet.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application."""
    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("khet").setLevel(level)


def run_self_play(
    settings: Settings | None = None,
    silver: str = "bot:easy",
    red: str = "bot:random",
    max_turns: int | None = None,
) -> GameState:
    """Play one AI-vs-AI game and return the final state.

    Stops early after ``max_turns`` turns or when the player to act has no
    legal move under the stall policy.
    """
    settings = settings or get_settings()
    max_turns = max_turns if max_turns is not None else settings.self_play_max_turns

    service = GameService(settings)
    game_id, _ = service.create_game(opponent=None)
    managed_game = service.get_managed_game(game_id)
    managed_game.ai_players = {Player.SILVER: create_ai(silver), Player.RED: create_ai(red)}

    for _ in range(max_turns):
        result = service.play_ai_turn(game_id)
        if not result.success:
            logger.info(f"Self-play stopped: {result.message}")
            break

        turn = result.turn
        logger.info(
            f"Turn {turn.state.turn}: {turn.move.piece.player} {turn.move}, "
            f"laser {turn.laser.outcome.value}"
        )
        if turn.state.game_over:
            break

    state = service.get_game(game_id)
    logger.debug(f"Final board:\n{state.board.render()}")
    if state.game_over:
        logger.info(f"{state.winner} wins after {state.turn} turns")
    else:
        logger.info(f"No winner after {state.turn} turns")
    return state


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    run_self_play(settings)


if __name__ == "__main__":
    main()
