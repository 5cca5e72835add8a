"""Laser tracing and resolution for Khet.

At the end of each turn the active player's Sphinx fires. The beam moves one
square per step and interacts with the first piece it enters:

- Sphinx: absorbs the beam
- Pharaoh: destroyed from any side
- Scarab: always reflects
- Pyramid: reflects off its two mirrored sides, destroyed from the others
- Anubis: absorbs on its shielded (facing) side, destroyed from the others

Interactions are decided by the side the beam enters from, which is the
opposite of its travel direction.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from khet.game.board import Position
from khet.game.pieces import Facing, Piece, PieceType, Player
from khet.game.state import GameState

logger = logging.getLogger(__name__)

# Upper bound on beam steps. Far above the longest reflected path on an 8x10
# board, so only a reflection cycle can reach it.
MAX_LASER_STEPS = 100

# Reflection tables: side the beam enters from -> new travel direction
SLASH_REFLECTION: dict[Facing, Facing] = {
    Facing.N: Facing.E,
    Facing.E: Facing.N,
    Facing.S: Facing.W,
    Facing.W: Facing.S,
}

BACKSLASH_REFLECTION: dict[Facing, Facing] = {
    Facing.N: Facing.W,
    Facing.W: Facing.N,
    Facing.S: Facing.E,
    Facing.E: Facing.S,
}

SCARAB_REFLECTION: dict[Facing, dict[Facing, Facing]] = {
    Facing.NE: SLASH_REFLECTION,
    Facing.SE: SLASH_REFLECTION,
    Facing.NW: BACKSLASH_REFLECTION,
    Facing.SW: BACKSLASH_REFLECTION,
}

# A Pyramid reflects out through its other mirrored side
PYRAMID_REFLECTION: dict[Facing, dict[Facing, Facing]] = {
    Facing.NE: SLASH_REFLECTION,
    Facing.SW: SLASH_REFLECTION,
    Facing.NW: BACKSLASH_REFLECTION,
    Facing.SE: BACKSLASH_REFLECTION,
}

# Direction a Sphinx fires for each facing
TRAVEL_DIRECTIONS: dict[Facing, Facing] = {
    Facing.N: Facing.N,
    Facing.NE: Facing.E,
    Facing.E: Facing.E,
    Facing.SE: Facing.E,
    Facing.S: Facing.S,
    Facing.SW: Facing.W,
    Facing.W: Facing.W,
    Facing.NW: Facing.W,
}


def to_travel_direction(facing: Facing) -> Facing:
    """Get the cardinal direction a beam travels for an emitter facing."""
    return TRAVEL_DIRECTIONS[facing]


class LaserOutcome(Enum):
    """How a laser trace ended."""

    EXITED = "exited"  # Beam left the board
    ABSORBED = "absorbed"  # Beam stopped by a Sphinx or a shielded Anubis
    DESTROYED = "destroyed"  # Beam destroyed a piece
    NO_EMITTER = "no_emitter"  # Firing player has no Sphinx
    STEP_LIMIT = "step_limit"  # MAX_LASER_STEPS reached


class HitEffect(Enum):
    """Effect of the beam entering an occupied square."""

    REFLECT = "reflect"
    ABSORB = "absorb"
    DESTROY = "destroy"


@dataclass(frozen=True)
class Hit:
    """Interaction between the beam and a piece.

    Attributes:
        effect: What happens to the beam
        direction: New travel direction when reflected
    """

    effect: HitEffect
    direction: Facing | None = None


@dataclass(frozen=True)
class LaserSegment:
    """One step of the beam.

    Attributes:
        start: Square the step starts from
        end: Square the step enters, or None if it leaves the board
        direction: Travel direction during the step
    """

    start: Position
    end: Position | None
    direction: Facing

    @property
    def off_board(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class LaserResult:
    """Result of firing a laser.

    Attributes:
        player: Player who fired
        outcome: How the trace ended
        segments: Steps taken, in order
        hit_position: Square of the absorbing or destroyed piece
        hit_piece: The absorbing or destroyed piece
    """

    player: Player
    outcome: LaserOutcome
    segments: tuple[LaserSegment, ...] = field(default_factory=tuple)
    hit_position: Position | None = None
    hit_piece: Piece | None = None

    @property
    def path(self) -> list[Position]:
        """Squares the beam entered, in order."""
        return [segment.end for segment in self.segments if segment.end is not None]

    @property
    def destroyed_position(self) -> Position | None:
        return self.hit_position if self.outcome == LaserOutcome.DESTROYED else None

    @property
    def destroyed_piece(self) -> Piece | None:
        return self.hit_piece if self.outcome == LaserOutcome.DESTROYED else None

    @property
    def winner(self) -> Player | None:
        """Get the winner if this laser destroyed a Pharaoh.

        The firing player's opponent wins, even if the Pharaoh was the shooter's own.
        """
        piece = self.destroyed_piece
        if piece is not None and piece.type == PieceType.PHARAOH:
            return self.player.opponent
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the laser result to a dictionary."""
        return {
            "player": self.player.value,
            "outcome": self.outcome.value,
            "segments": [
                {
                    "start": segment.start,
                    "end": segment.end,
                    "direction": segment.direction.name,
                }
                for segment in self.segments
            ],
            "hit_position": self.hit_position,
            "hit_piece": (
                {
                    "type": self.hit_piece.type.value,
                    "player": self.hit_piece.player.value,
                    "facing": self.hit_piece.facing.name,
                }
                if self.hit_piece is not None
                else None
            ),
        }


def _sphinx_hit(piece: Piece, entry: Facing) -> Hit:
    return Hit(HitEffect.ABSORB)


def _pharaoh_hit(piece: Piece, entry: Facing) -> Hit:
    return Hit(HitEffect.DESTROY)


def _scarab_hit(piece: Piece, entry: Facing) -> Hit:
    return Hit(HitEffect.REFLECT, SCARAB_REFLECTION[piece.facing][entry])


def _pyramid_hit(piece: Piece, entry: Facing) -> Hit:
    if entry in piece.facing.components:
        return Hit(HitEffect.REFLECT, PYRAMID_REFLECTION[piece.facing][entry])
    return Hit(HitEffect.DESTROY)


def _anubis_hit(piece: Piece, entry: Facing) -> Hit:
    if entry == piece.facing:
        return Hit(HitEffect.ABSORB)
    return Hit(HitEffect.DESTROY)


HIT_RULES: dict[PieceType, Callable[[Piece, Facing], Hit]] = {
    PieceType.SPHINX: _sphinx_hit,
    PieceType.PHARAOH: _pharaoh_hit,
    PieceType.SCARAB: _scarab_hit,
    PieceType.PYRAMID: _pyramid_hit,
    PieceType.ANUBIS: _anubis_hit,
}


def resolve_hit(piece: Piece, direction: Facing) -> Hit:
    """Resolve a beam travelling in ``direction`` entering a piece's square."""
    return HIT_RULES[piece.type](piece, direction.opposite)


def trace_laser(state: GameState, player: Player) -> LaserResult:
    """Trace a player's laser without changing the state.

    Args:
        state: Current game state
        player: Player whose Sphinx fires

    Returns:
        LaserResult with every step taken and how the trace ended
    """
    sphinx = state.find_sphinx(player)
    if sphinx is None:
        logger.debug(f"{player} has no Sphinx, laser not fired")
        return LaserResult(player=player, outcome=LaserOutcome.NO_EMITTER)

    board = state.board
    current, emitter = sphinx
    direction = to_travel_direction(emitter.facing)
    segments: list[LaserSegment] = []

    for _ in range(MAX_LASER_STEPS):
        d_row, d_col = direction.vector
        nxt = (current[0] + d_row, current[1] + d_col)

        if not board.is_valid_square(*nxt):
            segments.append(LaserSegment(current, None, direction))
            return LaserResult(player, LaserOutcome.EXITED, tuple(segments))

        segments.append(LaserSegment(current, nxt, direction))
        current = nxt

        piece = board.piece_at(current)
        if piece is None:
            continue

        hit = resolve_hit(piece, direction)
        match hit.effect:
            case HitEffect.REFLECT:
                direction = hit.direction
            case HitEffect.ABSORB:
                return LaserResult(player, LaserOutcome.ABSORBED, tuple(segments), current, piece)
            case HitEffect.DESTROY:
                return LaserResult(player, LaserOutcome.DESTROYED, tuple(segments), current, piece)

    logger.warning(f"Laser for {player} stopped after {MAX_LASER_STEPS} steps")
    return LaserResult(player, LaserOutcome.STEP_LIMIT, tuple(segments))


def resolve_laser(state: GameState, player: Player) -> tuple[GameState, LaserResult]:
    """Fire a player's laser and apply its result.

    Removes a destroyed piece. If it was a Pharaoh the game ends and the
    firing player's opponent wins. The given state is unchanged.

    Returns:
        Tuple of (new state, laser result)
    """
    result = trace_laser(state, player)
    new_state = state.copy()

    if result.outcome == LaserOutcome.DESTROYED and result.hit_position is not None:
        new_state.board.remove(result.hit_position)
        logger.info(
            f"{player} laser destroyed {result.hit_piece.player} "
            f"{result.hit_piece.type} at {result.hit_position}"
        )

    winner = result.winner
    if winner is not None:
        new_state.game_over = True
        new_state.winner = winner
        logger.info(f"Pharaoh destroyed, {winner} wins")

    return new_state, result
