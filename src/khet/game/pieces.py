"""Piece definitions for Khet."""

from dataclasses import dataclass, replace
from enum import Enum


class Player(Enum):
    """The two sides of a Khet game."""

    SILVER = "silver"
    RED = "red"

    @property
    def opponent(self) -> "Player":
        """Get the other player."""
        return Player.RED if self is Player.SILVER else Player.SILVER

    def __str__(self) -> str:
        return self.value


class PieceType(Enum):
    """Khet piece types."""

    PHARAOH = "pharaoh"
    SPHINX = "sphinx"
    PYRAMID = "pyramid"
    ANUBIS = "anubis"
    SCARAB = "scarab"

    def __str__(self) -> str:
        return self.value


class Facing(Enum):
    """Compass facings, clockwise from north.

    The value is the facing's index on the compass ring; each step is 45 degrees.
    """

    N = 0
    NE = 1
    E = 2
    SE = 3
    S = 4
    SW = 5
    W = 6
    NW = 7

    @property
    def vector(self) -> tuple[int, int]:
        """Get the (row_delta, col_delta) of one step in this direction."""
        return _VECTORS[self]

    @property
    def is_cardinal(self) -> bool:
        return self.value % 2 == 0

    @property
    def is_diagonal(self) -> bool:
        return self.value % 2 == 1

    @property
    def opposite(self) -> "Facing":
        return self.rotated(4)

    @property
    def components(self) -> tuple["Facing", ...]:
        """Get the cardinal sides this facing names.

        A diagonal facing names two sides (NE -> N, E); a cardinal one names itself.
        """
        if self.is_cardinal:
            return (self,)
        return _COMPONENTS[self]

    def rotated(self, steps: int) -> "Facing":
        """Rotate clockwise by ``steps`` eighth-turns (negative is counterclockwise)."""
        return Facing((self.value + steps) % 8)

    def __str__(self) -> str:
        return self.name


_VECTORS: dict[Facing, tuple[int, int]] = {
    Facing.N: (-1, 0),
    Facing.NE: (-1, 1),
    Facing.E: (0, 1),
    Facing.SE: (1, 1),
    Facing.S: (1, 0),
    Facing.SW: (1, -1),
    Facing.W: (0, -1),
    Facing.NW: (-1, -1),
}

_COMPONENTS: dict[Facing, tuple[Facing, Facing]] = {
    Facing.NE: (Facing.N, Facing.E),
    Facing.SE: (Facing.S, Facing.E),
    Facing.SW: (Facing.S, Facing.W),
    Facing.NW: (Facing.N, Facing.W),
}

CARDINAL_FACINGS: tuple[Facing, ...] = (Facing.N, Facing.E, Facing.S, Facing.W)
DIAGONAL_FACINGS: tuple[Facing, ...] = (Facing.NE, Facing.SE, Facing.SW, Facing.NW)

# Facings each piece type may hold. Pharaoh facing is carried but never used.
ALLOWED_FACINGS: dict[PieceType, tuple[Facing, ...]] = {
    PieceType.PHARAOH: tuple(Facing),
    PieceType.SPHINX: CARDINAL_FACINGS,
    PieceType.PYRAMID: DIAGONAL_FACINGS,
    PieceType.ANUBIS: CARDINAL_FACINGS,
    PieceType.SCARAB: DIAGONAL_FACINGS,
}


@dataclass(frozen=True)
class Piece:
    """A Khet piece.

    Pieces are immutable values; rotating a piece produces a new one.

    Attributes:
        type: The piece type
        player: Owning player
        facing: Orientation, restricted to the type's allowed facings
    """

    type: PieceType
    player: Player
    facing: Facing

    def __post_init__(self) -> None:
        if self.facing not in ALLOWED_FACINGS[self.type]:
            raise ValueError(f"{self.type} cannot face {self.facing}")

    def with_facing(self, facing: Facing) -> "Piece":
        """Get a copy of this piece with a new facing."""
        return replace(self, facing=facing)

    @property
    def symbol(self) -> str:
        """Short display symbol: uppercase for Silver, lowercase for Red."""
        letter = _SYMBOLS[self.type]
        return letter if self.player is Player.SILVER else letter.lower()


_SYMBOLS: dict[PieceType, str] = {
    PieceType.PHARAOH: "P",
    PieceType.SPHINX: "X",
    PieceType.PYRAMID: "Y",
    PieceType.ANUBIS: "A",
    PieceType.SCARAB: "S",
}
