"""Position evaluation heuristics for Khet AI players.

Scores are from one player's point of view: higher is better for them.
"""

from khet.game.board import Position
from khet.game.laser import trace_laser
from khet.game.moves import generate_legal_moves
from khet.game.pieces import PieceType, Player
from khet.game.state import GameState

WIN_SCORE = 10000

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PHARAOH: 1000,
    PieceType.SPHINX: 100,
    PieceType.ANUBIS: 50,
    PieceType.SCARAB: 40,
    PieceType.PYRAMID: 30,
}

THREAT_WEIGHT = 200
PHARAOH_CENTER_WEIGHT = 10
MOBILITY_WEIGHT = 2
LASER_LENGTH_WEIGHT = 5
PHARAOH_IN_LINE_WEIGHT = 500

CENTER_ROW = 3.5
CENTER_COL = 4.5


def get_piece_value(piece_type: PieceType) -> int:
    return PIECE_VALUES.get(piece_type, 0)


def evaluate(state: GameState, player: Player) -> float:
    """Evaluate a position for a player.

    Finished games score +/-WIN_SCORE. Otherwise the score sums material,
    Pharaoh safety, mobility, laser pressure and piece placement.
    """
    if state.game_over:
        return WIN_SCORE if state.winner == player else -WIN_SCORE

    opponent = player.opponent
    my_path = trace_laser(state, player).path
    their_path = trace_laser(state, opponent).path

    score = 0.0
    score += _material(state, player)
    score += _pharaoh_safety(state, player, my_path, their_path)
    score += _mobility(state, player)
    score += _laser_pressure(state, player, my_path, their_path)
    score += _placement(state, player)
    return score


def _material(state: GameState, player: Player) -> float:
    mine = sum(get_piece_value(piece.type) for _, piece in state.pieces_of(player))
    theirs = sum(get_piece_value(piece.type) for _, piece in state.pieces_of(player.opponent))
    return mine - theirs


def _center_distance(pos: Position) -> float:
    return abs(pos[0] - CENTER_ROW) + abs(pos[1] - CENTER_COL)


def _pharaoh_safety(
    state: GameState, player: Player, my_path: list[Position], their_path: list[Position]
) -> float:
    mine = state.find_pharaoh(player)
    theirs = state.find_pharaoh(player.opponent)
    if mine is None or theirs is None:
        return 0.0

    my_pos, their_pos = mine[0], theirs[0]
    score = 0.0
    score -= their_path.count(my_pos) * THREAT_WEIGHT
    score += my_path.count(their_pos) * THREAT_WEIGHT
    # Central Pharaohs are harder to line up on
    score += (8 - _center_distance(my_pos)) * PHARAOH_CENTER_WEIGHT
    score -= (8 - _center_distance(their_pos)) * PHARAOH_CENTER_WEIGHT
    return score


def _mobility(state: GameState, player: Player) -> float:
    mine = len(generate_legal_moves(state, player))
    theirs = len(generate_legal_moves(state, player.opponent))
    return (mine - theirs) * MOBILITY_WEIGHT


def _laser_pressure(
    state: GameState, player: Player, my_path: list[Position], their_path: list[Position]
) -> float:
    score = (len(my_path) - len(their_path)) * LASER_LENGTH_WEIGHT

    theirs = state.find_pharaoh(player.opponent)
    if theirs is not None and theirs[0] in my_path:
        score += PHARAOH_IN_LINE_WEIGHT

    mine = state.find_pharaoh(player)
    if mine is not None and mine[0] in their_path:
        score -= PHARAOH_IN_LINE_WEIGHT

    return score


def _placement(state: GameState, player: Player) -> float:
    score = 0.0
    pharaoh = state.find_pharaoh(player)

    for pos, piece in state.pieces_of(player):
        row, col = pos
        score += (8 - _center_distance(pos)) * 2

        match piece.type:
            case PieceType.PYRAMID:
                # Pyramids guard their own half
                if player == Player.RED and row < 4:
                    score += 10
                if player == Player.SILVER and row > 3:
                    score += 10
            case PieceType.ANUBIS:
                if pharaoh is not None:
                    p_row, p_col = pharaoh[0]
                    distance = abs(row - p_row) + abs(col - p_col)
                    score += (8 - distance) * 5
            case PieceType.SCARAB:
                if 2 <= row <= 5 and 2 <= col <= 7:
                    score += 15

    return score
