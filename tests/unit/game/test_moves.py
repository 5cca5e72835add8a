"""Tests for move generation and application."""

import pytest

from khet.ai.base import AIOptions
from khet.ai.dummy import DummyAI
from khet.game.board import RESERVED_SQUARES
from khet.game.engine import GameEngine
from khet.game.moves import (
    InvalidMoveError,
    Move,
    MoveType,
    apply_move,
    generate_legal_moves,
)
from khet.game.pieces import Facing, Piece, PieceType, Player

SILVER_SPHINX = Piece(PieceType.SPHINX, Player.SILVER, Facing.N)
SILVER_PHARAOH = Piece(PieceType.PHARAOH, Player.SILVER, Facing.N)
SILVER_SCARAB = Piece(PieceType.SCARAB, Player.SILVER, Facing.SE)
SILVER_PYRAMID = Piece(PieceType.PYRAMID, Player.SILVER, Facing.NW)


def moves_from(moves: list[Move], pos: tuple[int, int]) -> list[Move]:
    return [m for m in moves if m.from_pos == pos]


class TestGenerateLegalMoves:
    """Tests for legal move generation."""

    def test_only_own_pieces(self, classic_state):
        """Test moves are only generated for the given player's pieces."""
        for player in Player:
            moves = generate_legal_moves(classic_state, player)
            assert moves
            assert all(m.piece.player == player for m in moves)
            assert all(classic_state.piece_at(m.from_pos) == m.piece for m in moves)

    def test_sphinx_rotates_only(self, classic_state):
        """Test the Sphinx only rotates, to the other facing of its corner."""
        moves = moves_from(generate_legal_moves(classic_state, Player.SILVER), (7, 9))
        assert moves == [Move.rotate((7, 9), SILVER_SPHINX, Facing.W)]

        red = moves_from(generate_legal_moves(classic_state, Player.RED), (0, 0))
        assert len(red) == 1
        assert red[0].type == MoveType.ROTATE
        assert red[0].facing == Facing.E

    def test_pharaoh_steps_into_empty_squares(self, classic_state):
        """Test the Pharaoh steps to empty neighbours and never rotates."""
        moves = moves_from(generate_legal_moves(classic_state, Player.SILVER), (7, 5))
        assert moves == [
            Move.translate((7, 5), SILVER_PHARAOH, (6, 4)),
            Move.translate((7, 5), SILVER_PHARAOH, (6, 5)),
        ]

    def test_scarab_moves_in_order(self, classic_state):
        """Test Scarab swaps, steps and quarter-turn rotations in generation order."""
        moves = moves_from(generate_legal_moves(classic_state, Player.SILVER), (4, 4))
        assert moves == [
            Move.swap(
                (4, 4), SILVER_SCARAB, (3, 3), Piece(PieceType.PYRAMID, Player.SILVER, Facing.SW)
            ),
            Move.swap((4, 4), SILVER_SCARAB, (4, 3), SILVER_PYRAMID),
            Move.translate((4, 4), SILVER_SCARAB, (5, 3)),
            Move.translate((4, 4), SILVER_SCARAB, (5, 4)),
            Move.translate((4, 4), SILVER_SCARAB, (5, 5)),
            Move.rotate((4, 4), SILVER_SCARAB, Facing.SW),
            Move.rotate((4, 4), SILVER_SCARAB, Facing.NE),
        ]

    def test_scarab_does_not_swap_with_pharaoh_sphinx_or_scarab(self, make_state):
        """Test Scarabs only swap with Pyramids and Anubis."""
        state = make_state(
            {
                (3, 4): (PieceType.SCARAB, Player.SILVER, Facing.NE),
                (2, 4): (PieceType.PHARAOH, Player.RED, Facing.N),
                (3, 3): (PieceType.SCARAB, Player.RED, Facing.NW),
                (4, 4): (PieceType.SPHINX, Player.SILVER, Facing.N),
                (3, 5): (PieceType.ANUBIS, Player.RED, Facing.W),
            }
        )
        swaps = [m for m in generate_legal_moves(state, Player.SILVER) if m.type == MoveType.SWAP]
        assert [m.to_pos for m in swaps] == [(3, 5)]

    def test_pyramid_and_anubis_rotations(self, make_state):
        """Test Pyramids rotate to the other diagonals and Anubis to the other cardinals."""
        state = make_state(
            {
                (3, 3): (PieceType.PYRAMID, Player.RED, Facing.NE),
                (5, 5): (PieceType.ANUBIS, Player.RED, Facing.S),
            }
        )
        moves = generate_legal_moves(state, Player.RED)
        pyramid = [m.facing for m in moves_from(moves, (3, 3)) if m.type == MoveType.ROTATE]
        anubis = [m.facing for m in moves_from(moves, (5, 5)) if m.type == MoveType.ROTATE]

        assert pyramid == [Facing.SE, Facing.SW, Facing.NW]
        assert anubis == [Facing.N, Facing.E, Facing.W]

    def test_reserved_squares_block_translation(self, classic_state):
        """Test Red's Pyramid cannot step onto Silver's marked squares."""
        moves = generate_legal_moves(classic_state, Player.RED)

        near_corner = [m.to_pos for m in moves_from(moves, (1, 2)) if m.type == MoveType.TRANSLATE]
        assert (0, 1) not in near_corner
        assert near_corner == [(0, 2), (0, 3), (1, 1), (1, 3), (2, 1), (2, 2)]

        near_edge = [m.to_pos for m in moves_from(moves, (0, 9)) if m.type == MoveType.TRANSLATE]
        assert near_edge == [(0, 8), (1, 8)]

    def test_reserved_squares_do_not_block_swap(self, make_state):
        """Test a Scarab may swap onto its own reserved square but not step there."""
        state = make_state(
            {
                (2, 1): (PieceType.SCARAB, Player.SILVER, Facing.NE),
                (2, 0): (PieceType.PYRAMID, Player.RED, Facing.SE),
            }
        )
        moves = generate_legal_moves(state, Player.SILVER)
        targets = {(m.type, m.to_pos) for m in moves}

        assert (MoveType.SWAP, (2, 0)) in targets
        assert (MoveType.TRANSLATE, (1, 0)) not in targets
        assert (MoveType.TRANSLATE, (3, 0)) not in targets
        assert (MoveType.TRANSLATE, (1, 1)) in targets

    def test_deterministic(self, classic_state):
        """Test generation order is stable for the same state."""
        first = generate_legal_moves(classic_state, Player.SILVER)
        second = generate_legal_moves(classic_state.copy(), Player.SILVER)
        assert first == second

    def test_no_pieces_no_moves(self, make_state):
        """Test a player with no pieces has no moves."""
        state = make_state({(0, 5): (PieceType.PHARAOH, Player.RED, Facing.S)})
        assert generate_legal_moves(state, Player.SILVER) == []

    def test_legality_holds_during_play(self, classic_state):
        """Test generated moves never step onto reserved squares or move a Sphinx."""
        ai = DummyAI()
        state = classic_state

        for turn in range(40):
            if state.game_over:
                break
            for player in Player:
                for move in generate_legal_moves(state, player):
                    if move.type == MoveType.TRANSLATE:
                        assert move.to_pos not in RESERVED_SQUARES[player]
                        assert move.piece.type != PieceType.SPHINX
                    if move.type == MoveType.SWAP:
                        assert move.piece.type == PieceType.SCARAB
            move = ai.choose_move(state, state.current_player, AIOptions(seed=turn))
            state = GameEngine.play_turn(state, move).state


class TestApplyMove:
    """Tests for the move applier."""

    def test_translate(self, classic_state):
        """Test a translation moves the piece and empties the source."""
        move = Move.translate((7, 5), SILVER_PHARAOH, (6, 5))
        new_state = apply_move(classic_state, move)

        assert new_state.piece_at((6, 5)) == SILVER_PHARAOH
        assert new_state.piece_at((7, 5)) is None
        # Original untouched
        assert classic_state.piece_at((7, 5)) == SILVER_PHARAOH
        assert classic_state.piece_at((6, 5)) is None

    def test_rotate(self, classic_state):
        """Test a rotation changes only the facing."""
        move = Move.rotate((7, 9), SILVER_SPHINX, Facing.W)
        new_state = apply_move(classic_state, move)

        assert new_state.piece_at((7, 9)) == Piece(PieceType.SPHINX, Player.SILVER, Facing.W)
        assert classic_state.piece_at((7, 9)).facing == Facing.N
        assert len(new_state.board.cells) == len(classic_state.board.cells)

    def test_swap(self, classic_state):
        """Test a swap exchanges the Scarab and its target."""
        move = Move.swap((4, 4), SILVER_SCARAB, (4, 3), SILVER_PYRAMID)
        new_state = apply_move(classic_state, move)

        assert new_state.piece_at((4, 3)) == SILVER_SCARAB
        assert new_state.piece_at((4, 4)) == SILVER_PYRAMID

    def test_does_not_switch_player(self, classic_state):
        """Test applying a move leaves the turn and status alone."""
        new_state = apply_move(classic_state, Move.translate((7, 5), SILVER_PHARAOH, (6, 5)))
        assert new_state.current_player == Player.SILVER
        assert new_state.turn == 0
        assert new_state.game_over is False

    def test_every_generated_move_applies(self, classic_state):
        """Test each generated move lands the piece where it says."""
        for move in generate_legal_moves(classic_state, Player.SILVER):
            new_state = apply_move(classic_state, move)
            moved = new_state.piece_at(move.destination)

            if move.type == MoveType.ROTATE:
                assert moved == move.piece.with_facing(move.facing)
            else:
                assert moved == move.piece
            if move.type == MoveType.TRANSLATE:
                assert new_state.piece_at(move.from_pos) is None
            else:
                assert new_state.piece_at(move.from_pos) is not None

    def test_stale_piece_rejected(self, classic_state):
        """Test a move whose piece no longer matches the board is rejected."""
        stale = Move.translate((7, 5), SILVER_PHARAOH.with_facing(Facing.S), (6, 5))
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, stale)

        empty_source = Move.translate((5, 5), SILVER_PHARAOH, (5, 4))
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, empty_source)

    def test_occupied_destination_rejected(self, classic_state):
        """Test translating onto a piece is rejected."""
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, Move.translate((7, 5), SILVER_PHARAOH, (7, 4)))

    def test_non_adjacent_rejected(self, classic_state):
        """Test translations must be a single step."""
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, Move.translate((7, 5), SILVER_PHARAOH, (5, 5)))

    def test_off_board_rejected(self, classic_state):
        """Test destinations must be on the board."""
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, Move.translate((7, 5), SILVER_PHARAOH, (8, 5)))

    def test_reserved_destination_rejected(self, make_state):
        """Test translating onto a reserved square is rejected."""
        anubis = Piece(PieceType.ANUBIS, Player.SILVER, Facing.N)
        state = make_state({(7, 7): (anubis.type, anubis.player, anubis.facing)})
        with pytest.raises(InvalidMoveError):
            apply_move(state, Move.translate((7, 7), anubis, (7, 8)))

    def test_sphinx_translate_rejected(self, classic_state):
        """Test the Sphinx cannot move."""
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, Move.translate((7, 9), SILVER_SPHINX, (6, 9)))

    def test_non_scarab_swap_rejected(self, classic_state):
        """Test only Scarabs swap."""
        pyramid = Piece(PieceType.PYRAMID, Player.SILVER, Facing.SW)
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, Move.swap((3, 3), pyramid, (4, 3), SILVER_PYRAMID))

    def test_changed_swap_target_rejected(self, classic_state):
        """Test a swap whose target changed is rejected."""
        wrong_target = SILVER_PYRAMID.with_facing(Facing.SE)
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, Move.swap((4, 4), SILVER_SCARAB, (4, 3), wrong_target))

    def test_illegal_rotation_rejected(self, classic_state):
        """Test rotations outside the piece's options are rejected."""
        # Silver Sphinx cannot point off the board
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, Move.rotate((7, 9), SILVER_SPHINX, Facing.S))
        # Rotating to the current facing is not a move
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, Move.rotate((7, 9), SILVER_SPHINX, Facing.N))
        # Scarabs only turn a quarter
        with pytest.raises(InvalidMoveError):
            apply_move(classic_state, Move.rotate((4, 4), SILVER_SCARAB, Facing.NW))
