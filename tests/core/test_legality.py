"""Tests for legal move filtering and castling."""

import pytest

from chesslogic.core.board import Board
from chesslogic.core.enums import Color, MoveFlag, PieceType
from chesslogic.core.legality import (
    all_legal_moves,
    available_moves,
    castling_moves,
    has_legal_move,
    legal_moves,
    rook_castling_squares,
    simulate_move,
)
from chesslogic.core.move import Move
from chesslogic.core.move_generator import pseudo_legal_moves
from chesslogic.core.piece import Piece
from chesslogic.core.types import (
    A1, A2, B5, B6, C1, C5, C6, C7, D1, D2, D8, E1, E2, E3, E4, E5, E6, E7, E8,
    F1, G1, H1, H2,
)


def _king_flags(board: Board) -> set[MoveFlag]:
    king = board[E1]
    assert king is not None
    return {m.flag for m in legal_moves(king, board) if m.is_castling}


class TestPins:
    def test_pinned_rook_stays_on_file(self) -> None:
        board = Board.from_placement("4r3/8/8/8/8/8/4R3/4K3")
        rook = board[E2]
        assert rook is not None
        assert available_moves(rook, board) == {E3, E4, E5, E6, E7, E8}

    def test_pinned_knight_cannot_move(self) -> None:
        board = Board.from_placement("4k3/8/8/b7/8/8/3N4/4K3")
        knight = board[D2]
        assert knight is not None
        assert available_moves(knight, board) == set()

    def test_king_avoids_attacked_rank(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/r7/4K3")
        king = board[E1]
        assert king is not None
        assert available_moves(king, board) == {D1, F1}

    def test_king_cannot_capture_defended_piece(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/3r4/3rK3")
        king = board[E1]
        assert king is not None
        # d1 is covered by the rook on d2
        assert D1 not in available_moves(king, board)
        assert D2 not in available_moves(king, board)


class TestCastling:
    def test_both_sides(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/8/R3K2R")
        assert _king_flags(board) == {MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE}
        king = board[E1]
        assert king is not None
        assert {G1, C1} <= available_moves(king, board)

    def test_knight_on_b1_blocks_queenside(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/8/RN2K2R")
        assert _king_flags(board) == {MoveFlag.CASTLE_KINGSIDE}

    def test_piece_between_blocks_kingside(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/8/R3KB1R")
        assert _king_flags(board) == {MoveFlag.CASTLE_QUEENSIDE}

    def test_attacked_transit_square(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/5r2/R3K2R")
        assert _king_flags(board) == {MoveFlag.CASTLE_QUEENSIDE}

    def test_not_out_of_check(self) -> None:
        board = Board.from_placement("4r2k/8/8/8/8/8/8/R3K2R")
        assert _king_flags(board) == set()

    def test_attacked_b_file_does_not_matter(self) -> None:
        board = Board.from_placement("1r2k3/8/8/8/8/8/8/R3K3")
        assert _king_flags(board) == {MoveFlag.CASTLE_QUEENSIDE}

    def test_king_off_home_square(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/4K3/R6R")
        king = board[E2]
        assert king is not None
        assert castling_moves(king, board) == []

    def test_needs_a_rook_in_the_corner(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/8/N3K2R")
        assert _king_flags(board) == {MoveFlag.CASTLE_KINGSIDE}

    def test_queenside_rook_parked_on_h1_cannot_castle(self) -> None:
        board = Board.from_pieces(
            [
                Piece(Color.WHITE, PieceType.KING, E1, 4),
                Piece(Color.WHITE, PieceType.ROOK, H1, 0),
                Piece(Color.BLACK, PieceType.KING, E8, 20),
            ]
        )
        assert _king_flags(board) == set()

    def test_rook_walked_to_other_corner(self, push) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/8/R3K3")
        board, _ = push(board, A1, A2)
        board, _ = push(board, E8, D8)
        board, _ = push(board, A2, H2)
        board, _ = push(board, D8, E8)
        board, _ = push(board, H2, H1)
        rook = board[H1]
        assert rook is not None and rook.piece_type == PieceType.ROOK
        assert _king_flags(board) == set()

    def test_stand_in_king_cannot_castle(self) -> None:
        board = Board.from_pieces(
            [
                Piece(Color.WHITE, PieceType.KING, E1, 40),
                Piece(Color.WHITE, PieceType.ROOK, H1, 7),
                Piece(Color.BLACK, PieceType.KING, E8, 20),
            ]
        )
        assert _king_flags(board) == set()

    def test_black_castles_on_eighth_rank(self) -> None:
        board = Board.from_placement("r3k2r/8/8/8/8/8/8/4K3")
        king = board[E8]
        assert king is not None
        flags = {m.flag for m in castling_moves(king, board)}
        assert flags == {MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE}

    def test_rook_squares(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/8/R3K2R")
        king = board[E1]
        assert king is not None
        by_flag = {m.flag: m for m in castling_moves(king, board)}
        assert rook_castling_squares(by_flag[MoveFlag.CASTLE_KINGSIDE]) == (H1, F1)
        assert rook_castling_squares(by_flag[MoveFlag.CASTLE_QUEENSIDE]) == (A1, D1)

    def test_rook_squares_rejects_ordinary_move(self, initial_board: Board) -> None:
        pawn = initial_board[E2]
        assert pawn is not None
        with pytest.raises(ValueError):
            rook_castling_squares(Move(pawn, E2, E4, flag=MoveFlag.DOUBLE_PAWN))


class TestEnPassantLegality:
    def test_horizontal_pin(self, push) -> None:
        board = Board.from_placement("4k3/2p5/8/KP5r/8/8/8/8")
        board, last = push(board, C7, C5)
        pawn = board[B5]
        assert pawn is not None
        assert available_moves(pawn, board, last) == {B6}

    def test_simulation_lifts_victim(self, push) -> None:
        board = Board.from_placement("4k3/2p5/8/KP5r/8/8/8/8")
        board, last = push(board, C7, C5)
        pawn = board[B5]
        assert pawn is not None
        ep = next(
            m
            for m in pseudo_legal_moves(pawn, board, last)
            if m.flag == MoveFlag.EN_PASSANT
        )
        after = simulate_move(board, ep)
        assert after[C5] is None
        assert after[C6] is not None


class TestWholeSide:
    def test_opening_count(self, initial_board: Board) -> None:
        assert len(all_legal_moves(initial_board, Color.WHITE)) == 20
        assert has_legal_move(initial_board, Color.BLACK)

    def test_missing_king_treated_as_safe(self) -> None:
        board = Board.from_placement("8/8/8/8/8/8/8/R7")
        rook = board[A1]
        assert rook is not None
        assert len(available_moves(rook, board)) == 14

    def test_no_moves_when_stalemated(self) -> None:
        board = Board.from_placement("7k/8/5KQ1/8/8/8/8/8")
        assert not has_legal_move(board, Color.BLACK)
        assert all_legal_moves(board, Color.BLACK) == []
