"""Tests for GameState transitions."""

from dataclasses import replace

import pytest

from chesslogic.core.board import Board
from chesslogic.core.enums import Color, DrawReason, GameResult, PieceType
from chesslogic.core.errors import InvalidMoveError
from chesslogic.core.move import Move
from chesslogic.core.types import (
    A1, A2, A3, A6, A7, A8, D5, D6, D7, D8, E2, E4, E5, E7, E8, F2, F3, F7, F8,
    G1, G2, G4, H4,
)
from chesslogic.game.state import GameState, next_status


def _fools_mate() -> GameState:
    state = GameState.new()
    for from_sq, to_sq in ((F2, F3), (E7, E5), (G2, G4), (D8, H4)):
        state = state.play_squares(from_sq, to_sq)
    return state


class TestNewState:
    def test_initial(self) -> None:
        state = GameState.new()
        assert state.turn == Color.WHITE
        assert state.status.halfmove_clock == 0
        assert state.status.position_history == ()
        assert state.ply_count == 0
        assert state.fullmove_number == 1
        assert len(state.legal_moves()) == 20

    def test_custom_board_and_turn(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/8/R3K3")
        state = GameState.new(board, turn=Color.BLACK)
        assert state.turn == Color.BLACK
        assert state.available_moves(E8) == {D8, F8, D7, E7, F7}

    def test_already_drawn_position(self) -> None:
        state = GameState.new(Board.from_placement("4k3/8/8/8/8/8/8/4K3"))
        assert state.is_over
        assert state.status.draw_reason == DrawReason.INSUFFICIENT_MATERIAL


class TestPlay:
    def test_turn_alternates(self) -> None:
        state = GameState.new().play_squares(E2, E4)
        assert state.turn == Color.BLACK
        assert state.ply_count == 1
        assert state.status.last_move is not None
        assert state.status.last_move.to_sq == E4
        assert len(state.status.position_history) == 1

    def test_original_state_untouched(self) -> None:
        start = GameState.new()
        start.play_squares(E2, E4)
        assert start.ply_count == 0
        assert start.board[E2] is not None

    def test_wrong_turn(self) -> None:
        with pytest.raises(InvalidMoveError):
            GameState.new().play_squares(E7, E5)

    def test_wrong_turn_via_play(self) -> None:
        state = GameState.new()
        black_pawn = state.board[E7]
        assert black_pawn is not None
        with pytest.raises(InvalidMoveError, match="turn"):
            state.play(Move(black_pawn, E7, E5))

    def test_illegal(self) -> None:
        with pytest.raises(InvalidMoveError):
            GameState.new().play_squares(E2, E5)

    def test_fools_mate(self) -> None:
        state = _fools_mate()
        assert state.status.in_checkmate
        assert state.status.winner == Color.BLACK
        assert state.status.result == GameResult.BLACK_WINS
        assert state.is_over
        assert state.legal_moves() == []

    def test_no_moves_after_game_over(self) -> None:
        with pytest.raises(InvalidMoveError, match="over"):
            _fools_mate().play_squares(A2, A3)

    def test_en_passant_uses_previous_move(self) -> None:
        state = GameState.new()
        for from_sq, to_sq in ((E2, E4), (A7, A6), (E4, E5), (D7, D5)):
            state = state.play_squares(from_sq, to_sq)
        assert D6 in state.available_moves(E5)
        state = state.play_squares(E5, D6)
        assert state.board[D5] is None


class TestHalfmoveClock:
    def test_piece_move_increments(self) -> None:
        state = GameState.new().play_squares(G1, F3)
        assert state.status.halfmove_clock == 1

    def test_pawn_move_resets(self) -> None:
        state = GameState.new().play_squares(G1, F3).play_squares(E7, E5)
        assert state.status.halfmove_clock == 0

    def test_capture_resets(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/r7/R3K3")
        state = GameState.new(board)
        state = replace(state, status=replace(state.status, halfmove_clock=10))
        state = state.play_squares(A1, A2)
        assert state.status.halfmove_clock == 0

    def test_fifty_move_draw(self) -> None:
        state = GameState.new(Board.from_placement("4k3/8/8/8/8/8/8/R3K3"))
        state = replace(state, status=replace(state.status, halfmove_clock=99))
        state = state.play_squares(A1, A2)
        assert state.status.halfmove_clock == 100
        assert state.status.in_draw
        assert state.status.draw_reason == DrawReason.FIFTY_MOVE


class TestRepetition:
    def test_threefold_on_ninth_ply(self) -> None:
        state = GameState.new(Board.from_placement("4k3/8/8/8/8/8/8/R3K3"))
        shuffle = [(A1, A2), (E8, D8), (A2, A1), (D8, E8)] * 2 + [(A1, A2)]
        for ply, (from_sq, to_sq) in enumerate(shuffle, start=1):
            assert not state.is_over, f"game ended early at ply {ply - 1}"
            state = state.play_squares(from_sq, to_sq)
        assert state.status.in_draw
        assert state.status.draw_reason == DrawReason.THREEFOLD_REPETITION
        assert state.status.repetitions(state.board.canonical_key()) == 3
        assert len(state.status.position_history) == 9


class TestTimeout:
    def test_timeout_ends_game(self) -> None:
        state = GameState.new().timeout(Color.WHITE)
        assert state.is_over
        assert state.status.timed_out == Color.WHITE
        assert state.status.winner == Color.BLACK
        assert state.status.message == "Time out! Black wins!"

    def test_timeout_after_game_over_is_ignored(self) -> None:
        state = _fools_mate()
        assert state.timeout(Color.BLACK) is state


class TestQueries:
    def test_available_moves_for_opponent_piece(self) -> None:
        assert GameState.new().available_moves(E7) == set()

    def test_available_moves_empty_square(self) -> None:
        assert GameState.new().available_moves(E4) == set()

    def test_needs_promotion(self) -> None:
        state = GameState.new(Board.from_placement("4k3/P7/8/8/8/8/8/4K3"))
        assert state.needs_promotion(A7, A8)
        assert not state.needs_promotion(E2, E4)

    def test_promotion_via_state(self) -> None:
        state = GameState.new(Board.from_placement("4k3/P7/8/8/8/8/8/4K3"))
        state = state.play_squares(A7, A8, PieceType.QUEEN)
        queen = state.board[A8]
        assert queen is not None and queen.piece_type == PieceType.QUEEN
        assert state.status.in_check
        assert state.moves[-1].promotion == PieceType.QUEEN


class TestNextStatus:
    def test_appends_key_and_flips_turn(self) -> None:
        state = GameState.new()
        after = state.play_squares(E2, E4)
        status = next_status(state.status, after.board, after.moves[-1])
        assert status.turn == Color.BLACK
        assert status.position_history == (after.board.canonical_key(),)
        assert status == after.status
