"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from chesslogic.core.board import Board
from chesslogic.core.check import is_in_check
from chesslogic.core.enums import Color, DrawReason, PieceType
from chesslogic.core.legality import has_legal_move
from chesslogic.core.move import Move
from chesslogic.core.status import GameStatus
from chesslogic.core.types import square_parity

FIFTY_MOVE_HALFMOVES = 100  # 100 half-moves = 50 full moves per side
REPETITION_LIMIT = 3

History = Sequence[str] | Mapping[str, int]


class Rules:
    """Static rule-checker that operates on board snapshots.

    Draw precedence when several conditions hold at once is fixed:
    insufficient material, then stalemate, then threefold repetition,
    then the fifty-move rule. All draws are automatic.
    """

    @staticmethod
    def is_in_check(board: Board, color: Color) -> bool:
        return is_in_check(board, color)

    @staticmethod
    def is_checkmate(board: Board, color: Color, last_move: Move | None = None) -> bool:
        if not is_in_check(board, color):
            return False
        return not has_legal_move(board, color, last_move)

    @staticmethod
    def is_stalemate(board: Board, color: Color, last_move: Move | None = None) -> bool:
        if is_in_check(board, color):
            return False
        return not has_legal_move(board, color, last_move)

    @staticmethod
    def is_insufficient_material(board: Board) -> bool:
        """K vs K, K+B vs K, K+N vs K, and two same-square-color bishops.

        Other sparse endings (e.g. K+N+N vs K) are deliberately not flagged.
        """
        pieces = board.pieces()
        total = len(pieces)

        # K vs K
        if total == 2:
            return True

        # K+minor vs K
        if total == 3:
            return any(
                p.piece_type in (PieceType.BISHOP, PieceType.KNIGHT) for p in pieces
            )

        # K+B vs K+B with same-colour bishops
        if total == 4:
            bishops = [p for p in pieces if p.piece_type == PieceType.BISHOP]
            if len(bishops) == 2:
                return square_parity(bishops[0].square) == square_parity(
                    bishops[1].square
                )

        return False

    @staticmethod
    def repetition_count(key: str, history: History) -> int:
        """Occurrences of *key* in *history* (a key sequence or count table)."""
        if isinstance(history, Mapping):
            return history.get(key, 0)
        return sum(1 for entry in history if entry == key)

    @staticmethod
    def is_threefold_repetition(board: Board, history: History) -> bool:
        """Whether the current placement appears three times in *history*.

        *history* is expected to already include the current position.
        """
        key = board.canonical_key()
        return Rules.repetition_count(key, history) >= REPETITION_LIMIT

    @staticmethod
    def is_fifty_move_rule(halfmove_clock: int) -> bool:
        return halfmove_clock >= FIFTY_MOVE_HALFMOVES

    @staticmethod
    def draw_reason(
        board: Board,
        turn: Color,
        history: History,
        halfmove_clock: int,
        last_move: Move | None = None,
    ) -> DrawReason | None:
        """The draw that applies to this position, if any, by precedence."""
        if Rules.is_insufficient_material(board):
            return DrawReason.INSUFFICIENT_MATERIAL
        if Rules.is_stalemate(board, turn, last_move):
            return DrawReason.STALEMATE
        if Rules.is_threefold_repetition(board, history):
            return DrawReason.THREEFOLD_REPETITION
        if Rules.is_fifty_move_rule(halfmove_clock):
            return DrawReason.FIFTY_MOVE
        return None

    @staticmethod
    def classify(
        board: Board,
        history: Sequence[str],
        halfmove_clock: int,
        turn: Color,
        last_move: Move | None = None,
        position_counts: Mapping[str, int] | None = None,
    ) -> GameStatus:
        """Derive the full :class:`GameStatus` for *turn* to move on *board*.

        *position_counts*, when given, must mirror *history*; it only saves
        re-counting the history.
        """
        in_check = is_in_check(board, turn)
        can_move = has_legal_move(board, turn, last_move)
        in_checkmate = in_check and not can_move

        reason: DrawReason | None = None
        if not in_checkmate:
            counts: History = position_counts if position_counts is not None else history
            if Rules.is_insufficient_material(board):
                reason = DrawReason.INSUFFICIENT_MATERIAL
            elif not can_move:
                reason = DrawReason.STALEMATE
            elif Rules.is_threefold_repetition(board, counts):
                reason = DrawReason.THREEFOLD_REPETITION
            elif Rules.is_fifty_move_rule(halfmove_clock):
                reason = DrawReason.FIFTY_MOVE

        return GameStatus(
            turn=turn,
            in_check=in_check,
            in_checkmate=in_checkmate,
            in_draw=reason is not None,
            draw_reason=reason,
            halfmove_clock=halfmove_clock,
            position_history=tuple(history),
            last_move=last_move,
            position_counts=dict(position_counts) if position_counts is not None else {},
        )
