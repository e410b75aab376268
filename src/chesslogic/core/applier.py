"""Committing legal moves to new board snapshots."""

from __future__ import annotations

import logging
from dataclasses import replace

from chesslogic.core.board import Board
from chesslogic.core.enums import PROMOTION_TYPES, MoveFlag, PieceType
from chesslogic.core.errors import EngineInvariantError, InvalidMoveError
from chesslogic.core.legality import legal_moves, rook_castling_squares
from chesslogic.core.move import Move
from chesslogic.core.types import Square, square_name

_LOGGER = logging.getLogger(__name__)


def find_move(
    board: Board,
    from_sq: Square,
    to_sq: Square,
    last_move: Move | None = None,
    promotion: PieceType | None = None,
) -> Move:
    """Resolve a (from, to) square pair into the engine's move descriptor.

    Raises:
        InvalidMoveError: No piece on *from_sq*, *to_sq* is not one of its
            legal destinations, or *promotion* is given for a non-promotion.
    """
    piece = board[from_sq]
    if piece is None:
        raise InvalidMoveError(f"No piece on {square_name(from_sq)}")

    for move in legal_moves(piece, board, last_move):
        if move.to_sq != to_sq:
            continue
        if move.flag == MoveFlag.PROMOTION:
            return replace(move, promotion=promotion)
        if promotion is not None:
            raise InvalidMoveError(f"{move} does not promote")
        return move

    raise InvalidMoveError(
        f"Illegal move: {piece} cannot go to {square_name(to_sq)}"
    )


def validate_move(board: Board, move: Move, last_move: Move | None = None) -> Move:
    """Check *move* against the legal moves of its piece.

    Returns the engine's own descriptor for the move (flag and captured
    piece as generated) with the caller's promotion choice filled in.

    Raises:
        InvalidMoveError: The move is not legal on *board*, or a promotion
            is missing its chosen kind.
    """
    mover = board[move.from_sq]
    if mover is None or not mover.is_same_piece(move.piece):
        raise InvalidMoveError(f"{move.piece} is not on {square_name(move.from_sq)}")

    legal = next(
        (m for m in legal_moves(mover, board, last_move) if m.to_sq == move.to_sq),
        None,
    )
    if legal is None:
        raise InvalidMoveError(f"Illegal move {move} for {mover}")

    if legal.flag == MoveFlag.PROMOTION:
        if move.promotion not in PROMOTION_TYPES:
            raise InvalidMoveError(
                f"Promotion on {square_name(move.to_sq)} needs one of "
                f"{', '.join(str(pt) for pt in PROMOTION_TYPES)}"
            )
        return replace(legal, promotion=move.promotion)
    if move.promotion is not None:
        raise InvalidMoveError(f"{move} does not promote")
    return legal


def apply_move(board: Board, move: Move, last_move: Move | None = None) -> Board:
    """Return the board after *move*; *board* itself is left unchanged.

    The move is re-validated with :func:`validate_move` first. Captures
    (including en passant), the rook's hop when castling and promotion are
    all handled here.
    """
    legal = validate_move(board, move, last_move)

    placed = legal.piece.moved_to(legal.to_sq)
    if legal.promotion is not None:
        placed = placed.promoted_to(legal.promotion)

    after = board
    if legal.captured is not None:
        after = after.without(legal.captured.square)
    after = after.without(legal.from_sq).with_piece(placed)

    if legal.is_castling:
        rook_from, rook_to = rook_castling_squares(legal)
        rook = after[rook_from]
        if rook is None:
            raise EngineInvariantError(
                f"Castling {legal} found no rook on {square_name(rook_from)}"
            )
        after = after.relocate(rook, rook_to)

    _LOGGER.debug("Applied %s (%s)", legal, legal.flag.name)
    return after
