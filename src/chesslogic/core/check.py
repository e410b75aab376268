"""Check detection."""

from __future__ import annotations

from chesslogic.core.board import Board
from chesslogic.core.enums import Color
from chesslogic.core.move_generator import MoveGenerator
from chesslogic.core.types import Square


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Could a piece of *by_color* capture on *sq* if an enemy stood there?

    Pawns attack diagonally only. En passant never factors in.
    """
    gen = MoveGenerator(board)
    return any(sq in gen.attacked_squares(p) for p in board.pieces(by_color))


def is_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?

    On the king's own square the attack set and the opponent's pseudo-legal
    capture targets coincide. A board without a king of *color* is never in
    check; such boards show up transiently while moves are being simulated.
    """
    king = board.king(color)
    if king is None:
        return False
    return is_square_attacked(board, king.square, color.opposite)
