"""Legal move filtering and castling."""

from __future__ import annotations

from typing import NamedTuple

from chesslogic.core.board import Board, is_unmoved
from chesslogic.core.check import is_in_check
from chesslogic.core.enums import Color, MoveFlag, PieceType
from chesslogic.core.move import Move
from chesslogic.core.move_generator import MoveGenerator
from chesslogic.core.piece import Piece
from chesslogic.core.types import Square, make_square


class _CastlingSide(NamedTuple):
    flag: MoveFlag
    rook_file: int
    between_files: tuple[int, ...]  # must be empty
    king_path_files: tuple[int, ...]  # must not be attacked, destination last


_KING_HOME_FILE = 4
_HOME_RANK: tuple[int, int] = (0, 7)
_CASTLING_SIDES: tuple[_CastlingSide, ...] = (
    _CastlingSide(MoveFlag.CASTLE_KINGSIDE, 7, (5, 6), (5, 6)),
    _CastlingSide(MoveFlag.CASTLE_QUEENSIDE, 0, (1, 2, 3), (3, 2)),
)


# -- Simulation -------------------------------------------------------------


def simulate(board: Board, piece: Piece, to_sq: Square) -> Board:
    """Board after *piece* steps to *to_sq*, capturing whatever stands there."""
    return board.relocate(piece, to_sq)


def simulate_move(board: Board, move: Move) -> Board:
    """Like :func:`simulate`, but also lifts an en passant victim."""
    if move.flag == MoveFlag.EN_PASSANT and move.captured is not None:
        board = board.without(move.captured.square)
    return simulate(board, move.piece, move.to_sq)


def leaves_king_safe(board: Board, move: Move) -> bool:
    color = move.piece.color
    after = simulate_move(board, move)
    if after.king(color) is None:
        # Nothing to evaluate against; treat as legal.
        return True
    return not is_in_check(after, color)


# -- Castling ---------------------------------------------------------------


def castling_moves(king: Piece, board: Board) -> list[Move]:
    """Castling moves available to *king*.

    King and rook must be the very pieces that began the game on those
    squares, judged by ``piece_id`` (see :func:`~chesslogic.core.board.is_unmoved`).
    Standing on the home square is the only has-moved check, so a piece that
    leaves and comes back still qualifies.
    """
    if king.piece_type != PieceType.KING:
        return []
    color = king.color
    rank = _HOME_RANK[int(color)]
    home = make_square(_KING_HOME_FILE, rank)
    if king.square != home or not is_unmoved(king) or is_in_check(board, color):
        return []

    moves: list[Move] = []
    for side in _CASTLING_SIDES:
        rook = board[make_square(side.rook_file, rank)]
        if rook is None or rook.color != color or not is_unmoved(rook):
            continue
        if not all(board.is_empty(make_square(f, rank)) for f in side.between_files):
            continue
        if any(
            is_in_check(simulate(board, king, make_square(f, rank)), color)
            for f in side.king_path_files
        ):
            continue
        destination = make_square(side.king_path_files[-1], rank)
        moves.append(Move(king, home, destination, flag=side.flag))
    return moves


def rook_castling_squares(move: Move) -> tuple[Square, Square]:
    """(from, to) of the rook that accompanies a castling *move*."""
    rank = _HOME_RANK[int(move.piece.color)]
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        return make_square(7, rank), make_square(5, rank)
    if move.flag == MoveFlag.CASTLE_QUEENSIDE:
        return make_square(0, rank), make_square(3, rank)
    raise ValueError(f"{move} is not a castling move")


# -- Public API -------------------------------------------------------------


def legal_moves(
    piece: Piece, board: Board, last_move: Move | None = None
) -> list[Move]:
    """Moves of *piece* that do not leave its own king in check."""
    gen = MoveGenerator(board, last_move)
    moves = [m for m in gen.pseudo_legal_moves(piece) if leaves_king_safe(board, m)]
    if piece.piece_type == PieceType.KING:
        moves.extend(castling_moves(piece, board))
    return moves


def available_moves(
    piece: Piece, board: Board, last_move: Move | None = None
) -> set[Square]:
    """Destination squares the UI should offer for *piece*."""
    return {move.to_sq for move in legal_moves(piece, board, last_move)}


def all_legal_moves(
    board: Board, color: Color, last_move: Move | None = None
) -> list[Move]:
    """Every legal move of every *color* piece."""
    moves: list[Move] = []
    for piece in board.pieces(color):
        moves.extend(legal_moves(piece, board, last_move))
    return moves


def has_legal_move(board: Board, color: Color, last_move: Move | None = None) -> bool:
    return any(legal_moves(p, board, last_move) for p in board.pieces(color))
