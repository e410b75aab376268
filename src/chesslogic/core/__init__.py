"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chesslogic.core import Board, available_moves, apply_move, find_move
    from chesslogic.core.types import E2, E4

    board = Board.initial()
    pawn = board[E2]
    print(sorted(available_moves(pawn, board)))
    board = apply_move(board, find_move(board, E2, E4))
"""

from chesslogic.core.applier import apply_move, find_move, validate_move
from chesslogic.core.board import Board
from chesslogic.core.check import is_in_check, is_square_attacked
from chesslogic.core.enums import (
    PROMOTION_TYPES,
    Color,
    DrawReason,
    GameResult,
    MoveFlag,
    PieceType,
)
from chesslogic.core.errors import (
    ChessLogicError,
    EngineInvariantError,
    InvalidMoveError,
    SnapshotError,
)
from chesslogic.core.legality import (
    all_legal_moves,
    available_moves,
    castling_moves,
    has_legal_move,
    legal_moves,
    simulate,
)
from chesslogic.core.move import Move
from chesslogic.core.move_generator import (
    MoveGenerator,
    pseudo_legal_moves,
    pseudo_legal_targets,
)
from chesslogic.core.piece import Piece
from chesslogic.core.rules import Rules
from chesslogic.core.status import GameStatus
from chesslogic.core.types import (
    Square,
    file_of,
    is_on_board,
    is_valid_square,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "Color",
    "DrawReason",
    "GameResult",
    "MoveFlag",
    "PieceType",
    "PROMOTION_TYPES",
    # Types / helpers
    "Square",
    "file_of",
    "is_on_board",
    "is_valid_square",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Errors
    "ChessLogicError",
    "EngineInvariantError",
    "InvalidMoveError",
    "SnapshotError",
    # Domain objects
    "Board",
    "GameStatus",
    "Move",
    "MoveGenerator",
    "Piece",
    "Rules",
    # Rule functions
    "all_legal_moves",
    "apply_move",
    "available_moves",
    "castling_moves",
    "find_move",
    "has_legal_move",
    "is_in_check",
    "is_square_attacked",
    "legal_moves",
    "pseudo_legal_moves",
    "pseudo_legal_targets",
    "simulate",
    "validate_move",
]
