"""Enumerations shared by the rules engine and the game layer."""

from __future__ import annotations

from enum import Enum, IntEnum


class Color(IntEnum):
    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Piece kinds; the numeric order follows material value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    def __str__(self) -> str:
        return self.name.lower()


# Kinds a pawn may turn into, in the order a UI usually offers them.
PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


class MoveFlag(IntEnum):
    """Tags moves that need more than "lift piece, drop piece" to apply."""

    NORMAL = 0
    DOUBLE_PAWN = 1
    EN_PASSANT = 2
    CASTLE_KINGSIDE = 3
    CASTLE_QUEENSIDE = 4
    PROMOTION = 5


class DrawReason(Enum):
    """Why a game ended drawn. Values double as the persisted labels."""

    STALEMATE = "stalemate"
    INSUFFICIENT_MATERIAL = "insufficient-material"
    THREEFOLD_REPETITION = "threefold-repetition"
    FIFTY_MOVE = "fifty-move"

    @property
    def description(self) -> str:
        if self is DrawReason.FIFTY_MOVE:
            return "fifty-move rule"
        return self.value.replace("-", " ")


class GameResult(IntEnum):
    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3
