"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from chesslogic.core.enums import MoveFlag, PieceType
from chesslogic.core.piece import Piece
from chesslogic.core.types import Square, square_name

# indexed by PieceType value
_SUFFIX = ("", "", "n", "b", "r", "q", "k")


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable descriptor of a single chess move.

    ``piece`` is the mover as it stood *before* the move. ``captured`` is the
    piece removed by the move; for en passant it does not stand on ``to_sq``.
    Promotion moves carry ``flag=PROMOTION``; ``promotion`` stays ``None``
    until the caller picks the new kind.
    """

    piece: Piece
    from_sq: Square
    to_sq: Square
    captured: Piece | None = None
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_castling(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)

    @property
    def capture_square(self) -> Square | None:
        """Square the captured piece stands on, if any."""
        if self.captured is None:
            return None
        return self.captured.square

    @property
    def resets_halfmove_clock(self) -> bool:
        return self.piece.piece_type == PieceType.PAWN or self.captured is not None

    @property
    def uci(self) -> str:
        """Coordinate notation, e.g. ``e2e4`` or ``e7e8q``."""
        suffix = _SUFFIX[self.promotion] if self.promotion is not None else ""
        return square_name(self.from_sq) + square_name(self.to_sq) + suffix

    def __str__(self) -> str:
        return self.uci
