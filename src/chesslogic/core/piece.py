"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass, replace

from chesslogic.core.enums import Color, PieceType
from chesslogic.core.types import Square, square_name

# Board-diagram character ↔ (Color, PieceType)
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {
    "P": (Color.WHITE, PieceType.PAWN),
    "N": (Color.WHITE, PieceType.KNIGHT),
    "B": (Color.WHITE, PieceType.BISHOP),
    "R": (Color.WHITE, PieceType.ROOK),
    "Q": (Color.WHITE, PieceType.QUEEN),
    "K": (Color.WHITE, PieceType.KING),
    "p": (Color.BLACK, PieceType.PAWN),
    "n": (Color.BLACK, PieceType.KNIGHT),
    "b": (Color.BLACK, PieceType.BISHOP),
    "r": (Color.BLACK, PieceType.ROOK),
    "q": (Color.BLACK, PieceType.QUEEN),
    "k": (Color.BLACK, PieceType.KING),
}

_DIAGRAM_CHARS: dict[tuple[Color, PieceType], str] = {
    v: k for k, v in _CHAR_MAP.items()
}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece on a square.

    ``piece_id`` identifies "this piece" across board snapshots: it is
    assigned once when the piece is created and survives moves and
    promotion, so two knights of the same color are never confused.
    """

    color: Color
    piece_type: PieceType
    square: Square
    piece_id: int

    # ── Derived copies ───────────────────────────────────────────────────

    def moved_to(self, sq: Square) -> Piece:
        """Same piece standing on *sq*."""
        return replace(self, square=sq)

    def promoted_to(self, piece_type: PieceType) -> Piece:
        """Same piece (same id) with a new kind."""
        return replace(self, piece_type=piece_type)

    def is_same_piece(self, other: Piece | None) -> bool:
        return other is not None and other.piece_id == self.piece_id

    # ── Serialisation ────────────────────────────────────────────────────

    @property
    def char(self) -> str:
        """Diagram character (uppercase = white, lowercase = black)."""
        return _DIAGRAM_CHARS[(self.color, self.piece_type)]

    @property
    def token(self) -> str:
        """Canonical token, e.g. ``whiteknightg1``."""
        return f"{self.color}{self.piece_type}{square_name(self.square)}"

    def __str__(self) -> str:
        return f"{self.color} {self.piece_type} on {square_name(self.square)}"

    @classmethod
    def from_char(cls, char: str, square: Square, piece_id: int) -> Piece:
        """Create piece from diagram character, e.g. 'N' → white knight."""
        try:
            color, ptype = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, ptype, square, piece_id)
