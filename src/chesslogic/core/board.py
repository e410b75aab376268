"""Immutable-by-convention placement of pieces on the 64 squares."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from chesslogic.core.enums import Color, PieceType
from chesslogic.core.piece import Piece
from chesslogic.core.types import Square, file_of, make_square, rank_of, square_name

POSITION_KEY_SEPARATOR = "|"

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# rank -> (color, id of the a-file piece) in the starting position
_START_RANKS: dict[int, tuple[Color, int]] = {
    0: (Color.WHITE, 0),
    1: (Color.WHITE, 8),
    6: (Color.BLACK, 24),
    7: (Color.BLACK, 16),
}
FIRST_FREE_PIECE_ID = 32


def starting_piece(sq: Square) -> Piece | None:
    """The piece :meth:`Board.initial` puts on *sq*, if any."""
    entry = _START_RANKS.get(rank_of(sq))
    if entry is None:
        return None
    color, base = entry
    file = file_of(sq)
    kind = PieceType.PAWN if rank_of(sq) in (1, 6) else _BACK_RANK[file]
    return Piece(color, kind, sq, base + file)


def is_unmoved(piece: Piece) -> bool:
    """Whether *piece* is the very piece that started the game on its square."""
    return starting_piece(piece.square) == piece


class Board:
    """64-square snapshot of piece placement.

    Boards are treated as values: every public operation that changes the
    placement returns a new board and leaves the receiver untouched.
    """

    __slots__ = ("_squares", "_king_squares")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # king square per Color, None while that king is off the board
        self._king_squares: list[Square | None] = [None, None]

    # -- Lookup -------------------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __iter__(self) -> Iterator[Piece]:
        return (p for p in self._squares if p is not None)

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Searches -----------------------------------------------------------

    def pieces(
        self, color: Color | None = None, piece_type: PieceType | None = None
    ) -> list[Piece]:
        """Pieces in square order, optionally filtered by color and kind."""
        return [
            p
            for p in self
            if (color is None or p.color == color)
            and (piece_type is None or p.piece_type == piece_type)
        ]

    def count(self) -> int:
        return sum(1 for _ in self)

    def find(self, piece_id: int) -> Piece | None:
        """The piece carrying *piece_id*, wherever it stands now."""
        for p in self:
            if p.piece_id == piece_id:
                return p
        return None

    def king(self, color: Color) -> Piece | None:
        """*color*'s king, or ``None`` when it is absent."""
        sq = self._king_squares[int(color)]
        if sq is None:
            return None
        return self._squares[sq]

    def canonical_key(self) -> str:
        """Order-independent placement key used for repetition detection.

        Only placement is encoded; side to move, castling availability and
        en passant availability are not part of the key.
        """
        return POSITION_KEY_SEPARATOR.join(p.token for p in self)

    # -- Functional updates -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        b._king_squares = self._king_squares.copy()
        return b

    def with_piece(self, piece: Piece) -> Board:
        """New board with *piece* placed on its square (replacing any occupant)."""
        b = self.copy()
        b._put(piece)
        return b

    def without(self, sq: Square) -> Board:
        """New board with *sq* emptied."""
        b = self.copy()
        b._remove(sq)
        return b

    def relocate(self, piece: Piece, to_sq: Square) -> Board:
        """New board with *piece* moved to *to_sq*, capturing any occupant."""
        b = self.copy()
        b._remove(piece.square)
        b._remove(to_sq)
        b._put(piece.moved_to(to_sq))
        return b

    def _put(self, piece: Piece) -> None:
        sq = piece.square
        self._remove(sq)
        self._squares[sq] = piece
        if piece.piece_type == PieceType.KING:
            self._king_squares[int(piece.color)] = sq

    def _remove(self, sq: Square) -> None:
        old_piece = self._squares[sq]
        if old_piece is None:
            return
        self._squares[sq] = None
        color_idx = int(old_piece.color)
        if (
            old_piece.piece_type == PieceType.KING
            and self._king_squares[color_idx] == sq
        ):
            self._king_squares[color_idx] = None

    # -- Construction -------------------------------------------------------

    @classmethod
    def from_pieces(cls, pieces: Iterable[Piece]) -> Board:
        """Build a board, rejecting two pieces on one square or a reused id."""
        b = cls()
        seen_ids: set[int] = set()
        for piece in pieces:
            if not b.is_empty(piece.square):
                raise ValueError(f"Square {square_name(piece.square)} is occupied twice")
            if piece.piece_id in seen_ids:
                raise ValueError(f"Duplicate piece id {piece.piece_id}")
            seen_ids.add(piece.piece_id)
            b._put(piece)
        return b

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position (white ids 0-15, black ids 16-31)."""
        pieces = (starting_piece(sq) for sq in range(64))
        return cls.from_pieces(p for p in pieces if p is not None)

    @classmethod
    def from_placement(cls, placement: str) -> Board:
        """Build a board from a diagram string such as ``"4k3/8/8/8/8/8/8/4K3"``.

        Ranks run from 8 down to 1, digits count empty squares. Only the
        placement is read. A piece found where the same kind and color
        starts the game gets that starting id, so it still counts as
        unmoved for castling; every other piece gets a fresh id from
        ``FIRST_FREE_PIECE_ID`` upward, in square order.
        """
        rows = placement.split("/")
        if len(rows) != 8:
            raise ValueError(f"Expected 8 ranks, got {len(rows)}: {placement!r}")

        found: list[tuple[Square, str]] = []
        for row_idx, row in enumerate(rows):
            rank = 7 - row_idx
            file = 0
            for ch in row:
                if ch.isdigit():
                    file += int(ch)
                    continue
                if file > 7:
                    raise ValueError(f"Rank {rank + 1} is too long: {row!r}")
                found.append((make_square(file, rank), ch))
                file += 1
            if file != 8:
                raise ValueError(f"Rank {rank + 1} must span 8 files: {row!r}")

        found.sort()
        pieces: list[Piece] = []
        next_id = FIRST_FREE_PIECE_ID
        for sq, ch in found:
            piece = Piece.from_char(ch, sq, next_id)
            home = starting_piece(sq)
            if home is not None and home.char == piece.char:
                piece = home
            else:
                next_id += 1
            pieces.append(piece)
        return cls.from_pieces(pieces)

    def to_placement(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = ""
            empty = 0
            for file in range(8):
                p = self[make_square(file, rank)]
                if p is None:
                    empty += 1
                    continue
                if empty:
                    row += str(empty)
                    empty = 0
                row += p.char
            if empty:
                row += str(empty)
            rows.append(row)
        return "/".join(rows)

    # -- Comparison and display ---------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[make_square(file, rank)]
                row.append(p.char if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
