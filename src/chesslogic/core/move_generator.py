"""Pseudo-legal move generation.

Pseudo-legal moves follow each piece's movement pattern but ignore whether
the mover's own king is left in check. Castling is not generated here; see
:mod:`chesslogic.core.legality`.
"""

from __future__ import annotations

from collections.abc import Callable

from chesslogic.core.board import Board
from chesslogic.core.enums import Color, MoveFlag, PieceType
from chesslogic.core.errors import EngineInvariantError
from chesslogic.core.move import Move
from chesslogic.core.piece import Piece
from chesslogic.core.types import Square, file_of, is_on_board, make_square, rank_of

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

# rank index (0-based) of the start rank, en passant rank and last rank
_PAWN_START_RANK: tuple[int, int] = (1, 6)
_PAWN_EN_PASSANT_RANK: tuple[int, int] = (4, 3)
_PAWN_LAST_RANK: tuple[int, int] = (7, 0)
_PAWN_DIRECTION: tuple[int, int] = (1, -1)


# -- Geometry tables built once at import --------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = file_of(sq)
        rank_idx = rank_of(sq)
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if is_on_board(af, ar):
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = file_of(sq)
        rank_idx = rank_of(sq)
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while is_on_board(af, ar):
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
# [color][square] -> diagonals a pawn of that color strikes from the square
_PAWN_ATTACKS = (
    _build_targets(((-1, 1), (1, 1))),
    _build_targets(((-1, -1), (1, -1))),
)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)


def is_double_pawn_push(move: Move | None) -> bool:
    """Whether *move* advanced a pawn two ranks (the en passant trigger)."""
    if move is None or move.piece.piece_type != PieceType.PAWN:
        return False
    return abs(rank_of(move.to_sq) - rank_of(move.from_sq)) == 2


class MoveGenerator:
    """Generates pseudo-legal moves for single pieces on a :class:`Board`.

    *last_move* is only consulted for en passant; pass ``None`` when the
    previous move is unknown or irrelevant (e.g. attack detection).
    """

    __slots__ = ("_board", "_last_move", "_dispatch")

    def __init__(self, board: Board, last_move: Move | None = None) -> None:
        self._board = board
        self._last_move = last_move
        self._dispatch: dict[PieceType, Callable[[Piece, list[Move]], None]] = {
            PieceType.PAWN: self._gen_pawn,
            PieceType.KNIGHT: self._gen_knight,
            PieceType.BISHOP: self._gen_bishop,
            PieceType.ROOK: self._gen_rook,
            PieceType.QUEEN: self._gen_queen,
            PieceType.KING: self._gen_king,
        }

    @property
    def board(self) -> Board:
        return self._board

    # -- Entry points -------------------------------------------------------

    def pseudo_legal_moves(self, piece: Piece) -> list[Move]:
        """All pseudo-legal moves of *piece* (may leave own king in check)."""
        try:
            generate = self._dispatch[piece.piece_type]
        except KeyError:
            raise EngineInvariantError(
                f"Unknown piece type {piece.piece_type!r} for {piece!r}"
            ) from None
        moves: list[Move] = []
        generate(piece, moves)
        return moves

    def pseudo_legal_targets(self, piece: Piece) -> set[Square]:
        return {move.to_sq for move in self.pseudo_legal_moves(piece)}

    def attacked_squares(self, piece: Piece) -> set[Square]:
        """Squares *piece* strikes, whoever stands on them.

        Unlike :meth:`pseudo_legal_targets` this counts pawn diagonals even
        when empty, never counts pawn pushes, and includes squares held by
        *piece*'s own side.
        """
        kind = piece.piece_type
        sq = piece.square
        if kind == PieceType.PAWN:
            return set(_PAWN_ATTACKS[int(piece.color)][sq])
        if kind == PieceType.KNIGHT:
            return set(_KNIGHT_TARGETS[sq])
        if kind == PieceType.KING:
            return set(_KING_TARGETS[sq])
        if kind == PieceType.BISHOP:
            rays = _BISHOP_RAYS[sq]
        elif kind == PieceType.ROOK:
            rays = _ROOK_RAYS[sq]
        elif kind == PieceType.QUEEN:
            rays = _QUEEN_RAYS[sq]
        else:
            raise EngineInvariantError(f"Unknown piece type {kind!r} for {piece!r}")

        board = self._board
        squares: set[Square] = set()
        for ray in rays:
            for to_sq in ray:
                squares.add(to_sq)
                if not board.is_empty(to_sq):
                    break
        return squares

    def attacks(self, color: Color) -> set[Square]:
        """Every square some piece of *color* attacks."""
        squares: set[Square] = set()
        for piece in self._board.pieces(color):
            squares |= self.attacked_squares(piece)
        return squares

    # -- Per-kind target walkers --------------------------------------------

    def _gen_pawn(self, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        sq = piece.square
        color_idx = int(piece.color)
        direction = _PAWN_DIRECTION[color_idx]
        file_idx = file_of(sq)
        rank_idx = rank_of(sq)
        ahead = rank_idx + direction
        if not is_on_board(file_idx, ahead):
            return

        last_rank = _PAWN_LAST_RANK[color_idx]
        step_flag = MoveFlag.PROMOTION if ahead == last_rank else MoveFlag.NORMAL

        one_step = make_square(file_idx, ahead)
        if board.is_empty(one_step):
            moves.append(Move(piece, sq, one_step, flag=step_flag))
            if rank_idx == _PAWN_START_RANK[color_idx]:
                two_step = make_square(file_idx, ahead + direction)
                if board.is_empty(two_step):
                    moves.append(Move(piece, sq, two_step, flag=MoveFlag.DOUBLE_PAWN))

        for df in (-1, 1):
            if not is_on_board(file_idx + df, ahead):
                continue
            cap_sq = make_square(file_idx + df, ahead)
            target = board[cap_sq]
            if target is not None and target.color != piece.color:
                moves.append(Move(piece, sq, cap_sq, captured=target, flag=step_flag))

        ep = self._en_passant_victim(piece)
        if ep is not None:
            ep_sq = make_square(file_of(ep.square), ahead)
            if board.is_empty(ep_sq):
                moves.append(
                    Move(piece, sq, ep_sq, captured=ep, flag=MoveFlag.EN_PASSANT)
                )

    def _en_passant_victim(self, pawn: Piece) -> Piece | None:
        """The enemy pawn *pawn* may take en passant, if any."""
        last = self._last_move
        if rank_of(pawn.square) != _PAWN_EN_PASSANT_RANK[int(pawn.color)]:
            return None
        if last is None or not is_double_pawn_push(last):
            return None
        if last.piece.color == pawn.color:
            return None
        if rank_of(last.to_sq) != rank_of(pawn.square):
            return None
        if abs(file_of(last.to_sq) - file_of(pawn.square)) != 1:
            return None
        victim = self._board[last.to_sq]
        if victim is None or not victim.is_same_piece(last.piece):
            return None
        return victim

    def _gen_knight(self, piece: Piece, moves: list[Move]) -> None:
        self._gen_steps(piece, _KNIGHT_TARGETS[piece.square], moves)

    def _gen_king(self, piece: Piece, moves: list[Move]) -> None:
        self._gen_steps(piece, _KING_TARGETS[piece.square], moves)

    def _gen_bishop(self, piece: Piece, moves: list[Move]) -> None:
        self._gen_sliding(piece, _BISHOP_RAYS[piece.square], moves)

    def _gen_rook(self, piece: Piece, moves: list[Move]) -> None:
        self._gen_sliding(piece, _ROOK_RAYS[piece.square], moves)

    def _gen_queen(self, piece: Piece, moves: list[Move]) -> None:
        self._gen_sliding(piece, _QUEEN_RAYS[piece.square], moves)

    def _gen_steps(
        self,
        piece: Piece,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != piece.color:
                moves.append(Move(piece, piece.square, to_sq, captured=target))

    def _gen_sliding(
        self,
        piece: Piece,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(piece, piece.square, to_sq))
                    continue
                if target.color != piece.color:
                    moves.append(Move(piece, piece.square, to_sq, captured=target))
                break


def pseudo_legal_moves(
    piece: Piece, board: Board, last_move: Move | None = None
) -> list[Move]:
    return MoveGenerator(board, last_move).pseudo_legal_moves(piece)


def pseudo_legal_targets(
    piece: Piece, board: Board, last_move: Move | None = None
) -> set[Square]:
    """Squares *piece* could reach by its movement pattern alone."""
    return MoveGenerator(board, last_move).pseudo_legal_targets(piece)
