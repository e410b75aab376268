"""Game state transitions — board plus status, advanced one move at a time."""

from __future__ import annotations

from dataclasses import dataclass, replace

from chesslogic.core.applier import apply_move, find_move, validate_move
from chesslogic.core.board import Board
from chesslogic.core.enums import Color, MoveFlag, PieceType
from chesslogic.core.errors import InvalidMoveError
from chesslogic.core.legality import all_legal_moves, available_moves
from chesslogic.core.move import Move
from chesslogic.core.rules import Rules
from chesslogic.core.status import GameStatus
from chesslogic.core.types import Square, square_name


def next_status(status: GameStatus, board_after: Board, move: Move) -> GameStatus:
    """Status after *move* (already committed to *board_after*).

    Resets the halfmove clock on pawn moves and captures, appends the new
    placement key to the history and re-classifies for the other side.
    """
    halfmove_clock = 0 if move.resets_halfmove_clock else status.halfmove_clock + 1
    key = board_after.canonical_key()
    counts = dict(status.position_counts)
    counts[key] = counts.get(key, 0) + 1
    return Rules.classify(
        board_after,
        status.position_history + (key,),
        halfmove_clock,
        status.turn.opposite,
        last_move=move,
        position_counts=counts,
    )


@dataclass(frozen=True)
class GameState:
    """A complete game snapshot: placement, rule status and moves played.

    Every transition returns a new :class:`GameState`; nothing is patched in
    place.
    """

    board: Board
    status: GameStatus
    moves: tuple[Move, ...] = ()

    # ── Initialisation ───────────────────────────────────────────────────

    @classmethod
    def new(cls, board: Board | None = None, turn: Color = Color.WHITE) -> GameState:
        """Fresh game: *turn* to move, clock 0, empty position history."""
        board = board if board is not None else Board.initial()
        return cls(board=board, status=Rules.classify(board, (), 0, turn))

    # ── Transitions ──────────────────────────────────────────────────────

    def play(self, move: Move) -> GameState:
        """Commit *move* and return the resulting state.

        Raises:
            InvalidMoveError: The game is over, it is not the mover's turn,
                or the move is illegal.
        """
        if self.status.is_over:
            raise InvalidMoveError("The game is over")
        if move.piece.color != self.status.turn:
            raise InvalidMoveError(
                f"It is {self.status.turn}'s turn, not {move.piece.color}'s"
            )
        last_move = self.status.last_move
        legal = validate_move(self.board, move, last_move)
        board_after = apply_move(self.board, legal, last_move)
        return GameState(
            board=board_after,
            status=next_status(self.status, board_after, legal),
            moves=self.moves + (legal,),
        )

    def play_squares(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> GameState:
        """Like :meth:`play`, addressing the move by its squares."""
        if self.status.is_over:
            raise InvalidMoveError("The game is over")
        piece = self.board[from_sq]
        if piece is not None and piece.color != self.status.turn:
            raise InvalidMoveError(
                f"{square_name(from_sq)} holds a {piece.color} piece; "
                f"{self.status.turn} is to move"
            )
        move = find_move(self.board, from_sq, to_sq, self.status.last_move, promotion)
        return self.play(move)

    def timeout(self, color: Color) -> GameState:
        """*color* ran out of time: the game ends without consulting the rules."""
        if self.status.is_over:
            return self
        return replace(self, status=replace(self.status, timed_out=color))

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def turn(self) -> Color:
        return self.status.turn

    @property
    def is_over(self) -> bool:
        return self.status.is_over

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.moves)

    @property
    def fullmove_number(self) -> int:
        return (self.ply_count // 2) + 1

    def legal_moves(self) -> list[Move]:
        """Legal moves for the side to move."""
        return all_legal_moves(self.board, self.status.turn, self.status.last_move)

    def available_moves(self, square: Square) -> set[Square]:
        """Destinations for the side-to-move piece on *square*."""
        piece = self.board[square]
        if piece is None or piece.color != self.status.turn:
            return set()
        return available_moves(piece, self.board, self.status.last_move)

    def needs_promotion(self, from_sq: Square, to_sq: Square) -> bool:
        """Whether moving *from_sq* → *to_sq* requires a promotion choice."""
        try:
            move = find_move(self.board, from_sq, to_sq, self.status.last_move)
        except InvalidMoveError:
            return False
        return move.flag == MoveFlag.PROMOTION
