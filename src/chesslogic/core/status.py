"""GameStatus — the rule-derived state of a game after each move."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from chesslogic.core.enums import Color, DrawReason, GameResult
from chesslogic.core.move import Move


@dataclass(frozen=True)
class GameStatus:
    """Snapshot of whose turn it is and whether the game has ended.

    ``position_history`` holds one canonical placement key per committed
    move (the start position is not recorded). ``position_counts`` mirrors
    it as an occurrence table so repetition checks stay O(1).
    """

    turn: Color = Color.WHITE
    in_check: bool = False
    in_checkmate: bool = False
    in_draw: bool = False
    draw_reason: DrawReason | None = None
    halfmove_clock: int = 0
    position_history: tuple[str, ...] = ()
    last_move: Move | None = None
    timed_out: Color | None = None
    position_counts: dict[str, int] = field(
        default_factory=dict, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.halfmove_clock < 0:
            raise ValueError(f"halfmove_clock must be >= 0, got {self.halfmove_clock}")
        if self.in_checkmate and self.in_draw:
            raise ValueError("A game cannot be both checkmate and drawn")
        if sum(self.position_counts.values()) != len(self.position_history):
            object.__setattr__(
                self, "position_counts", dict(Counter(self.position_history))
            )

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def is_over(self) -> bool:
        return self.in_checkmate or self.in_draw or self.timed_out is not None

    @property
    def winner(self) -> Color | None:
        if self.timed_out is not None:
            return self.timed_out.opposite
        if self.in_checkmate:
            return self.turn.opposite
        return None

    @property
    def result(self) -> GameResult:
        if self.in_draw:
            return GameResult.DRAW
        winner = self.winner
        if winner is None:
            return GameResult.IN_PROGRESS
        return GameResult.WHITE_WINS if winner == Color.WHITE else GameResult.BLACK_WINS

    @property
    def message(self) -> str:
        """One-line status text for display."""
        winner = self.winner
        if self.timed_out is not None and winner is not None:
            return f"Time out! {str(winner).capitalize()} wins!"
        if self.in_checkmate and winner is not None:
            return f"Checkmate! {str(winner).capitalize()} wins!"
        if self.in_draw and self.draw_reason is not None:
            return f"Draw by {self.draw_reason.description}"
        if self.in_check:
            return "Check!"
        return f"Current turn: {self.turn}"

    def repetitions(self, key: str) -> int:
        return self.position_counts.get(key, 0)
