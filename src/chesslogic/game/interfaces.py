"""Session-level contracts: game phases, time controls and the ABCs the
controller and ticker are written against."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chesslogic.core.enums import Color

if TYPE_CHECKING:
    from chesslogic.core.board import Board
    from chesslogic.core.enums import PieceType
    from chesslogic.core.types import Square


class GamePhase(IntEnum):
    """Where a session is in its life cycle."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    GAME_OVER = auto()


# ── Time controls ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TimeControl:
    """Starting budget per side plus a Fischer bonus added after each move.

    An infinite ``initial_seconds`` means the game is untimed.
    """

    initial_seconds: float
    increment_seconds: float = 0.0

    def __post_init__(self) -> None:
        if self.initial_seconds < 0 or self.increment_seconds < 0:
            raise ValueError(
                f"Time control values must be non-negative, got {self.label}"
            )

    @classmethod
    def from_minutes(cls, minutes: float, increment: float = 0.0) -> TimeControl:
        return cls(minutes * 60, increment)

    @classmethod
    def bullet_1m(cls) -> TimeControl:
        return cls.from_minutes(1)

    @classmethod
    def blitz_3m(cls) -> TimeControl:
        return cls.from_minutes(3)

    @classmethod
    def blitz_5m(cls) -> TimeControl:
        return cls.from_minutes(5)

    @classmethod
    def blitz_5m3s(cls) -> TimeControl:
        return cls.from_minutes(5, 3)

    @classmethod
    def rapid_10m(cls) -> TimeControl:
        return cls.from_minutes(10)

    @classmethod
    def rapid_15m10s(cls) -> TimeControl:
        return cls.from_minutes(15, 10)

    @classmethod
    def classical_30m(cls) -> TimeControl:
        return cls.from_minutes(30)

    @classmethod
    def unlimited(cls) -> TimeControl:
        return cls(float("inf"))

    @property
    def is_unlimited(self) -> bool:
        return self.initial_seconds == float("inf")

    @property
    def label(self) -> str:
        """Short form such as ``5m+3s`` or ``10m``."""
        if self.is_unlimited:
            return "unlimited"
        text = f"{self.initial_seconds / 60:g}m"
        if self.increment_seconds:
            text += f"+{self.increment_seconds:g}s"
        return text

    def __repr__(self) -> str:
        return f"TimeControl({self.label})"


DEFAULT_TIME_CONTROL = TimeControl.rapid_10m()
DEFAULT_TICK_SECONDS = 1.0


# ── Contracts ────────────────────────────────────────────────────────────────


class IClock(ABC):
    """Two-sided countdown that only advances when told to."""

    @abstractmethod
    def start(self, color: Color) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def switch(self) -> None:
        """Hand the running clock over to the other side."""

    @abstractmethod
    def tick(self, seconds: float) -> float:
        """Burn *seconds* off the running side; return what it has left."""

    @abstractmethod
    def remaining(self, color: Color) -> float: ...

    @abstractmethod
    def is_flag_fallen(self, color: Color) -> bool: ...

    @abstractmethod
    def add_increment(self, color: Color) -> None: ...


class IGameController(ABC):
    """What a driver (UI, ticker, test) needs from a running session."""

    @property
    @abstractmethod
    def is_game_over(self) -> bool: ...

    @abstractmethod
    def new_game(
        self,
        time_control: TimeControl | None = None,
        board: Board | None = None,
    ) -> None: ...

    @abstractmethod
    def select(self, square: Square) -> set[Square]:
        """Legal destinations of the piece on *square* (empty if none)."""

    @abstractmethod
    def submit_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> bool:
        """Try to play a move; ``False`` means it was refused."""

    @abstractmethod
    def tick(self, seconds: float = DEFAULT_TICK_SECONDS) -> None:
        """Advance the clock of the side to move."""
