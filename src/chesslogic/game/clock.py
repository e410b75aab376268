"""Countdown chess clock driven by explicit ticks."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chesslogic.core.enums import Color
from chesslogic.game.interfaces import IClock, TimeControl

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ClockSnapshot:
    """Plain-data copy of a :class:`Clock`, used for saving and restoring."""

    white_seconds: float
    black_seconds: float
    active: Color | None
    running: bool


class Clock(IClock):
    """Remaining time for both sides, indexed by :class:`Color`.

    Time only passes through :meth:`tick`, so whoever drives the clock (a UI
    timer, :class:`~chesslogic.game.ticker.ClockTicker`, a test) owns the
    notion of "now". Remaining time bottoms out at zero and the clock halts
    when a flag falls.
    """

    __slots__ = ("_control", "_left", "_side", "_ticking")

    def __init__(self, time_control: TimeControl) -> None:
        self._control = time_control
        self._left: list[float] = [time_control.initial_seconds] * 2
        self._side: Color | None = None
        self._ticking = False

    # ── Running state ────────────────────────────────────────────────────

    def start(self, color: Color) -> None:
        self._side = color
        self._ticking = True
        _LOGGER.debug("Clock running for %s (%s)", color, self._control)

    def stop(self) -> None:
        self._ticking = False

    def switch(self) -> None:
        if self._side is not None:
            self._side = self._side.opposite

    def tick(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError(f"Cannot tick backwards ({seconds}s)")
        side = self._side
        if side is None:
            return 0.0
        if not self._ticking:
            return self.remaining(side)

        left = max(0.0, self._left[side] - seconds)
        self._left[side] = left
        if left == 0.0:
            self._ticking = False
            _LOGGER.warning("Flag fell for %s", side)
        return left

    # ── Time accounting ──────────────────────────────────────────────────

    def remaining(self, color: Color) -> float:
        return max(0.0, self._left[color])

    def is_flag_fallen(self, color: Color) -> bool:
        return self._left[color] <= 0.0

    def add_increment(self, color: Color) -> None:
        self._left[color] += self._control.increment_seconds

    def set_remaining(self, color: Color, seconds: float) -> None:
        self._left[color] = seconds

    @property
    def time_control(self) -> TimeControl:
        return self._control

    @property
    def is_unlimited(self) -> bool:
        return self._control.is_unlimited

    @property
    def is_running(self) -> bool:
        return self._ticking

    @property
    def active_color(self) -> Color | None:
        return self._side

    # ── Snapshots ────────────────────────────────────────────────────────

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            white_seconds=self.remaining(Color.WHITE),
            black_seconds=self.remaining(Color.BLACK),
            active=self._side,
            running=self._ticking,
        )

    def restore(self, snapshot: ClockSnapshot) -> None:
        """Load a :meth:`snapshot`; a clock with no active side never runs."""
        self._left = [snapshot.white_seconds, snapshot.black_seconds]
        self._side = snapshot.active
        self._ticking = snapshot.running and snapshot.active is not None


def format_seconds(seconds: float) -> str:
    """``m:ss`` display string, e.g. 600 → ``10:00``."""
    if seconds == float("inf"):
        return "∞"
    whole = max(0, int(seconds))
    minutes, secs = divmod(whole, 60)
    return f"{minutes}:{secs:02d}"
