"""Drives one game: owns the state, the optional clock and the listeners.

Every state change goes through :class:`GameController`, which fires the
matching :class:`GameEvents` hooks after the new state is in place.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from chesslogic.core.board import Board
from chesslogic.core.enums import Color, PieceType
from chesslogic.core.errors import InvalidMoveError
from chesslogic.core.move import Move
from chesslogic.core.status import GameStatus
from chesslogic.core.types import Square, square_name
from chesslogic.game.clock import Clock
from chesslogic.game.interfaces import (
    DEFAULT_TICK_SECONDS,
    GamePhase,
    IGameController,
    TimeControl,
)
from chesslogic.game.persistence import SavedGame
from chesslogic.game.state import GameState

_LOGGER = logging.getLogger(__name__)

# ── Listener hooks ───────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, GameState], None]
GameOverCallback = Callable[[GameStatus], None]
PhaseCallback = Callable[[GamePhase], None]
ClockTickCallback = Callable[[Color, float], None]  # color, remaining


@dataclass
class GameEvents:
    """Listener lists, called in registration order."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_clock_tick: list[ClockTickCallback] = field(default_factory=list)


# ── Session driver ───────────────────────────────────────────────────────────


class GameController(IGameController):
    """Runs a two-player game: validates moves, manages the clock, switches
    turns and notifies listeners.

    The clock may be ticked from a background thread (see
    :class:`~chesslogic.game.ticker.ClockTicker`); a re-entrant lock
    serialises ticks against move submission.
    """

    __slots__ = (
        "_state",
        "_phase",
        "_clock",
        "_time_control",
        "_lock",
        "events",
    )

    def __init__(self) -> None:
        self._state = GameState.new()
        self._phase = GamePhase.NOT_STARTED
        self._clock: Clock | None = None
        self._time_control: TimeControl | None = None
        self._lock = threading.RLock()
        self.events = GameEvents()

    # ── Accessors ────────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def status(self) -> GameStatus:
        return self._state.status

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def clock(self) -> Clock | None:
        return self._clock

    @property
    def is_game_over(self) -> bool:
        return self._phase == GamePhase.GAME_OVER

    # ── Commands ─────────────────────────────────────────────────────────

    def new_game(
        self,
        time_control: TimeControl | None = None,
        board: Board | None = None,
    ) -> None:
        with self._lock:
            self._time_control = time_control
            self._clock = Clock(time_control) if time_control is not None else None
            self._state = GameState.new(board)
            _LOGGER.debug("New game (time control: %s)", time_control)

            if self._state.is_over:
                self._finish()
                return
            self._set_phase(GamePhase.AWAITING_MOVE)
            if self._clock is not None:
                self._clock.start(self._state.turn)

    def reset(self) -> None:
        """Start over from the initial position with the same time control."""
        self.new_game(self._time_control)

    def save(self) -> SavedGame:
        """Capture the position, the time control and the clock readings."""
        with self._lock:
            clock = self._clock.snapshot() if self._clock is not None else None
            return SavedGame(self._state, self._time_control, clock)

    def load(self, saved: SavedGame) -> None:
        """Resume *saved* where it left off.

        Without recorded clock readings a timed game starts with full time
        for both sides.
        """
        with self._lock:
            self._time_control = saved.time_control
            self._clock = None
            if saved.time_control is not None:
                self._clock = Clock(saved.time_control)
                if saved.clock is not None:
                    self._clock.restore(saved.clock)
            self._state = saved.state
            _LOGGER.debug(
                "Resumed game after %d plies (time control: %s)",
                saved.state.ply_count,
                saved.time_control,
            )

            if self._state.is_over:
                self._finish()
                return
            self._set_phase(GamePhase.AWAITING_MOVE)
            if self._clock is not None and self._clock.active_color is None:
                self._clock.start(self._state.turn)

    def select(self, square: Square) -> set[Square]:
        if self._phase != GamePhase.AWAITING_MOVE:
            return set()
        return self._state.available_moves(square)

    def needs_promotion(self, from_sq: Square, to_sq: Square) -> bool:
        return self._state.needs_promotion(from_sq, to_sq)

    def submit_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> bool:
        with self._lock:
            if self._phase != GamePhase.AWAITING_MOVE:
                return False

            mover = self._state.turn
            if self._clock is not None and self._clock.is_flag_fallen(mover):
                self._flag_fall(mover)
                return False

            try:
                next_state = self._state.play_squares(from_sq, to_sq, promotion)
            except InvalidMoveError as exc:
                _LOGGER.warning(
                    "Rejected move %s%s: %s",
                    square_name(from_sq),
                    square_name(to_sq),
                    exc,
                )
                return False

            self._state = next_state
            move = next_state.moves[-1]
            _LOGGER.debug("%s played %s", mover, move)

            if self._clock is not None:
                self._clock.add_increment(mover)
                self._clock.switch()

            self._emit_move(move)

            if next_state.is_over:
                self._finish()
            return True

    def tick(self, seconds: float = DEFAULT_TICK_SECONDS) -> None:
        with self._lock:
            if self._clock is None or self._phase != GamePhase.AWAITING_MOVE:
                return
            color = self._state.turn
            remaining = self._clock.tick(seconds)
            for cb in self.events.on_clock_tick:
                cb(color, remaining)
            if self._clock.is_flag_fallen(color):
                self._flag_fall(color)

    # ── Notification ─────────────────────────────────────────────────────

    def _flag_fall(self, color: Color) -> None:
        self._state = self._state.timeout(color)
        self._finish()

    def _finish(self) -> None:
        if self._clock is not None:
            self._clock.stop()
        self._set_phase(GamePhase.GAME_OVER)
        status = self._state.status
        _LOGGER.info("Game over: %s", status.message)
        for cb in self.events.on_game_over:
            cb(status)

    def _set_phase(self, phase: GamePhase) -> None:
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)

    def _emit_move(self, move: Move) -> None:
        for cb in self.events.on_move:
            cb(move, self._state)
