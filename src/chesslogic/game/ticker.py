"""Background thread that drives a controller's clock at a fixed interval."""

from __future__ import annotations

import logging
import threading

from chesslogic.game.interfaces import DEFAULT_TICK_SECONDS, IGameController

_LOGGER = logging.getLogger(__name__)


class ClockTicker:
    """Calls ``controller.tick(interval)`` every *interval* seconds.

    The ticker knows nothing about move legality; it only advances time.
    It stops by itself once the controller reports the game is over.
    """

    __slots__ = ("_controller", "_interval", "_stop_event", "_thread")

    def __init__(
        self,
        controller: IGameController,
        interval: float = DEFAULT_TICK_SECONDS,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")
        self._controller = controller
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="chesslogic-clock", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            self._controller.tick(self._interval)
            if self._controller.is_game_over:
                _LOGGER.debug("Game over; clock ticker exiting")
                return
