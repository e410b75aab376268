"""Game management layer — state transitions, session controller, clock.

Quick start::

    from chesslogic.game import GameController, TimeControl
    from chesslogic.core.types import E2, E4

    ctrl = GameController()
    ctrl.new_game(time_control=TimeControl.rapid_10m())
    ctrl.submit_move(E2, E4)
    print(ctrl.status.message)
"""

from chesslogic.game.clock import Clock, ClockSnapshot, format_seconds
from chesslogic.game.controller import GameController, GameEvents
from chesslogic.game.interfaces import (
    DEFAULT_TICK_SECONDS,
    DEFAULT_TIME_CONTROL,
    GamePhase,
    IClock,
    IGameController,
    TimeControl,
)
from chesslogic.game.persistence import (
    SavedGame,
    dumps_game,
    dumps_state,
    loads_game,
    loads_state,
)
from chesslogic.game.state import GameState, next_status
from chesslogic.game.ticker import ClockTicker

__all__ = [
    # Interfaces / configuration
    "DEFAULT_TICK_SECONDS",
    "DEFAULT_TIME_CONTROL",
    "GamePhase",
    "IClock",
    "IGameController",
    "TimeControl",
    # Concrete
    "Clock",
    "ClockSnapshot",
    "ClockTicker",
    "GameController",
    "GameEvents",
    "GameState",
    "format_seconds",
    "next_status",
    # Persistence
    "SavedGame",
    "dumps_game",
    "dumps_state",
    "loads_game",
    "loads_state",
]
