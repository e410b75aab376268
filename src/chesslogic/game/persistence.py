"""JSON-compatible snapshots of boards, statuses and whole games.

The engine does not own a storage format; these helpers give callers a
structured encoding that preserves every field of the domain objects so a
game can be saved and resumed verbatim.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from chesslogic.core.board import Board
from chesslogic.core.enums import Color, DrawReason, MoveFlag, PieceType
from chesslogic.core.errors import SnapshotError
from chesslogic.core.move import Move
from chesslogic.core.piece import Piece
from chesslogic.core.status import GameStatus
from chesslogic.core.types import parse_square, square_name
from chesslogic.game.clock import ClockSnapshot
from chesslogic.game.interfaces import TimeControl
from chesslogic.game.state import GameState

_LOGGER = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

_T = TypeVar("_T")


def _decoding(what: str, fn: Callable[[], _T]) -> _T:
    try:
        return fn()
    except SnapshotError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise SnapshotError(f"Malformed {what} snapshot: {exc}") from exc


def _color(name: str) -> Color:
    return Color[name.upper()]


def _kind(name: str) -> PieceType:
    return PieceType[name.upper()]


# JSON has no infinity; unlimited time is stored as null.
def _seconds_out(seconds: float) -> float | None:
    return None if seconds == float("inf") else seconds


def _seconds_in(value: Any) -> float:
    return float("inf") if value is None else float(value)


# ── Pieces / boards ──────────────────────────────────────────────────────────


def piece_to_dict(piece: Piece) -> dict[str, Any]:
    return {
        "id": piece.piece_id,
        "color": str(piece.color),
        "kind": str(piece.piece_type),
        "square": square_name(piece.square),
    }


def piece_from_dict(data: dict[str, Any]) -> Piece:
    return _decoding(
        "piece",
        lambda: Piece(
            color=_color(data["color"]),
            piece_type=_kind(data["kind"]),
            square=parse_square(data["square"]),
            piece_id=int(data["id"]),
        ),
    )


def board_to_dict(board: Board) -> dict[str, Any]:
    return {"pieces": [piece_to_dict(p) for p in board]}


def board_from_dict(data: dict[str, Any]) -> Board:
    return _decoding(
        "board",
        lambda: Board.from_pieces(piece_from_dict(p) for p in data["pieces"]),
    )


# ── Moves ────────────────────────────────────────────────────────────────────


def move_to_dict(move: Move) -> dict[str, Any]:
    return {
        "piece": piece_to_dict(move.piece),
        "from": square_name(move.from_sq),
        "to": square_name(move.to_sq),
        "captured": piece_to_dict(move.captured) if move.captured else None,
        "flag": move.flag.name.lower(),
        "promotion": str(move.promotion) if move.promotion is not None else None,
    }


def move_from_dict(data: dict[str, Any]) -> Move:
    def build() -> Move:
        captured = data.get("captured")
        promotion = data.get("promotion")
        return Move(
            piece=piece_from_dict(data["piece"]),
            from_sq=parse_square(data["from"]),
            to_sq=parse_square(data["to"]),
            captured=piece_from_dict(captured) if captured else None,
            flag=MoveFlag[data.get("flag", "normal").upper()],
            promotion=_kind(promotion) if promotion else None,
        )

    return _decoding("move", build)


# ── Status / state ───────────────────────────────────────────────────────────


def status_to_dict(status: GameStatus) -> dict[str, Any]:
    return {
        "turn": str(status.turn),
        "in_check": status.in_check,
        "in_checkmate": status.in_checkmate,
        "in_draw": status.in_draw,
        "draw_reason": status.draw_reason.value if status.draw_reason else None,
        "halfmove_clock": status.halfmove_clock,
        "position_history": list(status.position_history),
        "last_move": move_to_dict(status.last_move) if status.last_move else None,
        "timed_out": str(status.timed_out) if status.timed_out is not None else None,
    }


def status_from_dict(data: dict[str, Any]) -> GameStatus:
    def build() -> GameStatus:
        reason = data.get("draw_reason")
        last_move = data.get("last_move")
        timed_out = data.get("timed_out")
        return GameStatus(
            turn=_color(data["turn"]),
            in_check=bool(data["in_check"]),
            in_checkmate=bool(data["in_checkmate"]),
            in_draw=bool(data["in_draw"]),
            draw_reason=DrawReason(reason) if reason else None,
            halfmove_clock=int(data["halfmove_clock"]),
            position_history=tuple(str(k) for k in data["position_history"]),
            last_move=move_from_dict(last_move) if last_move else None,
            timed_out=_color(timed_out) if timed_out else None,
        )

    return _decoding("status", build)


def clock_to_dict(snapshot: ClockSnapshot) -> dict[str, Any]:
    return {
        "white": _seconds_out(snapshot.white_seconds),
        "black": _seconds_out(snapshot.black_seconds),
        "active": str(snapshot.active) if snapshot.active is not None else None,
        "running": snapshot.running,
    }


def clock_from_dict(data: dict[str, Any]) -> ClockSnapshot:
    def build() -> ClockSnapshot:
        active = data.get("active")
        return ClockSnapshot(
            white_seconds=_seconds_in(data["white"]),
            black_seconds=_seconds_in(data["black"]),
            active=_color(active) if active else None,
            running=bool(data.get("running", False)),
        )

    return _decoding("clock", build)


def time_control_to_dict(time_control: TimeControl) -> dict[str, Any]:
    return {
        "initial": _seconds_out(time_control.initial_seconds),
        "increment": time_control.increment_seconds,
    }


def time_control_from_dict(data: dict[str, Any]) -> TimeControl:
    return _decoding(
        "time control",
        lambda: TimeControl(
            _seconds_in(data["initial"]), float(data.get("increment", 0.0))
        ),
    )


def state_to_dict(state: GameState) -> dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "board": board_to_dict(state.board),
        "status": status_to_dict(state.status),
        "moves": [move_to_dict(m) for m in state.moves],
    }


def state_from_dict(data: dict[str, Any]) -> GameState:
    version = data.get("version") if isinstance(data, dict) else None
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version: {version!r}")
    return _decoding(
        "game",
        lambda: GameState(
            board=board_from_dict(data["board"]),
            status=status_from_dict(data["status"]),
            moves=tuple(move_from_dict(m) for m in data["moves"]),
        ),
    )


# ── Saved games ──────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class SavedGame:
    """A game together with the clock it was played on.

    Untimed games carry ``None`` for both clock fields.
    """

    state: GameState
    time_control: TimeControl | None = None
    clock: ClockSnapshot | None = None


def game_to_dict(saved: SavedGame) -> dict[str, Any]:
    """:func:`state_to_dict` plus ``time_control`` and ``clock`` entries."""
    data = state_to_dict(saved.state)
    tc, clock = saved.time_control, saved.clock
    data["time_control"] = time_control_to_dict(tc) if tc is not None else None
    data["clock"] = clock_to_dict(clock) if clock is not None else None
    return data


def game_from_dict(data: dict[str, Any]) -> SavedGame:
    state = state_from_dict(data)
    tc = data.get("time_control")
    clock = data.get("clock")
    return SavedGame(
        state=state,
        time_control=time_control_from_dict(tc) if tc else None,
        clock=clock_from_dict(clock) if clock else None,
    )


def _parse(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"Snapshot is not valid JSON: {exc}") from exc


def dumps_state(state: GameState) -> str:
    """Serialise *state* to a JSON string."""
    return json.dumps(state_to_dict(state))


def loads_state(text: str) -> GameState:
    """Inverse of :func:`dumps_state`.

    Also accepts :func:`dumps_game` output and ignores its clock.

    Raises:
        SnapshotError: *text* is not valid JSON or not a game snapshot.
    """
    state = state_from_dict(_parse(text))
    _LOGGER.debug("Loaded game snapshot after %d plies", state.ply_count)
    return state


def dumps_game(saved: SavedGame) -> str:
    return json.dumps(game_to_dict(saved))


def loads_game(text: str) -> SavedGame:
    """Inverse of :func:`dumps_game`; plain state snapshots load as untimed."""
    saved = game_from_dict(_parse(text))
    _LOGGER.debug(
        "Loaded game snapshot after %d plies (time control: %s)",
        saved.state.ply_count,
        saved.time_control,
    )
    return saved
