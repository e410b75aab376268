"""Tests for JSON game snapshots."""

import json

import pytest

from chesslogic.core.board import Board
from chesslogic.core.enums import Color, PieceType
from chesslogic.core.errors import SnapshotError
from chesslogic.core.types import A7, A8, D5, D6, D7, E2, E4, E5, F6, G8
from chesslogic.game.clock import Clock
from chesslogic.game.interfaces import TimeControl
from chesslogic.game.persistence import (
    SNAPSHOT_VERSION,
    board_from_dict,
    board_to_dict,
    SavedGame,
    clock_from_dict,
    clock_to_dict,
    dumps_game,
    dumps_state,
    game_to_dict,
    loads_game,
    loads_state,
    state_to_dict,
    time_control_from_dict,
    time_control_to_dict,
)
from chesslogic.game.state import GameState


def _open_file_game() -> GameState:
    state = GameState.new()
    for from_sq, to_sq in ((E2, E4), (G8, F6), (E4, E5), (D7, D5)):
        state = state.play_squares(from_sq, to_sq)
    return state


class TestStateSnapshots:
    def test_resume_keeps_en_passant(self) -> None:
        state = _open_file_game()
        loaded = loads_state(dumps_state(state))
        assert loaded == state
        assert loaded.status.position_history == state.status.position_history
        resumed = loaded.play_squares(E5, D6)
        assert resumed.board[D5] is None

    def test_ids_survive(self) -> None:
        state = GameState.new(Board.from_placement("4k3/P7/8/8/8/8/8/4K3"))
        state = state.play_squares(A7, A8, PieceType.ROOK)
        loaded = loads_state(dumps_state(state))
        original, rook = state.board[A8], loaded.board[A8]
        assert original is not None and rook is not None
        assert rook.piece_type == PieceType.ROOK
        assert rook.piece_id == original.piece_id
        assert loaded.moves[-1].promotion == PieceType.ROOK

    def test_timeout_survives(self) -> None:
        state = GameState.new().timeout(Color.BLACK)
        loaded = loads_state(dumps_state(state))
        assert loaded.status.timed_out == Color.BLACK
        assert loaded.is_over

    def test_repetition_counts_rebuilt(self) -> None:
        state = _open_file_game()
        loaded = loads_state(dumps_state(state))
        key = loaded.board.canonical_key()
        assert loaded.status.repetitions(key) == 1

    def test_version_recorded(self) -> None:
        assert state_to_dict(GameState.new())["version"] == SNAPSHOT_VERSION


class TestMalformed:
    def test_not_json(self) -> None:
        with pytest.raises(SnapshotError, match="not valid JSON"):
            loads_state("{nope")

    def test_wrong_version(self) -> None:
        data = state_to_dict(GameState.new())
        data["version"] = SNAPSHOT_VERSION + 1
        with pytest.raises(SnapshotError, match="version"):
            loads_state(json.dumps(data))

    def test_bad_piece(self) -> None:
        data = state_to_dict(GameState.new())
        data["board"]["pieces"][0]["kind"] = "dragon"
        with pytest.raises(SnapshotError):
            loads_state(json.dumps(data))

    def test_bad_square(self) -> None:
        with pytest.raises(SnapshotError):
            board_from_dict(
                {"pieces": [{"id": 0, "color": "white", "kind": "king", "square": "z9"}]}
            )

    def test_duplicate_square(self) -> None:
        piece = {"id": 0, "color": "white", "kind": "king", "square": "e1"}
        with pytest.raises(SnapshotError):
            board_from_dict({"pieces": [piece, {**piece, "id": 1}]})

    def test_snapshot_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            loads_state("[]")


class TestBoardAndClock:
    def test_board(self, initial_board: Board) -> None:
        assert board_from_dict(board_to_dict(initial_board)) == initial_board

    def test_clock(self) -> None:
        clock = Clock(TimeControl(180, 2))
        clock.start(Color.WHITE)
        clock.tick(3)
        snap = clock_from_dict(clock_to_dict(clock.snapshot()))
        assert snap == clock.snapshot()
        assert json.loads(json.dumps(clock_to_dict(snap)))["active"] == "white"

    def test_unlimited_clock_is_plain_json(self) -> None:
        clock = Clock(TimeControl.unlimited())
        clock.start(Color.WHITE)
        data = clock_to_dict(clock.snapshot())
        assert data["white"] is None
        assert clock_from_dict(json.loads(json.dumps(data))) == clock.snapshot()

    def test_time_control(self) -> None:
        for tc in (TimeControl(180, 2), TimeControl.unlimited()):
            assert time_control_from_dict(time_control_to_dict(tc)) == tc

    def test_negative_time_control_rejected(self) -> None:
        with pytest.raises(SnapshotError):
            time_control_from_dict({"initial": -5, "increment": 0})


class TestSavedGames:
    def test_clock_written_next_to_state(self) -> None:
        clock = Clock(TimeControl(300))
        clock.start(Color.WHITE)
        clock.tick(100)
        saved = SavedGame(_open_file_game(), TimeControl(300), clock.snapshot())
        data = game_to_dict(saved)
        assert data["clock"]["white"] == 200.0
        assert data["time_control"] == {"initial": 300, "increment": 0.0}
        assert loads_game(json.dumps(data)) == saved

    def test_untimed(self) -> None:
        saved = SavedGame(_open_file_game())
        data = game_to_dict(saved)
        assert data["clock"] is None and data["time_control"] is None
        assert loads_game(dumps_game(saved)) == saved

    def test_state_loader_ignores_clock(self) -> None:
        state = _open_file_game()
        text = dumps_game(SavedGame(state, TimeControl(60), None))
        assert loads_state(text) == state

    def test_plain_state_snapshot_loads_untimed(self) -> None:
        state = _open_file_game()
        saved = loads_game(dumps_state(state))
        assert saved.state == state
        assert saved.time_control is None and saved.clock is None

    def test_bad_clock(self) -> None:
        data = game_to_dict(SavedGame(GameState.new(), TimeControl(60), None))
        data["clock"] = {"white": "soon"}
        with pytest.raises(SnapshotError):
            loads_game(json.dumps(data))
