"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from chesslogic.core.applier import apply_move, find_move
from chesslogic.core.board import Board
from chesslogic.core.move import Move
from chesslogic.core.types import Square
from chesslogic.game.controller import GameController


@pytest.fixture
def initial_board() -> Board:
    return Board.initial()


@pytest.fixture
def controller() -> GameController:
    """Untimed game from the standard starting position."""
    ctrl = GameController()
    ctrl.new_game()
    return ctrl


@pytest.fixture
def push() -> Callable[[Board, Square, Square], tuple[Board, Move]]:
    """Play one move on a bare board, ignoring whose turn it is."""

    def _push(board: Board, from_sq: Square, to_sq: Square) -> tuple[Board, Move]:
        move = find_move(board, from_sq, to_sq)
        return apply_move(board, move), move

    return _push
