"""Exception hierarchy for the rules engine."""

from __future__ import annotations


class ChessLogicError(Exception):
    """Base class for all errors raised by :mod:`chesslogic`."""


class InvalidMoveError(ChessLogicError, ValueError):
    """A requested move is not legal in the given position."""


class EngineInvariantError(ChessLogicError, RuntimeError):
    """Internal invariant violated (e.g. a piece of unknown type)."""


class SnapshotError(ChessLogicError, ValueError):
    """A persisted board or game snapshot could not be decoded."""
