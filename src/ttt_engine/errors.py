"""
Engine errors.

These are caller-rejection errors: the session checks legality up front and
turns a bad request into a no-op, so they mostly surface from the pure board
functions and from the strict session helpers.
"""


class EngineError(Exception):
    """Base class for tic-tac-toe engine errors."""


class InvalidMove(EngineError, ValueError):
    """Index out of range, cell occupied, unknown mark, or game already over."""


class InvalidHistoryIndex(EngineError, IndexError):
    """Jump target outside the recorded history."""
