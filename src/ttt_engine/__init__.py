"""ttt_engine package.

Tic-tac-toe engine core: board model, exhaustive minimax search, and a game
session with history, time travel and a paced computer opponent.

Convenience imports are exposed for common workflows.
"""

from .board import EMPTY, O, X, apply_move, is_full, is_terminal, legal_moves, winner
from .errors import EngineError, InvalidHistoryIndex, InvalidMove
from .search import best_move, move_scores
from .session import GameMode, Outcome, Session, Status, new_session

__all__ = [
    "EMPTY",
    "X",
    "O",
    "winner",
    "is_full",
    "is_terminal",
    "legal_moves",
    "apply_move",
    "best_move",
    "move_scores",
    "GameMode",
    "Outcome",
    "Status",
    "Session",
    "new_session",
    "EngineError",
    "InvalidMove",
    "InvalidHistoryIndex",
]
