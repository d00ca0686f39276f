"""
Exhaustive minimax search for the computer's move.

The computer is always the maximizing root player, whichever mark it holds.
Scores are depth-weighted from the root's children (depth 0 is the position
right after the candidate move):
- computer has won:  +(10 - depth)
- opponent has won:  -(10 - depth)
- full board, no winner: 0
so faster wins and slower losses are preferred.
Tie-break: candidates are tried in ascending index order and only a strict
improvement replaces the current best, so the lowest index wins ties.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Tuple

from .board import Board, apply_move, is_full, legal_moves, opponent, winner

WIN_SCORE = 10


@lru_cache(maxsize=None)
def _score(board: Board, depth: int, maximizing: bool, computer_mark: int) -> int:
    w = winner(board)
    if w == computer_mark:
        return WIN_SCORE - depth
    if w is not None:
        return depth - WIN_SCORE
    if is_full(board):
        return 0
    if maximizing:
        return max(
            _score(apply_move(board, mv, computer_mark), depth + 1, False, computer_mark)
            for mv in legal_moves(board)
        )
    human_mark = opponent(computer_mark)
    return min(
        _score(apply_move(board, mv, human_mark), depth + 1, True, computer_mark)
        for mv in legal_moves(board)
    )


def move_scores(board: Board, computer_mark: int) -> Tuple[Optional[int], ...]:
    """Minimax score of every cell for `computer_mark`; None for occupied cells."""
    opponent(computer_mark)  # validates the mark
    scores: list = [None] * 9
    for mv in legal_moves(board):
        child = apply_move(board, mv, computer_mark)
        scores[mv] = _score(child, 0, False, computer_mark)
    return tuple(scores)


def best_move(board: Board, computer_mark: int) -> Optional[int]:
    """Index of an optimal move for `computer_mark`, or None if the board is full.

    Callers must not ask for a move on a board that is already won.
    """
    scores = move_scores(board, computer_mark)
    best: Optional[int] = None
    best_score: Optional[int] = None
    for mv, s in enumerate(scores):
        if s is None:
            continue
        if best_score is None or s > best_score:
            best, best_score = mv, s
    logging.debug("best_move mark=%d move=%s score=%s scores=%s", computer_mark, best, best_score, list(scores))
    return best


def position_value(board: Board, computer_mark: int) -> int:
    """Minimax value of `board` with `computer_mark` to move.

    Terminal boards are scored directly at depth 0.
    """
    if winner(board) is not None or is_full(board):
        return _score(board, 0, True, computer_mark)
    return max(s for s in move_scores(board, computer_mark) if s is not None)
