"""
Board model: representation, serialization, rules, winner/draw checks, validity.
Notes:
- A board is a tuple of 9 cells, row-major: 0=empty, 1=X, 2=O. X always starts.
- Tuples are immutable, so a board is always a snapshot; moves return new tuples.
- A "ply" is a half-move (one player's turn).
"""
from __future__ import annotations

import numbers
from typing import Iterable, List, Optional, Tuple

from .errors import InvalidMove

EMPTY = 0
X = 1
O = 2

MARKS = (X, O)

Board = Tuple[int, ...]

WIN_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

_SYMBOLS = {EMPTY: '.', X: 'X', O: 'O'}
_PARSE = {
    '0': EMPTY, '.': EMPTY, '-': EMPTY, '_': EMPTY,
    '1': X, 'X': X,
    '2': O, 'O': O,
}


def is_index(value: object) -> bool:
    """True for integral values (including numpy integers) other than bool."""
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def empty_board() -> Board:
    return (EMPTY,) * 9


def opponent(mark: int) -> int:
    if mark not in MARKS:
        raise ValueError(f"Unknown mark: {mark!r}")
    return O if mark == X else X


def mark_symbol(mark: Optional[int]) -> str:
    """'X', 'O' or '.' for empty/None."""
    return _SYMBOLS.get(mark or EMPTY, '?')


def winner(board: Board) -> Optional[int]:
    for a, b, c in WIN_LINES:
        v = board[a]
        if v != EMPTY and v == board[b] and v == board[c]:
            return v
    return None


def winning_line(board: Board) -> Optional[Tuple[int, int, int]]:
    for line in WIN_LINES:
        a, b, c = line
        if board[a] != EMPTY and board[a] == board[b] == board[c]:
            return line
    return None


def is_full(board: Board) -> bool:
    return EMPTY not in board


def is_terminal(board: Board) -> bool:
    return winner(board) is not None or is_full(board)


def is_draw(board: Board) -> bool:
    return is_full(board) and winner(board) is None


def legal_moves(board: Board) -> List[int]:
    return [i for i, v in enumerate(board) if v == EMPTY]


def apply_move(board: Board, index: int, mark: int) -> Board:
    """Return a copy of `board` with `index` set to `mark`.

    Raises InvalidMove when the index is not in [0, 8], the target cell is
    occupied, or `mark` is not X/O. The input board is never modified.
    """
    if mark not in MARKS:
        raise InvalidMove(f"Unknown mark: {mark!r}")
    if not is_index(index) or not 0 <= index <= 8:
        raise InvalidMove(f"Cell index out of range [0, 8]: {index!r}")
    index = int(index)
    if board[index] != EMPTY:
        raise InvalidMove(f"Cell {index} is already occupied by {mark_symbol(board[index])}")
    lst = list(board)
    lst[index] = mark
    return tuple(lst)


def piece_counts(board: Iterable[int]) -> Tuple[int, int]:
    cells = list(board)
    return cells.count(X), cells.count(O)


def side_to_move(board: Board) -> int:
    x, o = piece_counts(board)
    return X if x == o else O


def is_valid_state(board: Board) -> bool:
    """True if the board can arise from legal play starting from the empty board."""
    if len(board) != 9 or any(v not in (EMPTY, X, O) for v in board):
        return False
    x_count, o_count = piece_counts(board)
    if not (x_count == o_count or x_count == o_count + 1):
        return False
    w = winner(board)
    if w == X and x_count != o_count + 1:
        return False
    if w == O and x_count != o_count:
        return False

    # no double winners
    def count_wins(p: int) -> int:
        return sum(1 for line in WIN_LINES if all(board[i] == p for i in line))

    if count_wins(X) > 0 and count_wins(O) > 0:
        return False
    return True


def serialize_board(board: Board) -> str:
    return ''.join(str(cell) for cell in board)


def parse_board(raw: str) -> Board:
    """Parse a 9-character board string.

    Accepts digits (0=empty, 1=X, 2=O) and symbols ('.', '-', '_' for empty,
    'X'/'O' in either case). Raises ValueError on anything else.
    """
    raw = raw.strip()
    if len(raw) != 9:
        raise ValueError(f"Board string must have 9 cells, got {len(raw)}: {raw!r}")
    cells = []
    for ch in raw:
        v = _PARSE.get(ch.upper())
        if v is None:
            raise ValueError(f"Invalid cell character {ch!r} in {raw!r}")
        cells.append(v)
    return tuple(cells)


def format_board(board: Board) -> str:
    rows = [' '.join(mark_symbol(v) for v in board[r * 3:r * 3 + 3]) for r in range(3)]
    return '\n'.join(rows)
