"""
Game session: history of board snapshots, a current pointer, and turn ownership.

The session is one owned, passable object. Win/draw/in-progress is never
stored: `status()` derives it from the current board each time. The side to
move comes from pointer parity (even ply -> X). Invalid requests are
rejected as no-ops (methods return False/None) rather than raised.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

from .board import (
    MARKS,
    O,
    X,
    Board,
    apply_move,
    empty_board,
    is_full,
    is_index,
    legal_moves,
    mark_symbol,
    winner,
)
from .errors import InvalidHistoryIndex
from .search import best_move


class GameMode(str, Enum):
    HUMAN_VS_HUMAN = "human"
    HUMAN_VS_COMPUTER = "ai"


class Outcome(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class Status:
    """Derived game status.

    `mark` is the side to move while in progress, the winner once won, and
    None for a draw.
    """
    outcome: Outcome
    mark: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not Outcome.IN_PROGRESS

    def describe(self) -> str:
        if self.outcome is Outcome.WON:
            return "Winner: " + mark_symbol(self.mark)
        if self.outcome is Outcome.DRAW:
            return "It's a draw!"
        return "Next player: " + mark_symbol(self.mark)


@dataclass(frozen=True)
class Ticket:
    """Identifies the exact session state a deferred computer move was issued for."""
    generation: int
    pointer: int
    board: Board


class Session:
    def __init__(
        self,
        mode: Union[GameMode, str] = GameMode.HUMAN_VS_HUMAN,
        computer_mark: Optional[int] = None,
    ):
        self.mode = GameMode.HUMAN_VS_HUMAN
        self.computer_mark: Optional[int] = None
        self._history: List[Board] = [empty_board()]
        self._pointer = 0
        self._generation = 0
        self.reset(mode, computer_mark)

    # --- read-only views -------------------------------------------------

    def current_board(self) -> Board:
        return self._history[self._pointer]

    @property
    def pointer(self) -> int:
        return self._pointer

    def history(self) -> Tuple[Board, ...]:
        return tuple(self._history)

    def history_length(self) -> int:
        return len(self._history)

    def moves(self) -> List[Tuple[int, int, int]]:
        """(ply, index, mark) for every recorded ply, derived from consecutive states."""
        out = []
        for ply in range(1, len(self._history)):
            prev, cur = self._history[ply - 1], self._history[ply]
            idx = next(i for i in range(9) if prev[i] != cur[i])
            out.append((ply, idx, cur[idx]))
        return out

    def current_player(self) -> int:
        return X if self._pointer % 2 == 0 else O

    def status(self) -> Status:
        board = self.current_board()
        w = winner(board)
        if w is not None:
            return Status(Outcome.WON, w)
        if is_full(board):
            return Status(Outcome.DRAW)
        return Status(Outcome.IN_PROGRESS, self.current_player())

    def is_computer_turn(self) -> bool:
        return (
            self.mode is GameMode.HUMAN_VS_COMPUTER
            and self.current_player() == self.computer_mark
            and not self.status().is_terminal
        )

    def ticket(self) -> Ticket:
        return Ticket(self._generation, self._pointer, self.current_board())

    # --- transitions -----------------------------------------------------

    def play(self, index: int) -> bool:
        """Play `index` for the human whose turn it is. Returns False if rejected."""
        if self.status().is_terminal:
            logging.debug("rejected move %r: game is over", index)
            return False
        if self.is_computer_turn():
            logging.debug("rejected move %r: computer move pending", index)
            return False
        board = self.current_board()
        if not is_index(index) or index not in legal_moves(board):
            logging.debug("rejected move %r: not a legal cell", index)
            return False
        self._push(apply_move(board, int(index), self.current_player()))
        return True

    def computer_turn(self, ticket: Optional[Ticket] = None) -> Optional[int]:
        """Let the computer move if it owns the turn. Returns the index played, or None.

        With a `ticket`, the move is discarded unless the session is still in
        the state the ticket was issued for.
        """
        if ticket is not None and ticket != self.ticket():
            logging.debug(
                "discarding stale computer move (issued gen=%d ply=%d, now gen=%d ply=%d)",
                ticket.generation, ticket.pointer, self._generation, self._pointer,
            )
            return None
        if not self.is_computer_turn():
            return None
        board = self.current_board()
        mv = best_move(board, self.computer_mark)
        if mv is None:
            return None
        self._push(apply_move(board, mv, self.computer_mark))
        logging.debug("computer %s played %d", mark_symbol(self.computer_mark), mv)
        return mv

    def jump_to(self, history_index: int) -> bool:
        """Move the pointer to a recorded ply without touching history."""
        if not is_index(history_index) or not 0 <= history_index < len(self._history):
            logging.debug("rejected jump to %r: history has %d states", history_index, len(self._history))
            return False
        if history_index != self._pointer:
            self._pointer = int(history_index)
            self._generation += 1
        return True

    def require_jump(self, history_index: int) -> None:
        """Like `jump_to`, but raise InvalidHistoryIndex instead of returning False."""
        if not self.jump_to(history_index):
            raise InvalidHistoryIndex(
                f"History index {history_index!r} outside [0, {len(self._history) - 1}]"
            )

    def reset(
        self,
        mode: Union[GameMode, str, None] = None,
        computer_mark: Optional[int] = None,
    ) -> None:
        """Start over from the empty board; mode and computer mark are fixed until the next reset."""
        mode = GameMode(mode) if mode is not None else self.mode
        if mode is GameMode.HUMAN_VS_COMPUTER:
            mark = computer_mark if computer_mark is not None else (self.computer_mark or O)
            if mark not in MARKS:
                raise ValueError(f"Unknown computer mark: {mark!r}")
        else:
            mark = None
        self.mode = mode
        self.computer_mark = mark
        self._history = [empty_board()]
        self._pointer = 0
        self._generation += 1
        logging.debug("session reset mode=%s computer=%s", mode.value, mark_symbol(mark))

    def _push(self, board: Board) -> None:
        # moving from a past ply abandons the forward branch
        del self._history[self._pointer + 1:]
        self._history.append(board)
        self._pointer = len(self._history) - 1
        self._generation += 1


def new_session(mode: Union[GameMode, str] = GameMode.HUMAN_VS_HUMAN, computer_mark: Optional[int] = None) -> Session:
    return Session(mode, computer_mark)
