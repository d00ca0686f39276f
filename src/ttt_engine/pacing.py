"""
Deferred computer move.

The computer's reply is paced by a short delay on the asyncio event loop.
Each armed move carries the session Ticket it was issued for; when the timer
fires the session re-checks the ticket and drops the move if a reset, jump or
other move happened in between. Human input during the delay is rejected by
Session.play through the turn-ownership check.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from .session import Session, Ticket

DEFAULT_DELAY = 0.5


class ComputerTurnScheduler:
    def __init__(
        self,
        session: Session,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        delay: float = DEFAULT_DELAY,
        on_move: Optional[Callable[[int], None]] = None,
    ):
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.session = session
        self.loop = loop if loop is not None else asyncio.get_running_loop()
        self.delay = delay
        self.on_move = on_move
        self._handle: Optional[asyncio.TimerHandle] = None
        self._ticket: Optional[Ticket] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> bool:
        """Arm a computer move for the current state. Returns True if a new move was armed.

        A move still armed for an earlier state is cancelled first, so
        `pending` never outlives the state it was issued for.
        """
        ticket = self.session.ticket()
        if self._handle is not None:
            if self._ticket == ticket:
                return False
            self.cancel()
        if not self.session.is_computer_turn():
            return False
        self._ticket = ticket
        self._handle = self.loop.call_later(self.delay, self._fire, ticket)
        logging.debug("computer move armed for ply %d (delay=%.3fs)", ticket.pointer, self.delay)
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            logging.debug("pending computer move cancelled")
        self._handle = None
        self._ticket = None

    def _fire(self, ticket: Ticket) -> None:
        self._handle = None
        self._ticket = None
        mv = self.session.computer_turn(ticket)
        if mv is not None and self.on_move is not None:
            self.on_move(mv)
