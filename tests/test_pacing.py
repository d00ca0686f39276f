import asyncio

import pytest

from ttt_engine.board import O, X
from ttt_engine.cli import status_line
from ttt_engine.pacing import ComputerTurnScheduler
from ttt_engine.session import GameMode, Session


def test_computer_moves_after_delay():
    async def scenario():
        s = Session(GameMode.HUMAN_VS_COMPUTER, X)
        played = []
        sch = ComputerTurnScheduler(s, delay=0.01, on_move=played.append)
        assert sch.schedule()
        assert sch.pending
        # human input is rejected while the move is pending
        assert not s.play(4)
        # already armed for this state
        assert not sch.schedule()
        await asyncio.sleep(0.05)
        return s, sch, played

    s, sch, played = asyncio.run(scenario())
    assert played == [0]
    assert not sch.pending
    assert s.history_length() == 2
    assert s.current_board()[0] == X


def test_nothing_scheduled_on_human_turn():
    async def scenario():
        s = Session(GameMode.HUMAN_VS_COMPUTER, O)
        sch = ComputerTurnScheduler(s, delay=0)
        return sch.schedule(), sch.pending

    assert asyncio.run(scenario()) == (False, False)


def test_reset_before_delay_discards_move():
    async def scenario():
        s = Session(GameMode.HUMAN_VS_COMPUTER, X)
        played = []
        sch = ComputerTurnScheduler(s, delay=0.02, on_move=played.append)
        sch.schedule()
        s.reset()  # the armed move is not cancelled; its ticket is now stale
        await asyncio.sleep(0.06)
        return s, played

    s, played = asyncio.run(scenario())
    assert played == []
    assert s.history_length() == 1


def test_jump_away_before_delay_discards_move():
    async def scenario():
        s = Session(GameMode.HUMAN_VS_COMPUTER, O)
        played = []
        sch = ComputerTurnScheduler(s, delay=0.02, on_move=played.append)
        assert s.play(0)
        assert sch.schedule()
        assert s.jump_to(0)
        await asyncio.sleep(0.06)
        return s, played

    s, played = asyncio.run(scenario())
    assert played == []
    assert s.history_length() == 2
    assert s.pointer == 0


def test_schedule_after_jump_to_human_turn_clears_pending():
    async def scenario():
        s = Session(GameMode.HUMAN_VS_COMPUTER, O)
        played = []
        sch = ComputerTurnScheduler(s, delay=0.02, on_move=played.append)
        assert s.play(4)
        assert sch.schedule()
        assert s.jump_to(0)
        armed = sch.schedule()
        pending = sch.pending
        line = status_line(s, sch)
        await asyncio.sleep(0.06)
        return s, played, armed, pending, line

    s, played, armed, pending, line = asyncio.run(scenario())
    assert armed is False
    assert pending is False
    assert line == "Next player: X"
    assert played == []
    assert s.history_length() == 2


def test_cancel_drops_pending_move_and_reschedule_rearms():
    async def scenario():
        s = Session(GameMode.HUMAN_VS_COMPUTER, X)
        played = []
        sch = ComputerTurnScheduler(s, delay=0.02, on_move=played.append)
        sch.schedule()
        sch.cancel()
        assert not sch.pending
        await asyncio.sleep(0.05)
        assert played == []
        assert sch.schedule()
        await asyncio.sleep(0.05)
        return s, played

    s, played = asyncio.run(scenario())
    assert played == [0]
    assert s.history_length() == 2


def test_stale_pending_move_replaced_on_schedule():
    async def scenario():
        s = Session(GameMode.HUMAN_VS_COMPUTER, X)
        played = []
        sch = ComputerTurnScheduler(s, delay=0.02, on_move=played.append)
        sch.schedule()
        s.reset()
        # new state, new ticket: the old handle is cancelled and a new one armed
        assert sch.schedule()
        await asyncio.sleep(0.06)
        return s, played

    s, played = asyncio.run(scenario())
    assert played == [0]
    assert s.history_length() == 2


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        ComputerTurnScheduler(Session(), delay=-1)
