import pytest

from ttt_engine.board import O, X, apply_move, empty_board, opponent, winner
from ttt_engine.search import best_move, move_scores, position_value


def test_empty_board_all_moves_draw_and_lowest_index_chosen():
    scores = move_scores(empty_board(), X)
    assert scores == (0,) * 9
    assert best_move(empty_board(), X) == 0


@pytest.mark.parametrize("first", range(9))
def test_no_side_can_force_a_win_after_any_opening(first):
    child = apply_move(empty_board(), first, X)
    # O to move: neither the reply side nor the opener can force a win
    assert position_value(child, O) == 0
    assert max(s for s in move_scores(child, O) if s is not None) == 0


def test_takes_immediate_win():
    b = (X, X, 0, O, O, 0, 0, 0, 0)
    scores = move_scores(b, X)
    assert scores[2] == 10
    assert best_move(b, X) == 2


def test_own_immediate_win_chosen_over_blocking_opponent_threat():
    # O threatens 2, but X completes the middle row on 5 right away.
    # The answer here is 5, not the block on 2: a win now scores higher.
    b = (O, O, 0, X, X, 0, 0, 0, 0)
    scores = move_scores(b, X)
    assert scores[5] == 10
    # blocking still wins, two plies later
    assert scores[2] == 8
    assert best_move(b, X) == 5


def test_blocks_when_no_win_available():
    b = (O, O, 0, X, 0, 0, 0, 0, X)
    scores = move_scores(b, X)
    assert best_move(b, X) == 2
    for i, s in enumerate(scores):
        if s is not None and i != 2:
            assert s == -9
    assert scores[2] > -9


def test_computer_as_o_blocks():
    b = (X, X, 0, 0, O, 0, 0, 0, 0)
    assert best_move(b, O) == 2


def test_tie_break_prefers_lowest_index():
    # X wins on 2 (top row) and on 6 (left column)
    b = (1, 1, 0, 1, 2, 2, 0, 0, 2)
    scores = move_scores(b, X)
    assert scores[2] == scores[6] == 10
    assert best_move(b, X) == 2


def test_full_board_has_no_move():
    assert best_move((1, 1, 2, 2, 2, 1, 1, 2, 1), X) is None
    assert move_scores((1, 1, 2, 2, 2, 1, 1, 2, 1), O) == (None,) * 9


def test_occupied_cells_score_none():
    b = (X, 0, 0, 0, O, 0, 0, 0, 0)
    scores = move_scores(b, X)
    assert scores[0] is None and scores[4] is None
    assert all(s is not None for i, s in enumerate(scores) if i not in (0, 4))


def test_unknown_mark_rejected():
    with pytest.raises(ValueError):
        best_move(empty_board(), 0)


def test_scores_stay_within_bounds():
    b = (X, 0, 0, 0, O, 0, 0, 0, 0)
    for mark in (X, O):
        for s in move_scores(b, mark):
            assert s is None or -10 <= s <= 10


def _engine_never_loses(board, engine_mark, to_move):
    """Explore every opponent reply; the engine answers with best_move."""
    w = winner(board)
    if w is not None:
        assert w == engine_mark, f"engine lost on {board}"
        return
    if 0 not in board:
        return
    if to_move == engine_mark:
        mv = best_move(board, engine_mark)
        _engine_never_loses(apply_move(board, mv, engine_mark), engine_mark, opponent(to_move))
        return
    for mv in (i for i, v in enumerate(board) if v == 0):
        _engine_never_loses(apply_move(board, mv, to_move), engine_mark, opponent(to_move))


@pytest.mark.parametrize("engine_mark", [X, O])
def test_engine_never_loses_against_any_reply_sequence(engine_mark):
    _engine_never_loses(empty_board(), engine_mark, X)


def test_engine_vs_engine_is_a_draw():
    b = empty_board()
    mark = X
    while winner(b) is None and 0 in b:
        b = apply_move(b, best_move(b, mark), mark)
        mark = opponent(mark)
    assert winner(b) is None
    assert 0 not in b
