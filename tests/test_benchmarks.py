from ttt_engine.arena import run_arena
from ttt_engine.board import X, empty_board
from ttt_engine.config import ArenaArgs
from ttt_engine.search import _score, best_move


def test_benchmark_best_move_from_empty_board(benchmark):
    def _search():
        _score.cache_clear()
        return best_move(empty_board(), X)

    assert benchmark(_search) == 0


def test_benchmark_small_arena(benchmark):
    summary = benchmark(lambda: run_arena(ArenaArgs(games=10, seed=0)))
    assert summary.losses == 0
