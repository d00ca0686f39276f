#!/usr/bin/env python3
from __future__ import annotations

import math
import statistics as stats
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from ttt_engine.arena import run_arena
from ttt_engine.board import X, empty_board
from ttt_engine.config import ArenaArgs
from ttt_engine.search import _score, best_move
from ttt_engine.tracking import log_metrics, log_params, maybe_mlflow_run


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    seeds: int = 10
    games: int = 50
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


def main() -> int:
    cfg = Config()
    with maybe_mlflow_run(cfg.tracking == "mlflow", run_name="benchmarks", log_dir=cfg.log_dir) as tracked:
        if tracked:
            log_params({"seeds": cfg.seeds, "games": cfg.games})
        search_times: List[float] = []
        arena_times: List[float] = []
        losses = 0
        for s in range(cfg.seeds):
            _score.cache_clear()
            t0 = time.perf_counter()
            best_move(empty_board(), X)
            t1 = time.perf_counter()
            search_times.append(t1 - t0)
            t2 = time.perf_counter()
            summary = run_arena(ArenaArgs(games=cfg.games, seed=s))
            t3 = time.perf_counter()
            arena_times.append(t3 - t2)
            losses += summary.losses
        m_search, h_search = ci95(search_times)
        m_arena, h_arena = ci95(arena_times)
        metrics = {
            "search_cold_mean_s": m_search,
            "search_cold_ci95_half_s": h_search,
            "arena_mean_s": m_arena,
            "arena_ci95_half_s": h_arena,
            "losses": float(losses),
        }
        if tracked:
            log_metrics(metrics)
    print(f"best_move(empty, cold cache): mean={m_search:.4f}s ± {h_search:.4f}s (95% CI, N={cfg.seeds})")
    print(f"arena({2 * cfg.games} games): mean={m_arena:.4f}s ± {h_arena:.4f}s (95% CI, N={cfg.seeds})")
    print(f"engine losses: {losses}")
    return 1 if losses else 0


if __name__ == "__main__":
    raise SystemExit(main())
