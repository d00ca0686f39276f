"""
Self-play arena: the search engine against a random / epsilon-greedy opponent.

Perfect play must never lose, so the arena doubles as an end-to-end check of
the session and search modules. The opponent plays a uniformly random legal
move with probability `epsilon` and the engine's own best move otherwise.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .board import legal_moves, mark_symbol
from .config import ArenaArgs
from .search import best_move
from .session import GameMode, Outcome, Session
from .tracking import log_metrics, log_params, maybe_mlflow_run

_PLURALS = {"win": "wins", "draw": "draws", "loss": "losses"}


@dataclass
class MatchResult:
    engine_mark: int
    winner: Optional[int]
    moves: List[int]

    @property
    def plies(self) -> int:
        return len(self.moves)

    @property
    def outcome(self) -> str:
        if self.winner is None:
            return "draw"
        return "win" if self.winner == self.engine_mark else "loss"


@dataclass
class ArenaSummary:
    results: List[MatchResult] = field(default_factory=list)

    def count(self, outcome: str, engine_mark: Optional[int] = None) -> int:
        return sum(
            1 for r in self.results
            if r.outcome == outcome and (engine_mark is None or r.engine_mark == engine_mark)
        )

    @property
    def wins(self) -> int:
        return self.count("win")

    @property
    def draws(self) -> int:
        return self.count("draw")

    @property
    def losses(self) -> int:
        return self.count("loss")

    def metrics(self) -> Dict[str, float]:
        plies = np.array([r.plies for r in self.results], dtype=float)
        out: Dict[str, float] = {
            "games": float(len(self.results)),
            "wins": float(self.wins),
            "draws": float(self.draws),
            "losses": float(self.losses),
            "mean_plies": float(plies.mean()) if plies.size else 0.0,
        }
        for mark in sorted({r.engine_mark for r in self.results}):
            tag = mark_symbol(mark).lower()
            for outcome, plural in _PLURALS.items():
                out[f"{tag}_{plural}"] = float(self.count(outcome, mark))
        return out


def play_match(engine_mark: int, rng: np.random.Generator, epsilon: float = 1.0) -> MatchResult:
    """Play one game from the empty board with the engine holding `engine_mark`."""
    if not 0.0 <= epsilon <= 1.0:
        raise ValueError(f"epsilon out of range [0, 1]: {epsilon}")
    session = Session(GameMode.HUMAN_VS_COMPUTER, engine_mark)
    while not session.status().is_terminal:
        if session.is_computer_turn():
            session.computer_turn()
            continue
        board = session.current_board()
        if rng.random() < epsilon:
            legal = legal_moves(board)
            mv = legal[int(rng.integers(len(legal)))]
        else:
            mv = best_move(board, session.current_player())
        session.play(mv)
    status = session.status()
    winner = status.mark if status.outcome is Outcome.WON else None
    return MatchResult(engine_mark, winner, [idx for _, idx, _ in session.moves()])


def run_arena(args: ArenaArgs) -> ArenaSummary:
    if args.games < 0:
        raise ValueError(f"games must be >= 0, got {args.games}")
    rng = np.random.default_rng(args.seed)
    summary = ArenaSummary()
    with maybe_mlflow_run(args.tracking == "mlflow", run_name="arena", log_dir=args.log_dir) as tracked:
        if tracked:
            log_params({
                "games": args.games,
                "engine_marks": ",".join(mark_symbol(m) for m in args.engine_marks),
                "epsilon": args.epsilon,
                "seed": args.seed,
            })
        for mark in args.engine_marks:
            logging.info("Playing %d games with the engine as %s…", args.games, mark_symbol(mark))
            for _ in range(args.games):
                res = play_match(mark, rng, args.epsilon)
                if res.outcome == "loss":
                    logging.error("Engine lost as %s: moves=%s", mark_symbol(mark), res.moves)
                summary.results.append(res)
        metrics = summary.metrics()
        if tracked:
            log_metrics(metrics)
    logging.info(
        "arena games=%d wins=%d draws=%d losses=%d mean_plies=%.2f",
        len(summary.results), summary.wins, summary.draws, summary.losses, metrics["mean_plies"],
    )
    return summary
