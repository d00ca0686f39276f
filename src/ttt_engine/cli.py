from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from .board import (
    O,
    X,
    format_board,
    is_terminal,
    is_valid_state,
    mark_symbol,
    parse_board,
    side_to_move,
)
from .arena import run_arena
from .config import ArenaArgs, PlayConfig, computer_delay
from .pacing import ComputerTurnScheduler
from .search import best_move, move_scores
from .session import GameMode, Session

_MARKS = {"X": X, "O": O}

HELP_TEXT = "Commands: 1-9 play a cell, 'j N' jump to move N, 'h' history, 'r' new game, 'q' quit"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Tic-tac-toe engine CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Global seed for reproducibility")
    p.add_argument(
        "--deterministic",
        action="store_true",
        help="Enable deterministic mode (sets PYTHONHASHSEED, seeds numpy)",
    )

    p_play = sub.add_parser("play", help="Play an interactive game in the terminal")
    p_play.add_argument(
        "--mode",
        choices=[m.value for m in GameMode],
        default=GameMode.HUMAN_VS_COMPUTER.value,
        help="human: two humans share the keyboard; ai: play against the computer (default)",
    )
    p_play.add_argument(
        "--computer",
        choices=sorted(_MARKS),
        default="O",
        help="Mark the computer plays in ai mode (X moves first; default: O)",
    )
    p_play.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds before the computer moves (default: $TTT_COMPUTER_DELAY or 0.5)",
    )

    p_best = sub.add_parser("best", help="Show the engine's move and per-cell scores for a board")
    p_best.add_argument("--board", required=True, help="Board string, e.g. 100020000 or X...O....")
    p_best.add_argument(
        "--computer",
        choices=sorted(_MARKS),
        default=None,
        help="Mark the engine plays; must be the side to move (default: side to move)",
    )

    p_arena = sub.add_parser("arena", help="Pit the engine against a random opponent")
    p_arena.add_argument("--games", type=int, default=100, help="Games per engine mark (default: 100)")
    p_arena.add_argument(
        "--epsilon",
        type=float,
        default=1.0,
        help="Probability the opponent moves at random instead of optimally (default: 1.0)",
    )
    p_arena.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_arena.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs (for mlflow local backend)",
    )

    return p


def _set_global_seed(seed: Optional[int]) -> None:
    if seed is None:
        return
    import random

    import numpy as np

    random.seed(seed)
    np.random.seed(seed)


def _set_deterministic_env(seed: Optional[int]) -> None:
    import os

    if seed is not None:
        os.environ.setdefault("PYTHONHASHSEED", str(seed))
    _set_global_seed(seed)


def _print_info() -> None:
    import importlib.util
    import platform
    import sys

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def history_labels(session: Session) -> List[str]:
    labels = ["Go to game start"]
    for ply, idx, mark in session.moves():
        labels.append(f"Go to move #{ply} ({mark_symbol(mark)} at {idx + 1})")
    return [
        ("* " if i == session.pointer else "  ") + f"{i}. {label}"
        for i, label in enumerate(labels)
    ]


def status_line(session: Session, scheduler: Optional[ComputerTurnScheduler] = None) -> str:
    line = session.status().describe()
    if scheduler is not None and scheduler.pending:
        line += " (AI is thinking...)"
    return line


Reader = Callable[[str], Awaitable[str]]


async def run_play(
    cfg: PlayConfig,
    read: Optional[Reader] = None,
    write: Callable[[str], None] = print,
) -> Session:
    """Drive one interactive session until 'q' or end of input.

    Input is read off the event loop (in a worker thread by default) so the
    paced computer move can fire while the prompt is open.
    """
    loop = asyncio.get_running_loop()
    if read is None:
        async def read(prompt: str) -> str:
            return await loop.run_in_executor(None, input, prompt)

    session = Session(cfg.mode, cfg.computer_mark)

    def show() -> None:
        write(format_board(session.current_board()))
        write(status_line(session, scheduler))

    def on_move(idx: int) -> None:
        write(f"Computer ({mark_symbol(session.computer_mark)}) plays {idx + 1}")
        show()

    scheduler = ComputerTurnScheduler(session, loop, cfg.delay, on_move=on_move)
    write(HELP_TEXT)
    scheduler.schedule()
    show()
    try:
        while True:
            try:
                raw = await read("> ")
            except EOFError:
                break
            cmd = raw.strip().lower()
            if not cmd:
                continue
            if cmd in ("q", "quit"):
                break
            if cmd in ("h", "history"):
                for label in history_labels(session):
                    write(label)
                continue
            if cmd in ("r", "reset"):
                session.reset()
            elif cmd.startswith("j"):
                arg = cmd[1:].strip()
                if not arg.isdigit() or not session.jump_to(int(arg)):
                    write(f"No such move: {arg or '?'} (history has {session.history_length()} states)")
                    continue
            elif len(cmd) == 1 and cmd in "123456789":
                if not session.play(int(cmd) - 1):
                    if session.is_computer_turn():
                        write("AI is thinking... please wait")
                    elif session.status().is_terminal:
                        write("Game over. 'r' for a new game or 'j N' to revisit a move")
                    else:
                        write(f"Cell {cmd} is taken")
                    continue
            else:
                write(HELP_TEXT)
                continue
            scheduler.schedule()
            show()
    finally:
        scheduler.cancel()
    return session


def _cmd_play(ns: argparse.Namespace) -> int:
    cfg = PlayConfig(
        mode=GameMode(ns.mode),
        computer_mark=_MARKS[ns.computer],
        delay=ns.delay if ns.delay is not None else computer_delay(),
    )
    if cfg.delay < 0:
        logging.error("Delay must be >= 0: %s", cfg.delay)
        return 2
    session = asyncio.run(run_play(cfg))
    logging.debug("session ended after %d plies: %s", session.pointer, session.status().describe())
    return 0


def _cmd_best(ns: argparse.Namespace) -> int:
    try:
        board = parse_board(ns.board)
    except ValueError as e:
        logging.error("Invalid board string: %s", e)
        return 2
    if not is_valid_state(board):
        logging.error("Board is not a valid reachable state.")
        return 2
    if is_terminal(board):
        logging.error("Board is already decided; there is no move to make.")
        return 2
    mark = side_to_move(board)
    if ns.computer and _MARKS[ns.computer] != mark:
        logging.error("It is %s to move on this board, not %s.", mark_symbol(mark), ns.computer)
        return 2
    scores = move_scores(board, mark)
    mv = best_move(board, mark)
    logging.info("engine=%s board=\n%s", mark_symbol(mark), format_board(board))
    print(f"best={mv} scores={list(scores)}")
    return 0


def _cmd_arena(ns: argparse.Namespace) -> int:
    if ns.epsilon < 0.0 or ns.epsilon > 1.0:
        logging.error("Epsilon out of range [0,1]: %s", ns.epsilon)
        return 2
    if ns.games < 0:
        logging.error("Games must be >= 0: %s", ns.games)
        return 2
    summary = run_arena(ArenaArgs(
        games=ns.games,
        epsilon=ns.epsilon,
        seed=ns.seed,
        tracking=ns.tracking,
        log_dir=ns.log_dir,
    ))
    print(
        f"games={len(summary.results)} wins={summary.wins} "
        f"draws={summary.draws} losses={summary.losses}"
    )
    return 1 if summary.losses else 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("ttt-engine"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if getattr(ns, "deterministic", False) or getattr(ns, "seed", None) is not None:
        _set_deterministic_env(getattr(ns, "seed", None))

    if ns.cmd == "play":
        return _cmd_play(ns)
    if ns.cmd == "best":
        return _cmd_best(ns)
    if ns.cmd == "arena":
        return _cmd_arena(ns)

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
