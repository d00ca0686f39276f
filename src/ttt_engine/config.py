"""Front-end configuration.

Environment-first with plain defaults, like the path helpers this package
grew out of. Only the CLI reads these; the engine core takes explicit
arguments and never consults the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .board import O, X
from .pacing import DEFAULT_DELAY
from .session import GameMode


def computer_delay() -> float:
    """Seconds the computer waits before moving: TTT_COMPUTER_DELAY or 0.5."""
    raw = os.getenv("TTT_COMPUTER_DELAY")
    if not raw:
        return DEFAULT_DELAY
    try:
        value = float(raw)
    except ValueError:
        logging.warning("Ignoring non-numeric TTT_COMPUTER_DELAY=%r", raw)
        return DEFAULT_DELAY
    if value < 0:
        logging.warning("Ignoring negative TTT_COMPUTER_DELAY=%r", raw)
        return DEFAULT_DELAY
    return value


@dataclass
class PlayConfig:
    mode: GameMode = GameMode.HUMAN_VS_COMPUTER
    computer_mark: Optional[int] = O
    delay: float = field(default_factory=computer_delay)


@dataclass
class ArenaArgs:
    games: int = 100  # per engine mark
    engine_marks: List[int] = field(default_factory=lambda: [X, O])
    epsilon: float = 1.0  # probability the opponent plays a random move
    seed: Optional[int] = None
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")
