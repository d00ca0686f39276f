"""
Experiment tracking helpers (optional MLflow backend) for arena runs.

MLflow is only imported when tracking is requested, so it stays an optional
dependency. Without it the helpers log a warning once and do nothing.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

_warned = False


def _mlflow():
    global _warned
    try:
        import mlflow  # type: ignore
    except ImportError:
        if not _warned:
            logging.warning("mlflow is not installed; tracking disabled")
            _warned = True
        return None
    return mlflow


@contextmanager
def maybe_mlflow_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[bool]:
    """Yield True inside an active MLflow run, False when tracking is off or unavailable."""
    mlflow = _mlflow() if enabled else None
    if mlflow is None:
        yield False
        return
    if log_dir is not None:
        mlflow.set_tracking_uri(log_dir.resolve().joinpath("mlruns").as_uri())
    with mlflow.start_run(run_name=run_name):
        yield True


def log_params(params: Dict[str, object]) -> None:
    mlflow = _mlflow()
    if mlflow is not None and mlflow.active_run() is not None:
        mlflow.log_params(params)


def log_metrics(metrics: Dict[str, float]) -> None:
    mlflow = _mlflow()
    if mlflow is not None and mlflow.active_run() is not None:
        mlflow.log_metrics(metrics)
