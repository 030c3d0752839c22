"""Sequence runner package."""

from .engine import SequenceRunner, RunState, TICK_INTERVAL_MS

__all__ = ["SequenceRunner", "RunState", "TICK_INTERVAL_MS"]
