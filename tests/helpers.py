"""Shared test helpers for NiceTimer."""

from nicetimer.runner.engine import SequenceRunner
from nicetimer.sequences.models import Sequence
from nicetimer.sequences.store import SequenceStore


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def make_sequence(
    store: SequenceStore, name: str, durations: list[int]
) -> Sequence:
    """Add and select a sequence with one stage per duration (S0, S1, …)."""
    seq = store.add_sequence(name)
    for i, d in enumerate(durations):
        store.add_stage(seq.id, f"S{i}", d)
    return store.get(seq.id)


def tick(runner: SequenceRunner, times: int = 1) -> None:
    for _ in range(times):
        runner._on_tick()
