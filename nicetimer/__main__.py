"""Allow running NiceTimer as a module: python -m nicetimer."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from PyQt6.QtCore import QCoreApplication

from .database.db import configure_path, init_db
from .formatting import format_clock, format_total
from .logging import setup_logging
from .runner.engine import SequenceRunner
from .sequences.models import Outcome
from .sequences.store import SequenceStore
from .settings import load_settings


def print_catalog(store: SequenceStore) -> None:
    for seq in store.sequences:
        marker = "*" if seq.id == store.selected_id else " "
        print(
            f"{marker} {seq.name}  "
            f"({seq.stage_count} timers, {format_total(seq.total_duration)})"
        )


def start_sequence(
    store: SequenceStore, runner: SequenceRunner, name: str | None
) -> Outcome:
    """Select *name* (if given) and start the runner on the selection."""
    if name:
        sequence = store.find_by_name(name)
        if sequence is None:
            return Outcome.NOT_FOUND
        store.select_sequence(sequence)
    return runner.start()


def attach_console(runner: SequenceRunner, app: QCoreApplication) -> None:
    """Print progress to stdout and quit once the sequence is done."""

    def on_tick(remaining: int) -> None:
        stage = runner.current_stage
        if stage is not None:
            print(f"\r{stage.name}: {format_clock(remaining)}  ", end="", flush=True)

    def on_stage_completed(index: int) -> None:
        sequence = runner.active_sequence
        if sequence is not None:
            print(f"\r{sequence.stages[index].name} done.")

    def on_sequence_completed() -> None:
        print("Sequence complete!")
        app.quit()

    runner.tick.connect(on_tick)
    runner.stage_completed.connect(on_stage_completed)
    runner.sequence_completed.connect(on_sequence_completed)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nicetimer",
        description="Play a named sequence of timers back-to-back.",
    )
    parser.add_argument(
        "sequence", nargs="*",
        help="sequence to run (default: the last selected one)",
    )
    parser.add_argument(
        "--list", action="store_true", help="list sequences and exit",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = load_settings()
    setup_logging(settings.log_level)

    if settings.database_path:
        configure_path(Path(settings.database_path).expanduser())
    init_db()

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("NiceTimer")
    app.setOrganizationName("NiceTimer")

    store = SequenceStore(
        default_stage_name=settings.default_stage_name,
        copy_suffix=settings.copy_suffix,
    )
    store.load()

    if args.list:
        print_catalog(store)
        return

    runner = SequenceRunner(
        store,
        interval_ms=settings.tick_interval_ms,
        stop_on_selection_change=settings.stop_on_selection_change,
    )
    attach_console(runner, app)

    name = " ".join(args.sequence) or None
    outcome = start_sequence(store, runner, name)
    if outcome is not Outcome.OK:
        print(f"Cannot start {name or 'selected sequence'}: {outcome.value}")
        sys.exit(1)

    sequence = runner.active_sequence
    print(f"Running {sequence.name} ({format_total(sequence.total_duration)})")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
