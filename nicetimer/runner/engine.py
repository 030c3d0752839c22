"""Run state machine for NiceTimer sequences.

States
------
IDLE       No countdown.  Also what a finished or stopped run returns to.
RUNNING    Counting down the active stage, one tick per interval.
PAUSED     Run still active, countdown frozen at the current position.

Transitions
-----------
IDLE → RUNNING              (start, needs a selected non-empty sequence)
RUNNING → RUNNING           (start again: restarts from stage 0)
RUNNING → PAUSED            (pause)
PAUSED → RUNNING            (resume)
RUNNING | PAUSED → IDLE     (stop, or the last stage reaches 0)

Only one ``QTimer`` drives a runner.  Every schedule gets a new generation
number and cancelling bumps it, so a timeout delivered after ``stop()`` or
``pause()`` returns is ignored.
"""

from __future__ import annotations

import logging
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..sequences.models import Outcome, Sequence, Stage
from ..sequences.store import SequenceStore

log = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class SequenceRunner(QObject):
    """Plays the store's selected sequence stage by stage.

    The sequence is snapshotted on ``start()``; edits made to the store
    afterwards do not affect the run in progress.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted after every tick, once index and remaining are consistent.
    state_changed(new_state: RunState)
        Emitted on every state transition.
    stage_completed(stage_index: int)
        The stage at *stage_index* just reached zero.
    sequence_completed()
        The final stage reached zero; the runner is already IDLE.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    stage_completed = pyqtSignal(int)
    sequence_completed = pyqtSignal()

    def __init__(
        self,
        store: SequenceStore,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
        stop_on_selection_change: bool = True,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._stop_on_selection_change = stop_on_selection_change

        # ── run state ─────────────────────────────────────────────────
        self._sequence: Sequence | None = None
        self._stage_index: int = 0
        self._remaining: int = 0
        self._running: bool = False

        # ── scheduling ────────────────────────────────────────────────
        self._generation: int = 0
        self._armed_generation: int | None = None

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_tick)

        store.selection_changed.connect(self._on_selection_changed)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> RunState:
        if not self._running:
            return RunState.IDLE
        if self._armed_generation is None:
            return RunState.PAUSED
        return RunState.RUNNING

    @property
    def is_running(self) -> bool:
        """True while a run is active, paused or not."""
        return self._running

    @property
    def is_paused(self) -> bool:
        return self.state == RunState.PAUSED

    @property
    def active_sequence(self) -> Sequence | None:
        """Snapshot taken at the last ``start()``."""
        return self._sequence

    @property
    def active_sequence_id(self) -> str | None:
        return self._sequence.id if self._sequence else None

    @property
    def active_stage_index(self) -> int:
        """Index of the stage counting down.

        Equals the stage count right after the sequence completes, so
        use ``current_stage`` when you need the stage itself.
        """
        return self._stage_index

    @property
    def remaining(self) -> int:
        """Seconds left on the active stage."""
        return self._remaining

    @property
    def current_stage(self) -> Stage | None:
        if self._sequence is None:
            return None
        if not 0 <= self._stage_index < self._sequence.stage_count:
            return None
        return self._sequence.stages[self._stage_index]

    @property
    def stage_duration(self) -> int:
        stage = self.current_stage
        return stage.duration if stage else 0

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the active stage."""
        duration = self.stage_duration
        if duration <= 0:
            return 0.0
        elapsed = duration - self._remaining
        return max(0.0, min(1.0, elapsed / duration))

    @property
    def total_duration(self) -> int:
        return self._sequence.total_duration if self._sequence else 0

    @property
    def elapsed(self) -> int:
        """Seconds played since ``start()`` across all stages."""
        if self._sequence is None:
            return 0
        done = sum(s.duration for s in self._sequence.stages[: self._stage_index])
        return done + max(0, self.stage_duration - self._remaining)

    @property
    def interval_ms(self) -> int:
        return self._qt_timer.interval()

    def set_interval(self, interval_ms: int) -> None:
        self._qt_timer.setInterval(interval_ms)

    @property
    def stop_on_selection_change(self) -> bool:
        return self._stop_on_selection_change

    @stop_on_selection_change.setter
    def stop_on_selection_change(self, value: bool) -> None:
        self._stop_on_selection_change = value

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> Outcome:
        """Play the selected sequence from its first stage.

        Safe to call while running: the old schedule is cancelled first.
        """
        sequence = self._store.selected_sequence
        if sequence is None:
            return Outcome.NO_SELECTION
        if not sequence.stages:
            return Outcome.EMPTY_SEQUENCE

        self._cancel()
        self._sequence = sequence
        self._stage_index = 0
        self._remaining = sequence.stages[0].duration
        self._running = True
        self._schedule()
        log.debug("Started %r (%d stages)", sequence.name, sequence.stage_count)
        self.state_changed.emit(RunState.RUNNING)
        return Outcome.OK

    def stop(self) -> None:
        """End the run.  Idempotent."""
        if not self._running:
            return
        self._cancel()
        self._running = False
        self.state_changed.emit(RunState.IDLE)

    def pause(self) -> None:
        """Freeze the countdown, keeping stage and remaining time."""
        if self.state != RunState.RUNNING:
            return
        self._cancel()
        self.state_changed.emit(RunState.PAUSED)

    def resume(self) -> None:
        """Continue a paused run from where it stopped."""
        if self.state != RunState.PAUSED:
            return
        self._schedule()
        self.state_changed.emit(RunState.RUNNING)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _schedule(self) -> None:
        self._generation += 1
        self._armed_generation = self._generation
        self._qt_timer.start()

    def _cancel(self) -> None:
        self._qt_timer.stop()
        self._generation += 1
        self._armed_generation = None

    def _on_tick(self) -> None:
        if self._armed_generation != self._generation or self._sequence is None:
            return  # cancelled; stale timeout

        self._remaining -= 1
        if self._remaining > 0:
            self.tick.emit(self._remaining)
            return

        # Advance before signalling so slots see a consistent position.
        finished = self._stage_index
        self._stage_index += 1
        last = self._stage_index >= self._sequence.stage_count
        if last:
            self._remaining = 0
            self._cancel()
            self._running = False
        else:
            self._remaining = self._sequence.stages[self._stage_index].duration

        generation = self._generation
        self.stage_completed.emit(finished)

        if last:
            log.debug("Completed %r", self._sequence.name)
            if self._generation == generation:
                self.tick.emit(0)
                self.state_changed.emit(RunState.IDLE)
            self.sequence_completed.emit()
        elif self._generation == generation:
            self.tick.emit(self._remaining)

    def _on_selection_changed(self, selected_id: object) -> None:
        if not (self._stop_on_selection_change and self._running):
            return
        if selected_id != self.active_sequence_id:
            log.info("Selection changed during a run; stopping")
            self.stop()
