"""Durable sequence catalog plus the "selected sequence" pointer.

Persistence
-----------
Two keys in the shared key-value table:

``timerSequences``       JSON catalog (see ``models`` for the format).
``currentSequenceId``    Selected sequence id as a plain string.

Every mutation rewrites the whole catalog (last writer wins).  A missing
catalog is seeded with the starter sequences.  A catalog that fails to
decode, or cannot be read at all, is replaced by the starter catalog in
memory only; after a read failure nothing is written until the next
successful load.  Writes that fail are logged and swallowed, leaving the
in-memory catalog authoritative for the rest of the process.

Signals
-------
sequences_changed()
    Emitted after any change to the catalog contents.
selection_changed(selected_id: str | None)
    Emitted when the selected id changes (including to ``None``).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace

from PyQt6.QtCore import QObject, pyqtSignal
from sqlalchemy.exc import SQLAlchemyError

from ..database.db import read_value, write_value, delete_value
from .models import (
    CatalogDecodeError,
    Outcome,
    Sequence,
    Stage,
    decode_sequences,
    default_sequences,
    encode_sequences,
    normalize_id,
    utcnow,
)

log = logging.getLogger(__name__)

SEQUENCES_KEY = "timerSequences"
SELECTED_KEY = "currentSequenceId"

DEFAULT_STAGE_NAME = "Timer"
COPY_SUFFIX = " Copy"


def _id_of(sequence: Sequence | str) -> str:
    return sequence if isinstance(sequence, str) else sequence.id


class SequenceStore(QObject):
    """Write-through CRUD over the sequence catalog."""

    sequences_changed = pyqtSignal()
    selection_changed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        default_stage_name: str = DEFAULT_STAGE_NAME,
        copy_suffix: str = COPY_SUFFIX,
    ) -> None:
        super().__init__(parent)
        self._default_stage_name = default_stage_name
        self._copy_suffix = copy_suffix

        self._sequences: list[Sequence] = []
        self._selected_id: str | None = None
        self._write_lock = threading.Lock()
        self._persist_enabled = True

    # ══════════════════════════════════════════════════════════════════
    #  QUERIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def sequences(self) -> tuple[Sequence, ...]:
        return tuple(self._sequences)

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def selected_sequence(self) -> Sequence | None:
        """Live snapshot of the selected record (reflects later updates)."""
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    def get(self, sequence_id: str) -> Sequence | None:
        index = self._index_of(sequence_id)
        return self._sequences[index] if index is not None else None

    def find_by_name(self, name: str) -> Sequence | None:
        """First sequence whose name matches, case-insensitively."""
        wanted = name.casefold()
        for seq in self._sequences:
            if seq.name.casefold() == wanted:
                return seq
        return None

    def recent_sequences(self) -> list[Sequence]:
        """Catalog ordered by ``last_used``, most recent first."""
        return sorted(self._sequences, key=lambda s: s.last_used, reverse=True)

    # ══════════════════════════════════════════════════════════════════
    #  PERSISTENCE
    # ══════════════════════════════════════════════════════════════════

    def load(self) -> None:
        """Read the catalog and selection; fall back to defaults when unusable.

        Only an absent catalog key seeds storage.  When the read itself fails
        the defaults live in memory and writes stay off until the next
        successful ``load``, so a transient error never overwrites the
        stored catalog.  An undecodable catalog is likewise left in place.
        """
        try:
            raw = read_value(SEQUENCES_KEY)
        except SQLAlchemyError:
            log.warning(
                "Could not read sequence catalog; changes will not be saved",
                exc_info=True,
            )
            self._persist_enabled = False
            self._sequences = default_sequences()
            self.sequences_changed.emit()
            first = self._sequences[0].id if self._sequences else None
            self._set_selected(first, force_emit=True)
            return

        self._persist_enabled = True
        sequences: list[Sequence] | None = None
        if raw is not None:
            try:
                sequences = decode_sequences(raw)
            except CatalogDecodeError as exc:
                log.warning("Ignoring unreadable sequence catalog: %s", exc)

        if sequences is not None:
            self._sequences = sequences
        else:
            self._sequences = default_sequences()
            if raw is None:
                # Persist the seed so every front-end sees the same ids.
                log.info("Seeded %d default sequences", len(self._sequences))
                self.save()

        try:
            raw_selected = read_value(SELECTED_KEY)
        except SQLAlchemyError:
            log.warning("Could not read selected sequence id", exc_info=True)
            raw_selected = None

        selected_id = normalize_id(raw_selected) if raw_selected is not None else None
        if selected_id is not None and self._index_of(selected_id) is None:
            log.debug("Stored selection %s no longer exists", raw_selected)
            selected_id = None
        if selected_id is None and self._sequences:
            selected_id = self._sequences[0].id

        self.sequences_changed.emit()
        catalog_stored = sequences is not None or raw is None
        self._set_selected(
            selected_id,
            force_emit=True,
            persist=catalog_stored and raw_selected != selected_id,
        )

    def save(self) -> None:
        """Persist the full catalog.  Failures are logged, never raised."""
        if not self._persist_enabled:
            log.warning("Not saving sequence catalog: last load failed")
            return
        with self._write_lock:
            try:
                write_value(SEQUENCES_KEY, encode_sequences(self._sequences))
            except (SQLAlchemyError, OSError, TypeError, ValueError):
                log.warning("Could not save sequence catalog", exc_info=True)

    def _save_selection(self) -> None:
        if not self._persist_enabled:
            return
        with self._write_lock:
            try:
                if self._selected_id is None:
                    delete_value(SELECTED_KEY)
                else:
                    write_value(SELECTED_KEY, self._selected_id)
            except SQLAlchemyError:
                log.warning("Could not save selected sequence id", exc_info=True)

    # ══════════════════════════════════════════════════════════════════
    #  SEQUENCE MUTATIONS
    # ══════════════════════════════════════════════════════════════════

    def add_sequence(self, name: str) -> Sequence:
        """Create an empty sequence, select it and persist."""
        sequence = Sequence(name=name)
        self._sequences.append(sequence)
        self._commit()
        self._set_selected(sequence.id)
        return sequence

    def update_sequence(self, sequence: Sequence) -> Outcome:
        """Replace the stored record that has ``sequence.id``.

        Rejected without touching storage when two stages share an id, or
        when a new or edited stage is shorter than one second.
        """
        index = self._index_of(sequence.id)
        if index is None:
            return Outcome.NOT_FOUND
        if len({s.id for s in sequence.stages}) != sequence.stage_count:
            return Outcome.DUPLICATE_STAGE_ID
        unchanged = set(self._sequences[index].stages)
        if any(s.duration < 1 and s not in unchanged for s in sequence.stages):
            return Outcome.INVALID_DURATION
        self._sequences[index] = sequence
        self._commit()
        return Outcome.OK

    def delete_sequence(self, sequence: Sequence | str) -> Outcome:
        sequence_id = _id_of(sequence)
        index = self._index_of(sequence_id)
        if index is None:
            return Outcome.NOT_FOUND
        del self._sequences[index]
        self._commit()

        if self._selected_id == sequence_id:
            fallback = self._sequences[0].id if self._sequences else None
            self._set_selected(fallback)
        return Outcome.OK

    def duplicate_sequence(self, sequence: Sequence | str) -> Sequence | None:
        """Append a deep copy with new ids.  The copy is not selected."""
        source = self.get(_id_of(sequence))
        if source is None:
            return None
        copy = source.duplicate(self._copy_suffix)
        self._sequences.append(copy)
        self._commit()
        return copy

    def select_sequence(self, sequence: Sequence | str) -> Outcome:
        """Select a sequence and stamp its ``last_used`` time."""
        sequence_id = _id_of(sequence)
        index = self._index_of(sequence_id)
        if index is None:
            return Outcome.NOT_FOUND
        self._sequences[index] = replace(self._sequences[index], last_used=utcnow())
        self._commit()
        self._set_selected(sequence_id)
        return Outcome.OK

    def rename_sequence(self, sequence_id: str, name: str) -> Outcome:
        sequence = self.get(sequence_id)
        if sequence is None:
            return Outcome.NOT_FOUND
        return self.update_sequence(sequence.renamed(name))

    # ══════════════════════════════════════════════════════════════════
    #  STAGE MUTATIONS
    # ══════════════════════════════════════════════════════════════════

    def add_stage(self, sequence_id: str, name: str, duration: int) -> Outcome:
        """Append a stage.  An empty name gets the default label."""
        sequence = self.get(sequence_id)
        if sequence is None:
            return Outcome.NOT_FOUND
        if duration < 1:
            return Outcome.INVALID_DURATION
        stage = Stage(name=name or self._default_stage_name, duration=duration)
        return self.update_sequence(sequence.with_stage(stage))

    def remove_stage(self, sequence_id: str, stage_id: str) -> Outcome:
        sequence = self.get(sequence_id)
        if sequence is None or sequence.stage_index(stage_id) is None:
            return Outcome.NOT_FOUND
        return self.update_sequence(sequence.without_stage(stage_id))

    def move_stage(self, sequence_id: str, from_index: int, to_index: int) -> Outcome:
        """Reorder: the stage at *from_index* ends up at *to_index*."""
        sequence = self.get(sequence_id)
        if sequence is None:
            return Outcome.NOT_FOUND
        count = sequence.stage_count
        if not (0 <= from_index < count and 0 <= to_index < count):
            return Outcome.INVALID_INDEX
        if from_index == to_index:
            return Outcome.OK
        return self.update_sequence(sequence.with_stage_moved(from_index, to_index))

    def update_stage(
        self,
        sequence_id: str,
        stage_id: str,
        *,
        name: str | None = None,
        duration: int | None = None,
    ) -> Outcome:
        """Edit a stage's name and/or duration in place."""
        sequence = self.get(sequence_id)
        if sequence is None:
            return Outcome.NOT_FOUND
        index = sequence.stage_index(stage_id)
        if index is None:
            return Outcome.NOT_FOUND
        if duration is not None and duration < 1:
            return Outcome.INVALID_DURATION

        current = sequence.stages[index]
        stage = Stage(
            name=current.name if name is None else name,
            duration=current.duration if duration is None else duration,
            id=current.id,
        )
        return self.update_sequence(sequence.with_stage_replaced(stage))

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _index_of(self, sequence_id: str) -> int | None:
        for i, seq in enumerate(self._sequences):
            if seq.id == sequence_id:
                return i
        return None

    def _commit(self) -> None:
        self.save()
        self.sequences_changed.emit()

    def _set_selected(
        self,
        sequence_id: str | None,
        *,
        force_emit: bool = False,
        persist: bool = True,
    ) -> None:
        changed = sequence_id != self._selected_id
        self._selected_id = sequence_id
        if persist:
            self._save_selection()
        if changed or force_emit:
            self.selection_changed.emit(sequence_id)
