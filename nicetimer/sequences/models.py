"""Sequence and stage value types, plus the JSON codec for the catalog.

Wire format
-----------
The catalog is a JSON array of sequence records::

    [
      {
        "id": "3f0c…",             # UUID string
        "name": "Quick Workout",
        "timers": [
          {"id": "9a1e…", "name": "Warm-up", "duration": 30},
          ...
        ],
        "lastUsed": "2026-10-18T09:30:00+00:00"
      },
      ...
    ]

``lastUsed`` is written as ISO-8601; an epoch number (seconds) is accepted
on read as well.  Anything else that does not match this shape raises
``CatalogDecodeError``.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable


# ── outcomes ──────────────────────────────────────────────────────────────


class Outcome(Enum):
    """Result of a store or runner operation whose precondition may fail."""

    OK = "ok"
    NOT_FOUND = "not_found"
    EMPTY_SEQUENCE = "empty_sequence"
    NO_SELECTION = "no_selection"
    INVALID_DURATION = "invalid_duration"
    INVALID_INDEX = "invalid_index"
    DUPLICATE_STAGE_ID = "duplicate_stage_id"

    def __bool__(self) -> bool:
        return self is Outcome.OK


class CatalogDecodeError(ValueError):
    """Raised when persisted catalog data cannot be decoded."""


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_id(raw: Any) -> str | None:
    """Canonical lower-case form of a UUID string, or None if malformed.

    The watch and phone front-ends do not agree on letter case.
    """
    try:
        return str(uuid.UUID(raw))
    except (TypeError, ValueError, AttributeError):
        return None


# ── value types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Stage:
    """A single named countdown.  Durations are whole seconds."""

    name: str
    duration: int
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class Sequence:
    """A named, ordered list of stages played back-to-back."""

    name: str
    stages: tuple[Stage, ...] = ()
    id: str = field(default_factory=new_id)
    last_used: datetime = field(default_factory=utcnow)

    @property
    def stage_count(self) -> int:
        return len(self.stages)

    @property
    def total_duration(self) -> int:
        """Sum of all stage durations, in seconds."""
        return sum(s.duration for s in self.stages)

    def stage_index(self, stage_id: str) -> int | None:
        for i, stage in enumerate(self.stages):
            if stage.id == stage_id:
                return i
        return None

    # ── derived copies (the store persists the result) ────────────────

    def renamed(self, name: str) -> Sequence:
        return replace(self, name=name)

    def with_stage(self, stage: Stage) -> Sequence:
        return replace(self, stages=self.stages + (stage,))

    def without_stage(self, stage_id: str) -> Sequence:
        return replace(
            self, stages=tuple(s for s in self.stages if s.id != stage_id)
        )

    def with_stage_moved(self, from_index: int, to_index: int) -> Sequence:
        """Move the stage at *from_index* so it ends up at *to_index*."""
        stages = list(self.stages)
        stage = stages.pop(from_index)
        stages.insert(to_index, stage)
        return replace(self, stages=tuple(stages))

    def with_stage_replaced(self, stage: Stage) -> Sequence:
        return replace(
            self,
            stages=tuple(stage if s.id == stage.id else s for s in self.stages),
        )

    def duplicate(self, suffix: str = " Copy") -> Sequence:
        """Deep copy with fresh sequence and stage ids."""
        return Sequence(
            name=f"{self.name}{suffix}",
            stages=tuple(Stage(name=s.name, duration=s.duration) for s in self.stages),
            last_used=self.last_used,
        )


# ── default catalog ───────────────────────────────────────────────────────

_DEFAULT_CATALOG: tuple[tuple[str, tuple[tuple[str, int], ...]], ...] = (
    ("Quick Workout", (
        ("Warm-up", 30),
        ("Exercise", 60),
        ("Rest", 15),
        ("Exercise", 60),
        ("Cool-down", 30),
    )),
    ("Pomodoro", (
        ("Focus", 25 * 60),
        ("Short Break", 5 * 60),
        ("Focus", 25 * 60),
        ("Long Break", 15 * 60),
    )),
    ("Meditation", (
        ("Breathing", 60),
        ("Body Scan", 180),
        ("Focus", 120),
        ("Relaxation", 60),
    )),
)


def default_sequences() -> list[Sequence]:
    """Fresh starter catalog (new ids on every call)."""
    return [
        Sequence(
            name=name,
            stages=tuple(Stage(name=n, duration=d) for n, d in stages),
        )
        for name, stages in _DEFAULT_CATALOG
    ]


# ── codec ─────────────────────────────────────────────────────────────────


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, bool):
        raise CatalogDecodeError(f"bad lastUsed: {raw!r}")
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    if isinstance(raw, str):
        text = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise CatalogDecodeError(f"bad lastUsed: {raw!r}") from exc
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise CatalogDecodeError(f"bad lastUsed: {raw!r}")


def _parse_id(raw: Any) -> str:
    parsed = normalize_id(raw) if isinstance(raw, str) else None
    if parsed is None:
        raise CatalogDecodeError(f"bad id: {raw!r}")
    return parsed


def stage_to_dict(stage: Stage) -> dict[str, Any]:
    return {"id": stage.id, "name": stage.name, "duration": stage.duration}


def stage_from_dict(data: Any) -> Stage:
    if not isinstance(data, dict):
        raise CatalogDecodeError(f"stage record is not an object: {data!r}")
    name = data.get("name")
    duration = data.get("duration")
    if not isinstance(name, str):
        raise CatalogDecodeError(f"bad stage name: {name!r}")
    if isinstance(duration, bool) or not isinstance(duration, int):
        raise CatalogDecodeError(f"bad stage duration: {duration!r}")
    return Stage(name=name, duration=duration, id=_parse_id(data.get("id")))


def sequence_to_dict(sequence: Sequence) -> dict[str, Any]:
    return {
        "id": sequence.id,
        "name": sequence.name,
        "timers": [stage_to_dict(s) for s in sequence.stages],
        "lastUsed": _format_timestamp(sequence.last_used),
    }


def sequence_from_dict(data: Any) -> Sequence:
    if not isinstance(data, dict):
        raise CatalogDecodeError(f"sequence record is not an object: {data!r}")
    name = data.get("name")
    timers = data.get("timers")
    if not isinstance(name, str):
        raise CatalogDecodeError(f"bad sequence name: {name!r}")
    if not isinstance(timers, list):
        raise CatalogDecodeError(f"bad timers list: {timers!r}")

    stages = tuple(stage_from_dict(t) for t in timers)
    if len({s.id for s in stages}) != len(stages):
        raise CatalogDecodeError(f"duplicate stage id in sequence {name!r}")

    last_used = data.get("lastUsed")
    return Sequence(
        name=name,
        stages=stages,
        id=_parse_id(data.get("id")),
        last_used=_parse_timestamp(last_used) if last_used is not None else utcnow(),
    )


def encode_sequences(sequences: Iterable[Sequence]) -> str:
    """Serialize the whole catalog to a JSON string."""
    return json.dumps([sequence_to_dict(s) for s in sequences])


def decode_sequences(text: str) -> list[Sequence]:
    """Parse a JSON catalog.  Raises ``CatalogDecodeError`` on any defect."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise CatalogDecodeError(f"catalog is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise CatalogDecodeError("catalog root is not an array")

    sequences = [sequence_from_dict(item) for item in data]
    if len({s.id for s in sequences}) != len(sequences):
        raise CatalogDecodeError("duplicate sequence id in catalog")
    return sequences
