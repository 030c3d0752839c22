"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/NiceTimer/settings.json

Usage::

    settings = load_settings()
    settings.tick_interval_ms = 500
    save_settings(settings)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .database.db import APP_SUPPORT_DIR

SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── runner ────────────────────────────────────────────────────────
    tick_interval_ms: int = 1000
    stop_on_selection_change: bool = True

    # ── catalog ───────────────────────────────────────────────────────
    default_stage_name: str = "Timer"
    copy_suffix: str = " Copy"

    # ── storage ───────────────────────────────────────────────────────
    database_path: str | None = None       # None → shared default DB

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError):
        pass
    return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
