"""Database connection, session management and key-value access."""

from pathlib import Path
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base, KeyValue, utcnow

# ── paths ────────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "NiceTimer"
DB_PATH = APP_SUPPORT_DIR / "nicetimer.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database, and by the CLI when settings name a
    different shared database file."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        echo=False,
    )


def configure_path(path: Path) -> None:
    """Point the engine at a SQLite file on disk."""
    path.parent.mkdir(parents=True, exist_ok=True)
    configure_engine(f"sqlite:///{path}")


def init_db() -> None:
    """Create all tables."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ── key-value helpers ─────────────────────────────────────────────────────


def read_value(key: str) -> str | None:
    """Return the stored text for *key*, or None when absent."""
    with get_session() as db:
        record = db.get(KeyValue, key)
        return record.value if record is not None else None


def write_value(key: str, value: str) -> None:
    """Insert or overwrite *key* (last writer wins)."""
    with get_session() as db:
        record = db.get(KeyValue, key)
        if record is None:
            db.add(KeyValue(key=key, value=value, updated_at=utcnow()))
        else:
            record.value = value
            record.updated_at = utcnow()


def delete_value(key: str) -> None:
    """Remove *key*; missing keys are ignored."""
    with get_session() as db:
        record = db.get(KeyValue, key)
        if record is not None:
            db.delete(record)
