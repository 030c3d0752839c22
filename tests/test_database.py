"""Tests for the shared key-value table."""

from datetime import datetime, timedelta, timezone

from nicetimer.database.db import (
    configure_path, delete_value, get_session, init_db, read_value, write_value,
)
from nicetimer.database.models import KeyValue


class TestKeyValue:

    def test_missing_key_reads_none(self):
        assert read_value("nope") is None

    def test_write_then_read(self):
        write_value("k", "v1")
        assert read_value("k") == "v1"

    def test_overwrite_last_writer_wins(self):
        write_value("k", "v1")
        write_value("k", "v2")
        assert read_value("k") == "v2"
        with get_session() as db:
            assert db.query(KeyValue).count() == 1

    def test_delete(self):
        write_value("k", "v1")
        delete_value("k")
        assert read_value("k") is None

    def test_delete_missing_is_noop(self):
        delete_value("never-written")

    def test_updated_at_refreshes(self):
        write_value("k", "v1")
        with get_session() as db:
            first = db.get(KeyValue, "k").updated_at
        write_value("k", "v2")
        with get_session() as db:
            assert db.get(KeyValue, "k").updated_at >= first

    def test_updated_at_is_current_utc(self):
        write_value("k", "v1")
        with get_session() as db:
            stamp = db.get(KeyValue, "k").updated_at.replace(tzinfo=None)
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        assert abs(now - stamp) < timedelta(minutes=1)

    def test_file_database(self, tmp_path):
        path = tmp_path / "shared" / "nicetimer.db"
        configure_path(path)
        init_db()
        write_value("k", "on disk")
        assert path.exists()
        assert read_value("k") == "on disk"
