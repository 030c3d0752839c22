"""Shared pytest fixtures for NiceTimer tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from nicetimer.database.db import configure_engine, init_db
from nicetimer.runner.engine import SequenceRunner
from nicetimer.sequences.store import SequenceStore


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def store(qapp):
    """Loaded store seeded with the default catalog."""
    s = SequenceStore()
    s.load()
    return s


@pytest.fixture
def empty_store(qapp):
    """Loaded store with every sequence deleted."""
    s = SequenceStore()
    s.load()
    for seq in s.sequences:
        s.delete_sequence(seq)
    return s


@pytest.fixture
def runner(store):
    return SequenceRunner(store)
