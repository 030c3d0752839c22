"""Database package."""

from .db import (
    get_session,
    init_db,
    configure_engine,
    configure_path,
    read_value,
    write_value,
    delete_value,
)
from .models import KeyValue

__all__ = [
    "get_session",
    "init_db",
    "configure_engine",
    "configure_path",
    "read_value",
    "write_value",
    "delete_value",
    "KeyValue",
]
