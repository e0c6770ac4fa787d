"""
Record Store backends.

Services depend on the abstract RecordStore; the API wires the SQL backend and
tests may use the in-memory one.
"""

from app.repositories.base import RecordStore
from app.repositories.memory import InMemoryRecordStore
from app.repositories.sql import SqlRecordStore

__all__ = ["RecordStore", "InMemoryRecordStore", "SqlRecordStore"]
