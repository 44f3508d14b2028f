"""Persistence adapter and key-value store backends."""

from .repository import STORAGE_KEY, StateRepository
from .stores import JsonFileStore, KeyValueStore, MemoryStore, SqliteStore

__all__ = [
    "STORAGE_KEY",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "SqliteStore",
    "StateRepository",
]
