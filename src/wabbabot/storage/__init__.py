"""Persistent state storage."""

from wabbabot.storage.json_store import JsonStateStore, StateStoreError

__all__ = [
    "JsonStateStore",
    "StateStoreError",
]
