"""
Durable map engine for typed storage.

Provides:
- SQLite-backed KVStore holding any number of named maps
- MapHandle with get/put/remove/keys/commit
"""

from .sqlite_store import KVStore, MapHandle

__all__ = ["KVStore", "MapHandle"]
