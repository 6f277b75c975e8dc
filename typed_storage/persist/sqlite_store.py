"""
SQLite-backed durable map engine.

Every named map lives in a single ``records`` table keyed by
(map_name, key). Values are TEXT with a timestamp of the last write.

Writes through a MapHandle are not durable until ``commit()`` is called.
"""

import sqlite3
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional, Union

from typed_storage.errors import InvalidArgument, PersistenceFailure, StorageError


class MapHandle:
    """
    One named map inside a KVStore.

    Handles are created by ``KVStore.create_or_open`` and share the
    store's connection. They do not own it.
    """

    def __init__(self, store: "KVStore", name: str):
        self._store = store
        self.name = name

    def get(self, key: str) -> Optional[str]:
        """
        Get the raw value stored under key.

        Returns:
            Stored string if found, None otherwise
        """
        rows = self._store._query(
            "SELECT value FROM records WHERE map_name = ? AND key = ?",
            (self.name, key),
        )
        return rows[0][0] if rows else None

    def put(self, key: str, value: str) -> Optional[str]:
        """
        Store a value under key without committing.

        Returns:
            The previously stored value, or None if the key was new
        """
        with self._store._lock:
            previous = self.get(key)
            self._store._write(
                "INSERT OR REPLACE INTO records (map_name, key, value, ts) VALUES (?, ?, ?, ?)",
                (self.name, key, value, int(time.time())),
            )
        return previous

    def remove(self, key: str) -> Optional[str]:
        """
        Remove key without committing.

        Returns:
            The removed value, or None if the key was absent
        """
        with self._store._lock:
            previous = self.get(key)
            if previous is not None:
                self._store._write(
                    "DELETE FROM records WHERE map_name = ? AND key = ?",
                    (self.name, key),
                )
        return previous

    def keys(self) -> List[str]:
        """All keys in this map, in key order."""
        rows = self._store._query(
            "SELECT key FROM records WHERE map_name = ? ORDER BY key",
            (self.name,),
        )
        return [row[0] for row in rows]

    def commit(self) -> None:
        """Make pending writes durable."""
        self._store.commit()

    def __len__(self) -> int:
        rows = self._store._query(
            "SELECT COUNT(*) FROM records WHERE map_name = ?",
            (self.name,),
        )
        return rows[0][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __repr__(self) -> str:
        return f"MapHandle(name={self.name!r}, db={str(self._store.db_path)!r})"


class KVStore:
    """
    File-backed SQLite store of named string maps.
    
    Thread-safe with WAL mode; single-key read-modify-write is serialized.
    """
    
    def __init__(
        self,
        db_path: Union[str, Path],
        timeout: float = 10.0,
        journal_mode: str = "WAL",
        synchronous: str = "NORMAL",
    ):
        """
        Initialize store at given path.
        
        Args:
            db_path: Path to SQLite database file
            timeout: Seconds to wait on a locked database
            journal_mode: SQLite journal mode
            synchronous: SQLite synchronous level
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._maps: Dict[str, MapHandle] = {}
        self._closed = False
        
        self._conn = sqlite3.connect(
            str(self.db_path),
            check_same_thread=False,  # Allow multi-threaded access
            timeout=timeout,
        )
        
        self._conn.execute(f"PRAGMA journal_mode={journal_mode}")
        self._conn.execute(f"PRAGMA synchronous={synchronous}")
        
        self._init_tables()
    
    def _init_tables(self) -> None:
        """Create the records table if it doesn't exist."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS records (
                map_name TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                ts INTEGER NOT NULL,
                PRIMARY KEY (map_name, key)
            )
        """)
        self._conn.commit()

    def _check_open(self) -> None:
        if self._closed:
            raise StorageError(f"KVStore at {self.db_path} is closed")

    def _query(self, sql: str, params: tuple = ()) -> list:
        self._check_open()
        with self._lock:
            return self._conn.execute(sql, params).fetchall()

    def _write(self, sql: str, params: tuple = ()) -> None:
        self._check_open()
        try:
            with self._lock:
                self._conn.execute(sql, params)
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Write to {self.db_path} failed: {e}") from e

    def create_or_open(self, name: str) -> MapHandle:
        """
        Get the handle for a named map, creating it on first use.
        
        Args:
            name: Map name (non-empty)
        
        Returns:
            MapHandle bound to this store
        """
        self._check_open()
        if not isinstance(name, str) or not name:
            raise InvalidArgument("map name must be a non-empty string")
        
        with self._lock:
            handle = self._maps.get(name)
            if handle is None:
                handle = MapHandle(self, name)
                self._maps[name] = handle
        return handle

    def commit(self) -> None:
        """
        Commit all pending writes.
        
        Raises:
            PersistenceFailure: If SQLite cannot commit
        """
        self._check_open()
        try:
            with self._lock:
                self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Commit to {self.db_path} failed: {e}") from e

    def list_maps(self) -> List[str]:
        """Names of all maps holding at least one record."""
        rows = self._query("SELECT DISTINCT map_name FROM records ORDER BY map_name")
        return [row[0] for row in rows]

    def purge(self, name: str) -> int:
        """
        Delete all entries from a map and commit.
        
        Args:
            name: Map name
        
        Returns:
            Number of rows deleted
        """
        with self._lock:
            count = len(self.create_or_open(name))
            self._write("DELETE FROM records WHERE map_name = ?", (name,))
            self.commit()
        
        return count
    
    def stats(self, name: str) -> dict:
        """
        Get statistics for a map.
        
        Args:
            name: Map name
        
        Returns:
            Dict with count, total_bytes, oldest_ts, newest_ts
        """
        rows = self._query("""
            SELECT 
                COUNT(*) as count,
                SUM(LENGTH(CAST(value AS BLOB))) as total_bytes,
                MIN(ts) as oldest_ts,
                MAX(ts) as newest_ts
            FROM records
            WHERE map_name = ?
        """, (name,))
        row = rows[0]
        
        return {
            "count": row[0] or 0,
            "total_bytes": row[1] or 0,
            "oldest_ts": row[2] or 0,
            "newest_ts": row[3] or 0,
        }
    
    def vacuum(self) -> None:
        """
        Reclaim space and optimize database.
        
        Should be called periodically after large deletions.
        """
        self.commit()
        with self._lock:
            self._conn.execute("VACUUM")
    
    def close(self) -> None:
        """Close database connection. Uncommitted writes are discarded."""
        if self._closed:
            return
        with self._lock:
            self._conn.close()
            self._closed = True
            self._maps.clear()

    @property
    def closed(self) -> bool:
        return self._closed
    
    def __enter__(self):
        """Context manager entry."""
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
