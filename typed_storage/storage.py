"""
Typed key-value storage over a durable map.

Each TypedStorage is one named collection. Values go through the
TypeTaggedCodec on the way in and out, and every mutation is committed
before returning.
"""

from typing import Generic, List, Optional, TypeVar

from .codec.json_codec import JsonCodec
from .codec.resolvers import TypeResolver
from .codec.tagged import TypeTaggedCodec
from .persist.sqlite_store import KVStore

T = TypeVar("T")


class TypedStorage(Generic[T]):
    """
    Per-collection typed key-value store.
    
    The storage does not own the engine: closing the KVStore is up to
    whoever created it (usually a StorageService).
    
    Reads are best-effort. A record that cannot be decoded reads back as
    None and still shows up in ``keys()``.
    """
    
    def __init__(
        self,
        engine: KVStore,
        name: str,
        resolver: Optional[TypeResolver] = None,
        codec: Optional[JsonCodec] = None,
        value_type: Optional[type] = None,
    ):
        """
        Initialize a collection backed by the named map in ``engine``.
        
        Args:
            engine: Durable map engine
            name: Collection (map) name
            resolver: Type resolver for stored type names
            codec: Structural codec for record bodies
            value_type: Optional declared element type for this collection
        """
        self._map = engine.create_or_open(name)
        self._codec = TypeTaggedCodec(resolver=resolver, codec=codec, value_type=value_type)
    
    @property
    def name(self) -> str:
        return self._map.name

    @property
    def value_type(self) -> Optional[type]:
        return self._codec.value_type

    def put(self, key: str, value: T) -> Optional[T]:
        """
        Store value under key and commit.
        
        Args:
            key: String key
            value: Non-null value
        
        Returns:
            The previous value, or None if the key was new or the old
            record could not be decoded
        
        Raises:
            InvalidArgument: If value is None or cannot be serialized
            PersistenceFailure: If the write or commit fails
        """
        record = self._codec.encode(value)
        previous = self._map.put(key, record)
        self._map.commit()
        return self._codec.decode(previous)
    
    def remove(self, key: str) -> Optional[T]:
        """
        Remove key and commit.
        
        Returns:
            The removed value, or None
        
        Raises:
            PersistenceFailure: If the delete or commit fails
        """
        removed = self._map.remove(key)
        self._map.commit()
        return self._codec.decode(removed)
    
    def get(self, key: str) -> Optional[T]:
        """Value stored under key, or None if absent or undecodable."""
        return self._codec.decode(self._map.get(key))
    
    def keys(self) -> List[str]:
        """Unique keys in the collection, in key order (the map's native order)."""
        return self._map.keys()
    
    def values(self) -> List[Optional[T]]:
        """Decoded values in ``keys()`` order; undecodable entries are None."""
        return [self.get(key) for key in self.keys()]

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"TypedStorage(name={self.name!r})"
