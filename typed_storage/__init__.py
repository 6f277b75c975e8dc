"""
Type-preserving persistent key-value storage.

Provides:
- TypedStorage: per-collection typed get/put/remove/keys/values
- TypeTaggedCodec: ``<type name>@@@<json>`` records
- Pluggable type resolvers
- SQLite-backed durable map engine
- StorageService owning the engine lifecycle
"""

from .codec import (
    SEPARATOR,
    ChainTypeResolver,
    ImportTypeResolver,
    JsonCodec,
    RegistryTypeResolver,
    TypeResolver,
    TypeTaggedCodec,
    type_name_of,
)
from .config.settings import Settings, StorageSettings
from .errors import (
    DecodeFailure,
    InvalidArgument,
    PersistenceFailure,
    StorageError,
    TypeNotFound,
)
from .persist import KVStore, MapHandle
from .service import StorageService
from .storage import TypedStorage

__all__ = [
    "SEPARATOR",
    "ChainTypeResolver",
    "ImportTypeResolver",
    "JsonCodec",
    "RegistryTypeResolver",
    "TypeResolver",
    "TypeTaggedCodec",
    "type_name_of",
    "Settings",
    "StorageSettings",
    "DecodeFailure",
    "InvalidArgument",
    "PersistenceFailure",
    "StorageError",
    "TypeNotFound",
    "KVStore",
    "MapHandle",
    "StorageService",
    "TypedStorage",
]
