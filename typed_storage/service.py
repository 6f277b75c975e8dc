"""
Storage service owning the durable map engine.

Opens one KVStore for the configured database and hands out one
TypedStorage per collection name.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from .codec.resolvers import ImportTypeResolver, TypeResolver
from .config.settings import Settings, StorageSettings
from .errors import StorageError
from .persist.sqlite_store import KVStore
from .storage import TypedStorage

logger = logging.getLogger(__name__)


class StorageService:
    """
    Entry point for typed storage.
    
    Features:
    - Opens and closes the SQLite engine
    - Caches one TypedStorage per collection name
    - Default resolver honors ``allowed_modules`` from settings
    """
    
    def __init__(self, settings: Optional[Union[Settings, StorageSettings]] = None):
        """
        Open the storage engine.
        
        Args:
            settings: Application settings (their ``storage`` section is used)
                or storage settings (default: StorageSettings())
        """
        if isinstance(settings, Settings):
            settings = settings.storage
        self.settings = settings or StorageSettings()
        self.engine = KVStore(
            Path(self.settings.db_path),
            timeout=self.settings.timeout,
            journal_mode=self.settings.journal_mode,
            synchronous=self.settings.synchronous,
        )
        self._storages: Dict[str, TypedStorage] = {}
        logger.info(f"Opened storage at {self.engine.db_path}")
    
    def get_storage(
        self,
        name: str,
        resolver: Optional[TypeResolver] = None,
        value_type: Optional[type] = None,
    ) -> TypedStorage:
        """
        Get the storage for a collection, creating it on first use.
        
        Resolver and value type only apply when the collection is first
        created; later calls return the cached instance.
        
        Args:
            name: Collection name
            resolver: Type resolver for this collection
            value_type: Declared element type for this collection
        
        Returns:
            TypedStorage for the collection
        """
        if self.engine.closed:
            raise StorageError("StorageService is closed")
        
        storage = self._storages.get(name)
        if storage is None:
            if resolver is None:
                resolver = ImportTypeResolver(self.settings.allowed_modules)
            storage = TypedStorage(self.engine, name, resolver=resolver, value_type=value_type)
            self._storages[name] = storage
            logger.debug(f"Created storage '{name}'")
        return storage
    
    def close(self) -> None:
        """Close the engine and drop cached storages."""
        self._storages.clear()
        self.engine.close()
    
    def __enter__(self):
        """Context manager entry."""
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
