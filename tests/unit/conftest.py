"""
Shared fixtures for unit tests.
"""
import pytest

from typed_storage.codec.resolvers import (
    ChainTypeResolver,
    ImportTypeResolver,
    RegistryTypeResolver,
)
from typed_storage.persist.sqlite_store import KVStore
from typed_storage.storage import TypedStorage

from sample_types import Color, Note, Point, Reading, Thing


@pytest.fixture
def kv(tmp_path):
    """Create a temporary KVStore instance."""
    db_path = tmp_path / "storage.db"
    store = KVStore(db_path)
    yield store
    store.close()


@pytest.fixture
def resolver():
    """Registry for the sample types, falling back to imports."""
    return ChainTypeResolver(
        RegistryTypeResolver([Point, Thing, Reading, Note, Color]),
        ImportTypeResolver(),
    )


@pytest.fixture
def storage(kv, resolver):
    """Untyped collection named 'things'."""
    return TypedStorage(kv, "things", resolver=resolver)
