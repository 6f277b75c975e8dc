"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest

from typed_storage.config.settings import StorageSettings


@pytest.fixture
def storage_settings(tmp_path) -> StorageSettings:
    """Settings pointing at a database inside a temporary directory."""
    return StorageSettings(db_path=str(tmp_path / "storage" / "storage.db"))


@pytest.fixture
def db_path(tmp_path) -> Generator[Path, None, None]:
    """Path for a throwaway database file."""
    yield tmp_path / "typed.db"
