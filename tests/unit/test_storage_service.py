"""
Unit tests for typed_storage/service.py
"""
from datetime import date

import pytest

from typed_storage.config.settings import Settings, StorageSettings
from typed_storage.errors import StorageError
from typed_storage.service import StorageService


def test_service_creates_database(storage_settings):
    with StorageService(storage_settings) as service:
        service.get_storage("things").put("k", 1)
        assert service.engine.db_path.exists()


def test_get_storage_is_cached(storage_settings):
    with StorageService(storage_settings) as service:
        assert service.get_storage("things") is service.get_storage("things")
        assert service.get_storage("things") is not service.get_storage("other")


def test_values_survive_service_restart(storage_settings):
    with StorageService(storage_settings) as service:
        service.get_storage("dates").put("release", date(2024, 5, 1))

    with StorageService(storage_settings) as service:
        assert service.get_storage("dates").get("release") == date(2024, 5, 1)


def test_allowed_modules_limit_default_resolver(tmp_path):
    settings = StorageSettings(db_path=str(tmp_path / "s.db"), allowed_modules=["datetime"])

    with StorageService(settings) as service:
        storage = service.get_storage("mixed")
        storage.put("d", date(2024, 5, 1))
        storage.put("n", 42)

        assert storage.get("d") == date(2024, 5, 1)
        assert storage.get("n") is None
        assert storage.keys() == ["d", "n"]


def test_closed_service_rejects_get_storage(storage_settings):
    service = StorageService(storage_settings)
    service.close()

    with pytest.raises(StorageError):
        service.get_storage("things")


def test_service_accepts_application_settings(tmp_path):
    settings = Settings(storage=StorageSettings(db_path=str(tmp_path / "app.db")))

    with StorageService(settings) as service:
        assert service.settings is settings.storage
        assert service.engine.db_path == tmp_path / "app.db"
        service.get_storage("things").put("k", "v")
        assert service.get_storage("things").get("k") == "v"
