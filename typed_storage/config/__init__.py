"""Configuration models for typed storage."""

from .settings import Settings, StorageSettings

__all__ = ["Settings", "StorageSettings"]
