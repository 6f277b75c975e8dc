"""
Error taxonomy for the typed storage layer.

Write paths raise these to the caller. Read paths only catch
DecodeFailure and TypeNotFound and degrade to None.
"""


class StorageError(Exception):
    """Base class for all typed storage errors."""


class InvalidArgument(StorageError, ValueError):
    """Raised when a caller passes a value that cannot be stored."""


class PersistenceFailure(StorageError):
    """Raised when a write or commit against the durable map fails."""


class DecodeFailure(StorageError):
    """Raised when a serialized body cannot be turned back into a value."""


class TypeNotFound(StorageError, LookupError):
    """Raised when a type name cannot be resolved to a loadable type."""
