"""
Codecs for typed storage.

Provides:
- Structural JSON codec (pydantic TypeAdapter based)
- Type resolvers (import, registry, chain)
- Type-tagged record codec
"""

from .json_codec import JsonCodec
from .resolvers import (
    ChainTypeResolver,
    ImportTypeResolver,
    RegistryTypeResolver,
    TypeResolver,
    type_name_of,
)
from .tagged import SEPARATOR, TypeTaggedCodec

__all__ = [
    "JsonCodec",
    "ChainTypeResolver",
    "ImportTypeResolver",
    "RegistryTypeResolver",
    "TypeResolver",
    "type_name_of",
    "SEPARATOR",
    "TypeTaggedCodec",
]
