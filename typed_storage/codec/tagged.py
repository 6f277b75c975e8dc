"""
Type-tagged record codec.

Records are stored as ``<type name>@@@<json body>``. The type name lets a
reader rebuild the concrete type without knowing it up front.

Decoding is best-effort: a record whose type can no longer be resolved or
whose body no longer parses is logged and read back as None, so one stale
record never breaks a whole collection.
"""

import logging
from typing import Any, Optional

from typed_storage.errors import DecodeFailure, InvalidArgument, TypeNotFound
from .json_codec import JsonCodec
from .resolvers import ImportTypeResolver, TypeResolver, type_name_of

logger = logging.getLogger(__name__)

SEPARATOR = "@@@"


class TypeTaggedCodec:
    """
    Encodes values together with their concrete type name.

    The record is split on the first separator only. Type names may never
    contain the separator (enforced on encode), so the body is free to.
    """

    def __init__(
        self,
        resolver: Optional[TypeResolver] = None,
        codec: Optional[JsonCodec] = None,
        value_type: Optional[type] = None,
    ):
        """
        Args:
            resolver: Resolves stored type names (default: ImportTypeResolver)
            codec: Structural codec for record bodies (default: JsonCodec)
            value_type: Optional base type every stored value must be an instance of
        """
        self.resolver = resolver if resolver is not None else ImportTypeResolver()
        self.codec = codec if codec is not None else JsonCodec()
        self.value_type = value_type

    def encode(self, value: Any) -> str:
        """
        Transform a value into a tagged record.

        Raises:
            InvalidArgument: If value is None, is not an instance of the
                declared value type, or cannot be serialized
        """
        if value is None:
            raise InvalidArgument("cannot serialize a null value")

        if self.value_type is not None and not isinstance(value, self.value_type):
            raise InvalidArgument(
                f"Expected a {self.value_type.__name__}, got {type(value).__name__}"
            )

        type_name = type_name_of(type(value))
        if SEPARATOR in type_name:
            raise InvalidArgument(f"Type name '{type_name}' contains the record separator")

        record = type_name + SEPARATOR + self.codec.to_text(value)
        logger.debug(f"serialized value '{record}'")
        return record

    def decode(self, record: Optional[str]) -> Optional[Any]:
        """
        Rebuild a value from a tagged record.

        Returns:
            The decoded value, or None if record is None or cannot be decoded
        """
        if record is None:
            return None

        try:
            value = self._decode(record)
        except (DecodeFailure, TypeNotFound) as e:
            logger.warning(f"Couldn't deserialize value '{record}'. Root cause is: {e}")
            return None

        logger.debug(f"deserialized value '{value!r}'")
        return value

    def _decode(self, record: str) -> Any:
        type_name, sep, body = record.partition(SEPARATOR)
        if not sep or not type_name:
            raise DecodeFailure("record has no type tag")

        value_type = self.resolver.resolve(type_name)
        if self.value_type is not None and not issubclass(value_type, self.value_type):
            raise DecodeFailure(
                f"stored type {type_name} is not a {self.value_type.__name__}"
            )

        return self.codec.from_text(body, value_type)
