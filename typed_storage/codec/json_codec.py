"""
Structural JSON codec backed by pydantic TypeAdapters.

Turns builtins, containers, dataclasses, pydantic models, enums, dates and
decimals into JSON text and back, given the target type.

JSON has no representation for inf or nan, so floats must be finite.
Decoding is strict: a body that does not match the target type fails
instead of being coerced.
"""

import math
from functools import lru_cache
from typing import Any, Optional

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from typed_storage.errors import DecodeFailure, InvalidArgument


@lru_cache(maxsize=256)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def _find_non_finite(data: Any, path: str = "value") -> Optional[str]:
    """Path of the first inf/nan float in python-mode dump output, if any."""
    if isinstance(data, float):
        return None if math.isfinite(data) else path
    if isinstance(data, dict):
        for key, item in data.items():
            found = _find_non_finite(item, f"{path}[{key!r}]")
            if found:
                return found
    elif isinstance(data, (list, tuple, set, frozenset)):
        for i, item in enumerate(data):
            found = _find_non_finite(item, f"{path}[{i}]")
            if found:
                return found
    return None


class JsonCodec:
    """Converts typed values to JSON text and back."""

    def to_text(self, value: Any) -> str:
        """
        Serialize a value using the adapter for its concrete type.

        Raises:
            InvalidArgument: If the type has no JSON representation or the
                value holds a non-finite float
        """
        try:
            adapter = _adapter(type(value))
            bad_path = _find_non_finite(adapter.dump_python(value))
            if bad_path:
                raise InvalidArgument(f"Cannot serialize non-finite float at {bad_path}")
            return adapter.dump_json(value).decode("utf-8")
        except InvalidArgument:
            raise
        except (PydanticSchemaGenerationError, TypeError, ValueError) as e:
            raise InvalidArgument(f"Cannot serialize value of type {type(value).__name__}: {e}") from e

    def from_text(self, text: str, tp: type) -> Any:
        """
        Deserialize JSON text into an instance of ``tp``.

        Raises:
            DecodeFailure: On malformed text, a type mismatch, or a type
                pydantic cannot build a schema for
        """
        try:
            adapter = _adapter(tp)
        except (PydanticSchemaGenerationError, TypeError) as e:
            raise DecodeFailure(f"No JSON schema for type {tp!r}: {e}") from e

        try:
            return adapter.validate_json(text, strict=True)
        except ValidationError as e:
            raise DecodeFailure(f"Invalid JSON for {tp.__name__}: {e.errors()[0]['msg']}") from e
