"""
Type resolution for tagged records.

A stored record names the concrete type of its value. Resolvers turn that
name back into a class. Each collection gets its own resolver, so lookups
can be scoped to an explicit registry instead of whatever happens to be
importable.
"""

import importlib
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, runtime_checkable

from typed_storage.errors import TypeNotFound

logger = logging.getLogger(__name__)


def type_name_of(cls: type) -> str:
    """
    Fully-qualified name of a class.

    Examples:
        >>> type_name_of(int)
        'builtins.int'
    """
    return f"{cls.__module__}.{cls.__qualname__}"


@runtime_checkable
class TypeResolver(Protocol):
    """Anything that can map a type name back to a class."""

    def resolve(self, type_name: str) -> type:
        ...


class ImportTypeResolver:
    """
    Resolve names by importing their module and walking attributes.

    Handles nested classes (``pkg.mod.Outer.Inner``) by trying the longest
    importable module prefix first.
    """

    def __init__(self, allowed_modules: Optional[Sequence[str]] = None):
        """
        Args:
            allowed_modules: Optional module prefixes (e.g. ``["myapp", "datetime"]``).
                When set, names outside these prefixes are never imported.
        """
        self.allowed_modules = list(allowed_modules) if allowed_modules else None

    def _is_allowed(self, type_name: str) -> bool:
        if self.allowed_modules is None:
            return True
        return any(
            type_name == prefix or type_name.startswith(prefix + ".")
            for prefix in self.allowed_modules
        )

    def resolve(self, type_name: str) -> type:
        if not type_name or "<locals>" in type_name:
            raise TypeNotFound(f"Cannot load type '{type_name}'")

        parts = type_name.split(".")
        if any(not part.strip() for part in parts):
            raise TypeNotFound(f"'{type_name}' has an empty name segment")
        if not self._is_allowed(type_name):
            raise TypeNotFound(f"Type '{type_name}' is outside the allowed modules")

        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                obj = importlib.import_module(module_name)
            except ImportError:
                continue
            except Exception as e:
                raise TypeNotFound(f"Importing '{module_name}' failed: {e}") from e

            try:
                for attr in parts[split:]:
                    obj = getattr(obj, attr)
            except AttributeError:
                continue
            except Exception as e:
                raise TypeNotFound(f"Cannot load type '{type_name}': {e}") from e

            if not isinstance(obj, type):
                raise TypeNotFound(f"'{type_name}' does not name a class")
            return obj

        raise TypeNotFound(f"Cannot load type '{type_name}'")


class RegistryTypeResolver:
    """Resolve names against an explicit registry of classes."""

    def __init__(self, types: Optional[Iterable[type]] = None):
        self._types: Dict[str, type] = {}
        for cls in types or ():
            self.register(cls)

    def register(self, cls: type, name: Optional[str] = None) -> type:
        """
        Register a class under its qualified name (or an explicit alias).

        Returns the class so this can be used as a decorator.
        """
        self._types[name or type_name_of(cls)] = cls
        return cls

    def names(self) -> List[str]:
        return sorted(self._types)

    def resolve(self, type_name: str) -> type:
        try:
            return self._types[type_name]
        except KeyError:
            raise TypeNotFound(f"Type '{type_name}' is not registered") from None


class ChainTypeResolver:
    """Try several resolvers in order; first hit wins."""

    def __init__(self, *resolvers: TypeResolver):
        if not resolvers:
            raise ValueError("ChainTypeResolver needs at least one resolver")
        self.resolvers = list(resolvers)

    def resolve(self, type_name: str) -> type:
        reasons = []
        for resolver in self.resolvers:
            try:
                return resolver.resolve(type_name)
            except TypeNotFound as e:
                logger.debug(f"{type(resolver).__name__} could not resolve '{type_name}': {e}")
                reasons.append(str(e))
        raise TypeNotFound(f"No resolver could load '{type_name}': " + "; ".join(reasons))
