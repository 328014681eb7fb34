"""
Lookup Resolver

Banded and keyed pricing constants live in LookupTable instances. A lookup
for a key that has no entry raises ConfigurationError instead of returning
a default.
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any

from .errors import ConfigurationError


def to_decimal(value: Any, label: str) -> Decimal:
    """Convert a configured number to Decimal, rejecting bools and junk."""
    if isinstance(value, bool):
        raise ConfigurationError(f"{label} must be a number, got: {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ConfigurationError(f"{label} must be a number, got: {value!r}") from None
    if not result.is_finite():
        raise ConfigurationError(f"{label} must be finite, got: {value!r}")
    if result < 0:
        raise ConfigurationError(f"{label} cannot be negative, got: {value}")
    return result


class LookupTable(Mapping):
    """Immutable key -> value mapping whose misses are configuration errors."""

    def __init__(self, name: str, entries: Mapping):
        if not isinstance(entries, Mapping):
            raise ConfigurationError(f"Table '{name}' must be a mapping, got: {type(entries).__name__}")
        if not entries:
            raise ConfigurationError(f"Table '{name}' has no entries")
        self.name = name
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def of_decimals(cls, name: str, entries: Mapping) -> "LookupTable":
        """Build a table whose values are validated non-negative Decimals."""
        if not isinstance(entries, Mapping):
            raise ConfigurationError(f"Table '{name}' must be a mapping, got: {type(entries).__name__}")
        return cls(name, {
            str(key): to_decimal(value, f"{name}[{key!r}]")
            for key, value in entries.items()
        })

    def resolve(self, key):
        """Return the entry for key, raising ConfigurationError if absent."""
        try:
            return self._entries[key]
        except (KeyError, TypeError):
            raise ConfigurationError(
                f"No entry for {key!r} in pricing table '{self.name}'"
            ) from None

    def __getitem__(self, key):
        return self.resolve(key)

    def __contains__(self, key):
        try:
            return key in self._entries
        except TypeError:
            return False

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return f"LookupTable({self.name!r}, {dict(self._entries)!r})"


def resolve(table: LookupTable, key):
    """Module-level alias for LookupTable.resolve."""
    return table.resolve(key)
