"""
Config Resolver - typed lookup of prefixed configuration names.

Every name is upper-cased and prepended with the gate's prefix before it is
looked up. A missing entry yields ABSENT, which is distinct from a value that
fails to decode (TypeMismatchError).

Author: Mutation Gate Team
"""

from __future__ import annotations

import logging

from typing import Any, Final

from ..errors import InvalidArgumentError, TypeMismatchError
from ..types import ABSENT, DEFAULT_PREFIX, ValueType
from .sources import ConfigSource, EnvironmentSource

logger = logging.getLogger(__name__)


TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true"})
FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false"})


class ConfigResolver:
    """
    Resolves typed configuration values from a ConfigSource.

    Nothing is cached: the source is read on every call.

    Usage:
        >>> resolver = ConfigResolver(prefix="FUZZER_")
        >>> resolver.resolve("enabled", ValueType.BOOLEAN)
        ABSENT
    """

    def __init__(
        self,
        source: ConfigSource | None = None,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        self.source = source if source is not None else EnvironmentSource()
        self._prefix = ""
        self.prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    @prefix.setter
    def prefix(self, value: str) -> None:
        if not isinstance(value, str):
            raise InvalidArgumentError(
                f"prefix must be a string, got {type(value).__name__}"
            )
        self._prefix = value.upper()

    def key_for(self, name: str) -> str:
        """The namespaced key looked up for a configuration name."""
        return self._prefix + name.upper()

    def resolve(self, name: str, value_type: ValueType) -> Any:
        """
        Look up and decode a configuration value.

        Args:
            name: Configuration name without prefix (any case)
            value_type: How to decode the raw string

        Returns:
            The decoded value, or ABSENT if the source has no entry.

        Raises:
            TypeMismatchError: If the entry exists but cannot be decoded.
        """
        key = self.key_for(name)
        raw = self.source.get(key)
        if raw is None:
            return ABSENT

        if value_type is ValueType.BOOLEAN:
            return self._decode_boolean(key, raw)
        if value_type is ValueType.STRING:
            return raw
        if value_type is ValueType.NUMBER:
            return self._decode_number(key, raw)
        raise InvalidArgumentError(f"unsupported value type {value_type!r}")

    def resolve_or_default(self, name: str, value_type: ValueType, default: Any) -> Any:
        """Like resolve(), substituting default for ABSENT."""
        value = self.resolve(name, value_type)
        if value is ABSENT:
            return default
        return value

    @staticmethod
    def _decode_boolean(key: str, raw: str) -> bool:
        normalized = raw.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
        raise TypeMismatchError(
            f"expected boolean for {key}, got {raw!r}",
            details={"key": key, "value": raw, "expected": ValueType.BOOLEAN.value},
        )

    @staticmethod
    def _decode_number(key: str, raw: str) -> int:
        try:
            return int(raw.strip())
        except ValueError:
            raise TypeMismatchError(
                f"expected number for {key}, got {raw!r}",
                details={"key": key, "value": raw, "expected": ValueType.NUMBER.value},
            ) from None
