"""
Backing key/value sources for configuration lookups.
"""

from __future__ import annotations

import os

from collections.abc import Mapping
from typing import Protocol


class ConfigSource(Protocol):
    """Anything that can look up a raw string value by key."""

    def get(self, key: str) -> str | None:
        ...


class EnvironmentSource:
    """
    Reads the process environment.

    os.environ is consulted on every call, so changes made after the gate
    was created are picked up.
    """

    def get(self, key: str) -> str | None:
        return os.environ.get(key)

    def __repr__(self) -> str:
        return "EnvironmentSource()"


class MappingSource:
    """Reads a caller-owned mapping. The mapping may be changed between calls."""

    def __init__(self, values: Mapping[str, str] | None = None):
        self.values = values if values is not None else {}

    def get(self, key: str) -> str | None:
        value = self.values.get(key)
        return None if value is None else str(value)

    def __repr__(self) -> str:
        return f"MappingSource({len(self.values)} keys)"
