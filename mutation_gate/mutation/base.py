"""
Base class for mutation engines.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..errors import InvalidArgumentError
from ..types import Seed, coerce_seed


class Mutator(ABC):
    """
    A mutation engine with an optional seed.

    The seed is resolved on every call to mutate(), so a generator seed can
    produce a different value each time.
    """

    def __init__(self, seed: Any = None):
        self._seed: Seed | None = None
        if seed is not None:
            self.set_seed(seed)

    @property
    def seed(self) -> Seed | None:
        return self._seed

    def set_seed(self, seed: Any) -> None:
        """
        Set the seed.

        Args:
            seed: A string, a zero-argument function, or a Seed

        Raises:
            InvalidSeedError: If seed is neither a string nor a function.
        """
        self._seed = coerce_seed(seed)

    def resolve_seed(self) -> str | None:
        """The seed value to use for the next mutation, or None if unseeded."""
        if self._seed is None:
            return None
        return self._seed.resolve()

    def mutate(self, data: str | bytes) -> str | bytes:
        """
        Mutate data.

        Returns:
            A value of the same type as data.
        """
        if isinstance(data, bytes):
            return self._mutate_bytes(data)
        if isinstance(data, str):
            return self._mutate_text(data)
        raise InvalidArgumentError(
            f"data must be str or bytes, got {type(data).__name__}"
        )

    @abstractmethod
    def _mutate_bytes(self, data: bytes) -> bytes:
        ...

    @abstractmethod
    def _mutate_text(self, data: str) -> str:
        ...
