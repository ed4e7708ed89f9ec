"""
Random Mutator - in-process seeded edits.

Applies a small number of random edits (bit flip, insert, delete,
duplicate) to a byte string or to the code points of a text string.
The same literal seed always yields the same output for the same input.
"""

from __future__ import annotations

import hashlib
import logging

from typing import Any, Final

import numpy as np

from .base import Mutator

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

MAX_EDITS: Final[int] = 4
EDIT_OPERATIONS: Final[tuple[str, ...]] = ("flip", "insert", "delete", "duplicate")

# Inserted units: any byte for bytes, printable ASCII for text
BYTE_RANGE: Final[tuple[int, int]] = (0, 256)
TEXT_RANGE: Final[tuple[int, int]] = (32, 127)

# Text flips stay within the low 7 bits so a code point never becomes a surrogate
BYTE_FLIP_BITS: Final[int] = 8
TEXT_FLIP_BITS: Final[int] = 7


class RandomMutator(Mutator):
    """
    Mutates data with a numpy random Generator.

    The output always differs from the input.

    Usage:
        >>> mutator = RandomMutator(seed="3")
        >>> mutator.mutate("foo") == mutator.mutate("foo")
        True
    """

    def __init__(self, seed: Any = None, max_edits: int = MAX_EDITS):
        super().__init__(seed)
        if max_edits < 1:
            raise ValueError(f"max_edits must be at least 1, got {max_edits}")
        self.max_edits = max_edits

    def _rng(self) -> np.random.Generator:
        seed = self.resolve_seed()
        if seed is None:
            return np.random.default_rng()
        digest = hashlib.sha256(seed.encode("utf-8")).digest()
        return np.random.default_rng(int.from_bytes(digest[:8], "big"))

    def _mutate_bytes(self, data: bytes) -> bytes:
        units = self._edit(list(data), self._rng(), BYTE_RANGE, BYTE_FLIP_BITS)
        return bytes(units)

    def _mutate_text(self, data: str) -> str:
        units = self._edit([ord(c) for c in data], self._rng(), TEXT_RANGE, TEXT_FLIP_BITS)
        return "".join(chr(u) for u in units)

    def _edit(
        self,
        units: list[int],
        rng: np.random.Generator,
        insert_range: tuple[int, int],
        flip_bits: int,
    ) -> list[int]:
        original = list(units)
        low, high = insert_range
        edits = int(rng.integers(1, self.max_edits + 1))

        for _ in range(edits):
            if units:
                operation = EDIT_OPERATIONS[int(rng.integers(0, len(EDIT_OPERATIONS)))]
            else:
                operation = "insert"

            if operation == "insert":
                position = int(rng.integers(0, len(units) + 1))
                units.insert(position, int(rng.integers(low, high)))
                continue

            position = int(rng.integers(0, len(units)))
            if operation == "flip":
                units[position] ^= 1 << int(rng.integers(0, flip_bits))
            elif operation == "delete":
                del units[position]
            else:
                units.insert(position, units[position])

        # Edits can cancel out (e.g. insert then delete)
        if units == original:
            units.insert(int(rng.integers(0, len(units) + 1)), int(rng.integers(low, high)))

        logger.debug(f"Applied {edits} edits: {len(original)} -> {len(units)} units")
        return units
