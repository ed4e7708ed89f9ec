"""
Radamsa engine - pipes data through the external radamsa fuzzer.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from typing import Any

from ..errors import MutationError
from .base import Mutator

logger = logging.getLogger(__name__)


class RadamsaMutator(Mutator):
    """
    Mutates data with the radamsa binary.

    Text is encoded as UTF-8 for radamsa and decoded back, replacing any
    invalid sequences radamsa produced.
    """

    def __init__(
        self,
        seed: Any = None,
        binary: str = "radamsa",
        timeout: float | None = None,
    ):
        super().__init__(seed)
        self.binary = binary
        self.timeout = timeout

    @property
    def is_available(self) -> bool:
        """True if the binary can be found."""
        return shutil.which(self.binary) is not None

    def command(self) -> list[str]:
        """Command line for the next run."""
        cmd = [self.binary]
        seed = self.resolve_seed()
        if seed is not None:
            cmd.extend(["--seed", seed])
        return cmd

    def _mutate_bytes(self, data: bytes) -> bytes:
        cmd = self.command()
        try:
            result = subprocess.run(
                cmd,
                input=data,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            raise MutationError(
                f"radamsa binary not found: {self.binary}",
                details={"binary": self.binary},
            ) from None
        except subprocess.TimeoutExpired:
            raise MutationError(
                f"radamsa timed out after {self.timeout}s",
                details={"binary": self.binary, "timeout": self.timeout},
            ) from None

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise MutationError(
                f"radamsa exited with status {result.returncode}: {stderr}",
                details={"command": cmd, "returncode": result.returncode},
            )

        logger.debug(f"radamsa mutated {len(data)} bytes into {len(result.stdout)} bytes")
        return result.stdout

    def _mutate_text(self, data: str) -> str:
        try:
            payload = data.encode("utf-8", "surrogateescape")
        except UnicodeEncodeError as e:
            raise MutationError(
                f"text cannot be encoded for radamsa: {e.reason}",
                details={"start": e.start, "end": e.end},
            ) from None
        return self._mutate_bytes(payload).decode("utf-8", errors="replace")
