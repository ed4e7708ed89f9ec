"""
I/O Echo - logs values before and after the gate.

Output goes to the "mutation_gate.io" logger at INFO level, or at ERROR
level when SHOW_IO_STDERR is set. Bytes are logged base64-encoded.
"""

from __future__ import annotations

import base64
import logging

from ..resolver import ConfigResolver
from ..types import SHOW_IO_FLAG, SHOW_IO_STDERR_FLAG, ValueType

IO_LOGGER_NAME = "mutation_gate.io"
SEPARATOR = "-------------"


class IOEcho:
    """
    Logs gate input and output when enabled by configuration.

    Both flags are resolved on every call. A malformed flag value raises
    TypeMismatchError; failures inside logging handlers are handled by the
    logging module and never reach the caller.
    """

    def __init__(
        self,
        resolver: ConfigResolver,
        show_by_default: bool = False,
        logger: logging.Logger | None = None,
    ):
        self._resolver = resolver
        self.show_by_default = show_by_default
        self.logger = logger or logging.getLogger(IO_LOGGER_NAME)

    def is_enabled(self) -> bool:
        return self._resolver.resolve_or_default(
            SHOW_IO_FLAG, ValueType.BOOLEAN, self.show_by_default
        )

    def level(self) -> int:
        to_stderr = self._resolver.resolve_or_default(
            SHOW_IO_STDERR_FLAG, ValueType.BOOLEAN, False
        )
        return logging.ERROR if to_stderr else logging.INFO

    def show(self, caption: str, data: str | bytes) -> None:
        """Log data under a caption such as "in" or "out", if enabled."""
        if not self.is_enabled():
            return

        level = self.level()
        if isinstance(data, bytes):
            self.logger.log(level, f"{caption} [encoded bytes]:")
            self.logger.log(level, base64.b64encode(data).decode("ascii"))
        else:
            self.logger.log(level, f"{caption}:")
            self.logger.log(level, data)
        self.logger.log(level, SEPARATOR)
