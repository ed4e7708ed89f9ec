"""
Diagnostic output for Mutation Gate.

Echoes values entering and leaving the gate when SHOW_IO is set.
"""

from .io_echo import IOEcho

__all__ = ["IOEcho"]
