"""
Error types for Mutation Gate.

Every error carries a stable code, a message and optional details so that
callers (and the CLI) can report them without string matching.
"""

from __future__ import annotations

from typing import Any


class GateError(Exception):
    """Base exception for Mutation Gate."""

    code = "GATE_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidArgumentError(GateError, ValueError):
    """A required argument is missing or has the wrong type."""

    code = "INVALID_ARGUMENT"


class InvalidKindError(GateError, ValueError):
    """Unrecognized rule kind."""

    code = "INVALID_KIND"


class DuplicateRuleError(GateError):
    """A rule with the same data key and kind is already registered."""

    code = "DUPLICATE_RULE"


class TypeMismatchError(GateError, ValueError):
    """A configuration value cannot be decoded as its declared type."""

    code = "TYPE_MISMATCH"


class InvalidSeedError(GateError, TypeError):
    """Seed is neither a string nor a callable."""

    code = "INVALID_SEED"


class MutationError(GateError):
    """The mutation engine failed to produce output."""

    code = "MUTATION_ERROR"
