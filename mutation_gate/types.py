"""
Core type definitions for Mutation Gate.

This module defines all data structures used throughout the system.
Design principles:
- Immutable where possible (frozen dataclasses)
- Explicit validation at construction time
- No magic strings - rule kinds and value types are enums
- Serialization with explicit methods

Author: Mutation Gate Team
"""

from __future__ import annotations

import logging

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Final, Union

from .errors import InvalidKindError, InvalidSeedError

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_PREFIX: Final[str] = "FUZZER_"
DEFAULT_ENABLE_FLAG: Final[str] = "ENABLED"
SHOW_IO_FLAG: Final[str] = "SHOW_IO"
SHOW_IO_STDERR_FLAG: Final[str] = "SHOW_IO_STDERR"


class _Absent:
    """Sentinel type for a configuration entry that does not exist."""

    _instance: ClassVar[_Absent | None] = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent()
"""Returned by the resolver when the configuration source has no entry."""


# =============================================================================
# ENUMS
# =============================================================================

class ValueType(str, Enum):
    """How a raw configuration string is decoded."""

    BOOLEAN = "boolean"
    """One of 0, 1, true, false (case-insensitive)."""

    STRING = "string"
    """Returned verbatim."""

    NUMBER = "number"
    """Parsed as a base-10 integer."""

    def __str__(self) -> str:
        return self.value


class RuleKind(str, Enum):
    """
    The three kinds of conditional rule.

    - BOOLEAN: a false value vetoes mutation for the key
    - SKIP_SUBSTRING: a value containing the substring is not mutated
    - SKIP_FIRST_N: the first N evaluations for the key are not mutated
    """

    BOOLEAN = "BOOLEAN"
    SKIP_SUBSTRING = "SKIP_SUBSTRING"
    SKIP_FIRST_N = "SKIP_FIRST_N"

    def __str__(self) -> str:
        return self.value

    @property
    def value_type(self) -> ValueType:
        """The configuration value type this kind reads."""
        return _VALUE_TYPES[self]

    @property
    def has_counter(self) -> bool:
        """True if rules of this kind keep an evaluation counter."""
        return self is RuleKind.SKIP_FIRST_N

    @classmethod
    def parse(cls, raw: str) -> RuleKind:
        """
        Parse a kind name, ignoring surrounding whitespace and case.

        Raises:
            InvalidKindError: If the name is not a known kind.
        """
        normalized = raw.strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidKindError(
                f"invalid rule kind {normalized!r}",
                details={"kind": normalized, "allowed": [k.value for k in cls]},
            ) from None


_VALUE_TYPES: Final[dict[RuleKind, ValueType]] = {
    RuleKind.BOOLEAN: ValueType.BOOLEAN,
    RuleKind.SKIP_SUBSTRING: ValueType.STRING,
    RuleKind.SKIP_FIRST_N: ValueType.NUMBER,
}


class MutatorKind(str, Enum):
    """Available mutation engines."""

    RANDOM = "random"
    """In-process seeded byte/character mutator."""

    RADAMSA = "radamsa"
    """External radamsa binary."""

    def __str__(self) -> str:
        return self.value


# =============================================================================
# SEEDS
# =============================================================================

@dataclass(frozen=True, slots=True)
class LiteralSeed:
    """A fixed seed value."""

    value: str

    def resolve(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class GeneratorSeed:
    """A seed produced by calling a function at mutation time."""

    generate: Callable[[], Any]

    def resolve(self) -> str:
        return str(self.generate())


Seed = Union[LiteralSeed, GeneratorSeed]


def coerce_seed(seed: Any) -> Seed:
    """
    Turn a string or a zero-argument callable into a Seed.

    Raises:
        InvalidSeedError: If seed is neither a string nor callable.
    """
    if isinstance(seed, (LiteralSeed, GeneratorSeed)):
        return seed
    if isinstance(seed, str):
        return LiteralSeed(seed)
    if callable(seed):
        return GeneratorSeed(seed)
    raise InvalidSeedError(
        f"seed must be a string or a function, got {type(seed).__name__}",
        details={"type": type(seed).__name__},
    )


# =============================================================================
# RULES AND DECISIONS
# =============================================================================

@dataclass(frozen=True, slots=True)
class Rule:
    """
    A registered conditional rule.

    Attributes:
        data_key: Upper-cased key that scopes the rule
        kind: Rule kind
        source_name: Configuration name read for this rule (without prefix)
        default: Value used when the configuration source has no entry
    """

    data_key: str
    kind: RuleKind
    source_name: str
    default: Any

    @property
    def value_type(self) -> ValueType:
        return self.kind.value_type

    @property
    def registry_key(self) -> tuple[str, RuleKind]:
        return (self.data_key, self.kind)

    @staticmethod
    def source_name_for(data_key: str, kind: RuleKind) -> str:
        """
        Build the configuration name for a rule.

        Boolean rules read the bare key; other kinds append the kind name so
        that several kinds can share one key.
        """
        if kind is RuleKind.BOOLEAN:
            return data_key
        return f"{data_key}_{kind.value}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_key": self.data_key,
            "kind": self.kind.value,
            "source_name": self.source_name,
            "value_type": self.value_type.value,
            "default": self.default,
        }


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    """The result of applying one rule during a decision."""

    rule: Rule
    value: Any
    vetoed: bool
    count: int | None = None

    @property
    def reason(self) -> str:
        """Short human-readable reason string."""
        kind = self.rule.kind
        if kind is RuleKind.BOOLEAN:
            return f"{self.rule.source_name}_disabled"
        if kind is RuleKind.SKIP_SUBSTRING:
            return f"{self.rule.source_name}_matched"
        return f"{self.rule.source_name}_{self.count}_of_{self.value}"


@dataclass(frozen=True, slots=True)
class Decision:
    """
    The output of the decision engine.

    Attributes:
        data_key: Normalized key the decision was made for (None if unscoped)
        allowed: True if the data should be mutated
        enabled: Resolved value of the global switch
        outcomes: Per-rule outcomes in registration order
    """

    data_key: str | None
    allowed: bool
    enabled: bool
    outcomes: tuple[RuleOutcome, ...] = ()

    @property
    def reasons(self) -> tuple[str, ...]:
        """Reasons for every veto, in evaluation order."""
        if not self.enabled:
            return ("globally_disabled",)
        return tuple(o.reason for o in self.outcomes if o.vetoed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_key": self.data_key,
            "allowed": self.allowed,
            "enabled": self.enabled,
            "reasons": list(self.reasons),
            "rules": [
                {
                    "kind": o.rule.kind.value,
                    "source_name": o.rule.source_name,
                    "value": o.value,
                    "vetoed": o.vetoed,
                    "count": o.count,
                }
                for o in self.outcomes
            ],
        }


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True, slots=True)
class RuleSpec:
    """A rule declared in a configuration file, registered at Gate startup."""

    data_key: str
    kind: str
    default: Any

    def to_dict(self) -> dict[str, Any]:
        return {"data_key": self.data_key, "kind": self.kind, "default": self.default}


@dataclass
class GateConfig:
    """
    Configuration for a Gate.

    Attributes:
        prefix: Namespace prepended to every configuration name
        enable_flag: Name of the global switch (without prefix)
        enable_by_default: Global switch value when not configured
        show_io_by_default: I/O echo when SHOW_IO is not configured
        mutator: Which mutation engine to use
        seed: Optional literal seed for the mutation engine
        radamsa_path: Binary used by the radamsa engine
        rules: Rules registered when the Gate is created
    """

    prefix: str = DEFAULT_PREFIX
    enable_flag: str = DEFAULT_ENABLE_FLAG
    enable_by_default: bool = False  # Mutation is opt-in
    show_io_by_default: bool = False
    mutator: MutatorKind = MutatorKind.RANDOM
    seed: str | None = None
    radamsa_path: str = "radamsa"
    rules: list[RuleSpec] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.prefix, str):
            raise ValueError(f"prefix must be a string, got {type(self.prefix).__name__}")
        if not self.enable_flag or not self.enable_flag.strip():
            raise ValueError("enable_flag cannot be empty")
        if not self.radamsa_path:
            raise ValueError("radamsa_path cannot be empty")
        for name in ("enable_by_default", "show_io_by_default"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be a boolean, got {value!r}")
        if self.enable_by_default:
            logger.warning(
                "enable_by_default is set: values are mutated unless "
                f"{self.prefix.upper()}{self.enable_flag.upper()} turns the gate off."
            )
        if isinstance(self.mutator, str):
            self.mutator = MutatorKind(self.mutator)
        self.prefix = self.prefix.upper()
        self.rules = [
            r if isinstance(r, RuleSpec) else RuleSpec(**r) for r in self.rules
        ]

    def to_dict(self) -> dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "prefix": self.prefix,
            "enable_flag": self.enable_flag,
            "enable_by_default": self.enable_by_default,
            "show_io_by_default": self.show_io_by_default,
            "mutator": self.mutator.value,
            "seed": self.seed,
            "radamsa_path": self.radamsa_path,
            "rules": [r.to_dict() for r in self.rules],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GateConfig:
        """Create configuration from dictionary."""
        return cls(**data)
