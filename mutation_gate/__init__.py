"""
Mutation Gate - Conditional fuzzing for strings and bytes.

A gate that decides, per value, whether to pass data through a mutation
engine (a fuzzer) or return it untouched. The decision is driven by a
global switch and per-key rules read from environment variables.

Quick Start:
    >>> from mutation_gate import Gate
    >>> gate = Gate()
    >>> gate.register_rule("animal", "skip_substring", "DOG")
    >>> gate.maybe("This is DOG", "animal")
    'This is DOG'

Environment (default prefix FUZZER_):
    - FUZZER_ENABLED: Global switch (off by default)
    - FUZZER_<KEY>: Boolean rule value
    - FUZZER_<KEY>_SKIP_SUBSTRING: Substring that prevents mutation
    - FUZZER_<KEY>_SKIP_FIRST_N: Number of leading values left untouched
    - FUZZER_SHOW_IO / FUZZER_SHOW_IO_STDERR: Log values in and out

Key Components:
    - Gate: Main entry point (register rules, maybe mutate)
    - DecisionEngine: Combines switch and rules into a verdict
    - ConfigResolver: Typed, uncached configuration lookups
    - RuleRegistry: Registered rules and skip counters

Author: Mutation Gate Team
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Mutation Gate Team"
__license__ = "MIT"

# Configuration
from mutation_gate.config import load_config, save_config

# Errors
from mutation_gate.errors import (
    DuplicateRuleError,
    GateError,
    InvalidArgumentError,
    InvalidKindError,
    InvalidSeedError,
    MutationError,
    TypeMismatchError,
)

# Main orchestrator
from mutation_gate.gate import Gate
from mutation_gate.types import (
    ABSENT,
    Decision,
    GateConfig,
    GeneratorSeed,
    LiteralSeed,
    MutatorKind,
    Rule,
    RuleKind,
    RuleSpec,
    ValueType,
)

__all__ = [
    "ABSENT",
    "Decision",
    "DuplicateRuleError",
    # Main class
    "Gate",
    # Configuration
    "GateConfig",
    # Errors
    "GateError",
    "GeneratorSeed",
    "InvalidArgumentError",
    "InvalidKindError",
    "InvalidSeedError",
    "LiteralSeed",
    "MutationError",
    "MutatorKind",
    # Types
    "Rule",
    "RuleKind",
    "RuleSpec",
    "TypeMismatchError",
    "ValueType",
    "__author__",
    "__license__",
    # Version info
    "__version__",
    "load_config",
    "save_config",
]
