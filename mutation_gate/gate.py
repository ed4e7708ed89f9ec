"""
Mutation Gate - Main orchestration module.

This is the primary entry point for using Mutation Gate.
Brings together configuration, rules, decisions and the mutation engine.
"""

from __future__ import annotations

import logging

from typing import Any

from .config import load_config
from .decision import DecisionEngine
from .errors import InvalidArgumentError
from .logging import IOEcho
from .mutation import Mutator, create_mutator
from .resolver import ConfigResolver, ConfigSource
from .rules import RuleRegistry
from .types import Decision, GateConfig, Rule, RuleKind

logger = logging.getLogger(__name__)


class Gate:
    """
    Main orchestration class for Mutation Gate.

    Each Gate owns its own rules, counters and prefix, so several
    independently configured gates can live in one process.

    Usage:
        gate = Gate()
        gate.register_rule("animal", "skip_substring", "DOG")

        # Mutated only if FUZZER_ENABLED=1 and the value has no "DOG"
        data = gate.maybe(data, "animal")
    """

    def __init__(
        self,
        config: GateConfig | None = None,
        source: ConfigSource | None = None,
        mutator: Mutator | None = None,
    ):
        """
        Initialize Mutation Gate.

        Args:
            config: Configuration (loads from file if not provided)
            source: Key/value source for lookups (process environment by default)
            mutator: Mutation engine (built from config if not provided)
        """
        self.config = config or load_config()

        # Initialize components
        self.resolver = ConfigResolver(source=source, prefix=self.config.prefix)
        self.registry = RuleRegistry()
        self.decision_engine = DecisionEngine(
            resolver=self.resolver,
            registry=self.registry,
            enable_flag=self.config.enable_flag,
            enable_by_default=self.config.enable_by_default,
        )
        self.mutator = mutator or create_mutator(self.config)
        self.io_echo = IOEcho(self.resolver, show_by_default=self.config.show_io_by_default)

        for spec in self.config.rules:
            self.register_rule(spec.data_key, spec.kind, spec.default)

        logger.debug(
            f"Gate initialized: prefix={self.resolver.prefix}, "
            f"mutator={type(self.mutator).__name__}, rules={len(self.registry)}"
        )

    @property
    def prefix(self) -> str:
        return self.resolver.prefix

    def set_config_prefix(self, prefix: str) -> None:
        """
        Set the prefix for all subsequent configuration lookups.

        Useful to scope different gates. The prefix is upper-cased.

        Raises:
            InvalidArgumentError: If prefix is not a string.
        """
        self.resolver.prefix = prefix
        logger.debug(f"Configuration prefix set to {self.resolver.prefix}")

    def register_rule(self, data_key: str, kind: str | RuleKind, default: Any) -> Rule:
        """
        Register a rule for a data key.

        Args:
            data_key: Key the rule applies to (normalized to uppercase)
            kind: BOOLEAN, SKIP_SUBSTRING or SKIP_FIRST_N (any case)
            default: Value used when the rule is not configured

        Returns:
            The registered Rule
        """
        return self.registry.register(data_key, kind, default)

    register_flag = register_rule

    def set_mutation_seed(self, seed: Any) -> None:
        """
        Set the seed of the mutation engine.

        Args:
            seed: A string, or a function returning the seed when called

        Raises:
            InvalidSeedError: If seed is neither a string nor a function.
        """
        self.mutator.set_seed(seed)

    def decide(self, data_key: str | None, value: str | bytes) -> bool:
        """True if value (scoped by data_key) would be mutated. Advances counters."""
        return self.decision_engine.decide(data_key, value)

    def explain(self, data_key: str | None, value: str | bytes) -> Decision:
        """Like decide(), returning the full Decision. Advances counters."""
        return self.decision_engine.explain(data_key, value)

    def maybe(self, data: str | bytes, data_key: str | None = None) -> str | bytes:
        """
        (Maybe) mutate data.

        Args:
            data: The string or bytes to consider
            data_key: Optional key scoping the rules that apply

        Returns:
            The mutated data, or data itself when the decision is negative.
        """
        if not isinstance(data, (str, bytes)):
            raise InvalidArgumentError(
                f"data must be str or bytes, got {type(data).__name__}"
            )
        if data_key is not None and not isinstance(data_key, str):
            raise InvalidArgumentError(
                f"data key must be a string, got {type(data_key).__name__}"
            )

        self.io_echo.show("in", data)
        if self.decision_engine.decide(data_key, data):
            data = self.mutator.mutate(data)
            logger.info(f"Mutated value for key {data_key or '(none)'}")
        self.io_echo.show("out", data)
        return data

    evaluate = maybe

    def rules(self) -> list[dict[str, Any]]:
        """
        Describe registered rules with their current values and counters.

        Resolves values without advancing any counter.
        """
        described = []
        for rule in self.registry:
            entry = rule.to_dict()
            entry["value"] = self.resolver.resolve_or_default(
                rule.source_name, rule.value_type, rule.default
            )
            entry["config_key"] = self.resolver.key_for(rule.source_name)
            entry["count"] = self.registry.counter_for(rule)
            described.append(entry)
        return described

    def get_status(self) -> dict[str, Any]:
        """Current switches and rule summary."""
        return {
            "prefix": self.resolver.prefix,
            "enable_key": self.resolver.key_for(self.config.enable_flag),
            "enabled": self.decision_engine.is_enabled(),
            "show_io": self.io_echo.is_enabled(),
            "mutator": type(self.mutator).__name__,
            "rules": self.rules(),
        }
