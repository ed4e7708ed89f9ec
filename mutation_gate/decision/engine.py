"""
Decision Engine - decides whether a value should be mutated.

The decision combines the global switch with every rule registered for the
value's data key. Rules can only veto: once a rule turns the verdict to
"don't mutate", no later rule can turn it back.

Decision Order:
    1. Global switch off (or absent and disabled by default) -> False
    2. No data key                                           -> True
    3. Every rule for the key, in registration order:
       | Kind           | Vetoes when                        |
       |----------------|------------------------------------|
       | BOOLEAN        | resolved value is false            |
       | SKIP_SUBSTRING | value contains resolved substring  |
       | SKIP_FIRST_N   | counter < resolved N (counter +1)  |

Author: Mutation Gate Team
"""

from __future__ import annotations

import logging

from typing import Any

from ..resolver import ConfigResolver
from ..rules import RuleRegistry
from ..types import Decision, Rule, RuleKind, RuleOutcome, ValueType

logger = logging.getLogger(__name__)


class DecisionEngine:
    """
    Evaluates registered rules and produces mutation decisions.

    SKIP_FIRST_N counters advance on every evaluation of their rule, even
    when an earlier rule has already vetoed the value.

    Usage:
        >>> engine = DecisionEngine(resolver, registry)
        >>> engine.decide("ANIMAL", "This is DOG")
        False
    """

    def __init__(
        self,
        resolver: ConfigResolver,
        registry: RuleRegistry,
        enable_flag: str,
        enable_by_default: bool = False,
    ) -> None:
        """
        Initialize the decision engine.

        Args:
            resolver: Resolver used for the global switch and rule values
            registry: Rules and their counters
            enable_flag: Name of the global switch (without prefix)
            enable_by_default: Global switch value when not configured
        """
        self._resolver = resolver
        self._registry = registry
        self.enable_flag = enable_flag
        self.enable_by_default = enable_by_default
        logger.debug(
            f"DecisionEngine initialized: enable_flag={enable_flag}, "
            f"enable_by_default={enable_by_default}"
        )

    def is_enabled(self) -> bool:
        """Resolve the global switch."""
        return self._resolver.resolve_or_default(
            self.enable_flag, ValueType.BOOLEAN, self.enable_by_default
        )

    def decide(self, data_key: str | None, value: str | bytes) -> bool:
        """
        Decide whether value should be mutated.

        Args:
            data_key: Key scoping the value, or None for unscoped data
            value: The value being considered

        Returns:
            True to mutate, False to pass the value through.
        """
        return self.explain(data_key, value).allowed

    def explain(self, data_key: str | None, value: str | bytes) -> Decision:
        """
        Make a decision and report the outcome of each rule.

        Every rule value is resolved before any rule is applied, so a
        configuration error leaves all counters untouched.

        Raises:
            TypeMismatchError: If a configuration value cannot be decoded.
        """
        if not self.is_enabled():
            return Decision(data_key=data_key, allowed=False, enabled=False)

        if data_key is None:
            return Decision(data_key=None, allowed=True, enabled=True)

        normalized_key = RuleRegistry.normalize_key(data_key)
        rules = self._registry.rules_for(normalized_key)
        resolved = [
            (rule, self._resolver.resolve_or_default(rule.source_name, rule.value_type, rule.default))
            for rule in rules
        ]

        allowed = True
        outcomes: list[RuleOutcome] = []
        for rule, rule_value in resolved:
            outcome = self._apply(rule, rule_value, value)
            allowed = allowed and not outcome.vetoed
            outcomes.append(outcome)

        decision = Decision(
            data_key=normalized_key,
            allowed=allowed,
            enabled=True,
            outcomes=tuple(outcomes),
        )
        logger.debug(
            f"Decision for {normalized_key}: allowed={allowed}, "
            f"rules={len(outcomes)}, reasons={list(decision.reasons)}"
        )
        return decision

    def _apply(self, rule: Rule, rule_value: Any, value: str | bytes) -> RuleOutcome:
        """Apply a single rule. Advances the counter of SKIP_FIRST_N rules."""
        if rule.kind is RuleKind.BOOLEAN:
            return RuleOutcome(rule=rule, value=rule_value, vetoed=rule_value is False)

        if rule.kind is RuleKind.SKIP_SUBSTRING:
            return RuleOutcome(
                rule=rule,
                value=rule_value,
                vetoed=self.contains(value, rule_value),
            )

        if rule.kind is RuleKind.SKIP_FIRST_N:
            count = self._registry.advance(rule)
            return RuleOutcome(
                rule=rule,
                value=rule_value,
                vetoed=count < rule_value,
                count=count,
            )

        raise AssertionError(f"unhandled rule kind {rule.kind!r}")

    @staticmethod
    def contains(value: str | bytes, substring: str) -> bool:
        """
        Substring test that accepts bytes values.

        For bytes the substring is UTF-8 encoded; surrogate escapes (as
        os.environ produces for undecodable bytes) map back to the raw bytes.
        """
        if isinstance(value, bytes):
            try:
                needle = substring.encode("utf-8", "surrogateescape")
            except UnicodeEncodeError:
                needle = substring.encode("utf-8", "surrogatepass")
            return needle in value
        return substring in value

    def explain_decision(self, decision: Decision) -> str:
        """
        Generate a human-readable explanation of a decision.

        Args:
            decision: The decision to explain

        Returns:
            Multi-line string explanation
        """
        lines = [
            "=" * 40,
            "MUTATION DECISION",
            "=" * 40,
            f"Data Key: {decision.data_key or '(none)'}",
            f"Enabled:  {decision.enabled}",
            f"Mutate:   {decision.allowed}",
            "",
            "RULES:",
        ]

        if decision.outcomes:
            for outcome in decision.outcomes:
                marker = "veto" if outcome.vetoed else "pass"
                line = f"  [{marker}] {outcome.rule.kind.value} {outcome.rule.source_name}={outcome.value!r}"
                if outcome.count is not None:
                    line += f" (seen {outcome.count})"
                lines.append(line)
        else:
            lines.append("  • No rules applied")

        lines.append("=" * 40)
        return "\n".join(lines)
