"""
Rule Registry - stores rules by (data key, kind).

Rules are registered once, before evaluation, and never removed. The
registry also owns the evaluation counters of SKIP_FIRST_N rules.
"""

from __future__ import annotations

import logging

from collections.abc import Iterator
from typing import Any

from ..errors import DuplicateRuleError, InvalidArgumentError
from ..types import Rule, RuleKind, ValueType

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Ordered store of registered rules.

    Usage:
        >>> registry = RuleRegistry()
        >>> rule = registry.register("animal", "skip_first_n", 5)
        >>> rule.source_name
        'ANIMAL_SKIP_FIRST_N'
    """

    def __init__(self) -> None:
        # dicts keep insertion order, which is the evaluation order
        self._rules: dict[tuple[str, RuleKind], Rule] = {}
        self._counters: dict[tuple[str, RuleKind], int] = {}

    def register(self, data_key: str, kind: str | RuleKind, default: Any) -> Rule:
        """
        Register a rule.

        Args:
            data_key: Key that scopes the rule (trimmed, upper-cased)
            kind: A RuleKind or its name (any case)
            default: Value used when the configuration has no entry

        Returns:
            The registered Rule.

        Raises:
            InvalidArgumentError: Missing key/kind or default of the wrong type
            InvalidKindError: Unknown kind
            DuplicateRuleError: Same key and kind already registered
        """
        if data_key is None:
            raise InvalidArgumentError("rule data key is required")
        if kind is None:
            raise InvalidArgumentError("rule kind is required")
        if not isinstance(data_key, str):
            raise InvalidArgumentError(
                f"rule data key must be a string, got {type(data_key).__name__}"
            )

        normalized_key = self.normalize_key(data_key)
        if not normalized_key:
            raise InvalidArgumentError("rule data key cannot be blank")

        if isinstance(kind, RuleKind):
            rule_kind = kind
        elif isinstance(kind, str):
            rule_kind = RuleKind.parse(kind)
        else:
            raise InvalidArgumentError(
                f"rule kind must be a string, got {type(kind).__name__}"
            )

        registry_key = (normalized_key, rule_kind)
        if registry_key in self._rules:
            raise DuplicateRuleError(
                f"rule {normalized_key}::{rule_kind.value} already registered",
                details={"data_key": normalized_key, "kind": rule_kind.value},
            )

        self._check_default(rule_kind, default)

        rule = Rule(
            data_key=normalized_key,
            kind=rule_kind,
            source_name=Rule.source_name_for(normalized_key, rule_kind),
            default=default,
        )
        self._rules[registry_key] = rule
        if rule_kind.has_counter:
            self._counters[registry_key] = 0

        logger.debug(
            f"Registered rule {normalized_key}::{rule_kind.value} "
            f"(source={rule.source_name}, default={default!r})"
        )
        return rule

    @staticmethod
    def normalize_key(data_key: str) -> str:
        return data_key.strip().upper()

    def rules_for(self, data_key: str) -> list[Rule]:
        """Rules registered for exactly this key, in registration order."""
        normalized_key = self.normalize_key(data_key)
        return [r for r in self._rules.values() if r.data_key == normalized_key]

    def get(self, data_key: str, kind: str | RuleKind) -> Rule | None:
        if isinstance(kind, str):
            kind = RuleKind.parse(kind)
        return self._rules.get((self.normalize_key(data_key), kind))

    def counter_for(self, rule: Rule) -> int | None:
        """Current evaluation count of a SKIP_FIRST_N rule (None for other kinds)."""
        return self._counters.get(rule.registry_key)

    def advance(self, rule: Rule) -> int:
        """
        Increment a rule's counter.

        Returns:
            The count before the increment.
        """
        count = self._counters[rule.registry_key]
        self._counters[rule.registry_key] = count + 1
        return count

    @staticmethod
    def _check_default(kind: RuleKind, default: Any) -> None:
        value_type = kind.value_type
        if value_type is ValueType.BOOLEAN:
            valid = isinstance(default, bool)
        elif value_type is ValueType.STRING:
            valid = isinstance(default, str)
        else:
            valid = isinstance(default, int) and not isinstance(default, bool)

        if not valid:
            raise InvalidArgumentError(
                f"default for {kind.value} rule must be {value_type.value}, "
                f"got {default!r}",
                details={"kind": kind.value, "default": repr(default)},
            )

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Rule):
            return item.registry_key in self._rules
        return item in self._rules
