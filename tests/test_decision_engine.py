"""
Tests for the Decision Engine.
"""

import pytest

from mutation_gate.decision.engine import DecisionEngine
from mutation_gate.errors import TypeMismatchError
from mutation_gate.resolver import ConfigResolver, MappingSource
from mutation_gate.rules import RuleRegistry


def make_engine(
    values: dict | None = None,
    enable_by_default: bool = False,
) -> tuple[DecisionEngine, RuleRegistry, dict]:
    """Helper to create an engine over a mutable dict of configuration values."""
    values = {} if values is None else values
    registry = RuleRegistry()
    resolver = ConfigResolver(source=MappingSource(values), prefix="FUZZER_")
    engine = DecisionEngine(
        resolver=resolver,
        registry=registry,
        enable_flag="ENABLED",
        enable_by_default=enable_by_default,
    )
    return engine, registry, values


class TestGlobalSwitch:
    """Tests for the global enable switch."""

    def test_disabled_by_default(self):
        engine, _, _ = make_engine()
        assert engine.decide(None, "foo") is False
        assert engine.decide("ANIMAL", "foo") is False

    def test_enabled_by_default_option(self):
        engine, _, _ = make_engine(enable_by_default=True)
        assert engine.decide(None, "foo") is True

    def test_switch_overrides_default(self):
        engine, _, _ = make_engine({"FUZZER_ENABLED": "0"}, enable_by_default=True)
        assert engine.decide(None, "foo") is False

    def test_enabled_without_rules(self):
        engine, _, _ = make_engine({"FUZZER_ENABLED": "1"})
        for value in ["", "foo", b"\x00\xff"]:
            assert engine.decide("K", value) is True
            assert engine.decide(None, value) is True

    def test_disabled_does_not_advance_counters(self):
        engine, registry, values = make_engine({"FUZZER_ENABLED": "0"})
        rule = registry.register("animal", "skip_first_n", 5)

        for _ in range(3):
            assert engine.decide("ANIMAL", "x") is False
        assert registry.counter_for(rule) == 0

    def test_malformed_switch_raises(self):
        engine, _, _ = make_engine({"FUZZER_ENABLED": "maybe"})
        with pytest.raises(TypeMismatchError):
            engine.decide(None, "foo")


class TestBooleanRule:
    """Tests for BOOLEAN rules."""

    def test_false_default_vetoes(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1"})
        registry.register("animal", "boolean", False)

        assert engine.decide("ANIMAL", "foo") is False
        assert engine.decide(None, "foo") is True

    def test_configuration_overrides_default(self):
        engine, registry, _ = make_engine(
            {"FUZZER_ENABLED": "1", "FUZZER_ARBITRARY_BOOLEAN": "1"}
        )
        registry.register("arbitrary_boolean", "boolean", False)
        assert engine.decide("arbitrary_boolean", "foo") is True

    def test_configuration_can_veto(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1", "FUZZER_ANIMAL": "false"})
        registry.register("animal", "boolean", True)
        assert engine.decide("animal", "foo") is False

    def test_malformed_value_raises(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1", "FUZZER_ANIMAL": "maybe"})
        registry.register("animal", "boolean", True)
        with pytest.raises(TypeMismatchError):
            engine.decide("animal", "foo")


class TestSkipSubstringRule:
    """Tests for SKIP_SUBSTRING rules."""

    def test_default_substring(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1"})
        registry.register("animal", "skip_substring", "DOG")

        assert engine.decide("ANIMAL", "This is DOG") is False
        assert engine.decide("ANIMAL", "This is CAT") is True
        assert engine.decide(None, "This is DOG") is True

    def test_configured_substring(self):
        engine, registry, _ = make_engine(
            {"FUZZER_ENABLED": "1", "FUZZER_ANIMAL_SKIP_SUBSTRING": "CAT"}
        )
        registry.register("animal", "skip_substring", "DOG")

        assert engine.decide("animal", "This is DOG") is True
        assert engine.decide("animal", "This is CAT") is False

    def test_bytes_value(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1"})
        registry.register("blob", "skip_substring", "MAGIC")

        assert engine.decide("blob", b"\x00MAGIC\xff") is False
        assert engine.decide("blob", b"\x00OTHER\xff") is True

    def test_undecodable_environment_substring(self):
        """A surrogate-escaped substring matches the raw bytes it came from."""
        engine, registry, _ = make_engine(
            {"FUZZER_ENABLED": "1", "FUZZER_BLOB_SKIP_SUBSTRING": b"\xff".decode("utf-8", "surrogateescape")}
        )
        registry.register("blob", "skip_substring", "MAGIC")

        assert engine.decide("blob", b"\x00\xff") is False
        assert engine.decide("blob", b"\x00\xfe") is True

    def test_lone_surrogate_substring(self):
        """Surrogates outside the escape range do not break the decision."""
        engine, registry, _ = make_engine(
            {"FUZZER_ENABLED": "1", "FUZZER_BLOB_SKIP_SUBSTRING": "\ud800"}
        )
        registry.register("blob", "skip_substring", "MAGIC")

        assert engine.decide("blob", b"plain") is True


class TestSkipFirstNRule:
    """Tests for SKIP_FIRST_N rules."""

    def test_first_n_are_vetoed(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1"})
        rule = registry.register("animal", "skip_first_n", 5)

        for i in range(5):
            assert engine.decide("ANIMAL", "This is DOG") is False
            assert registry.counter_for(rule) == i + 1
            # Other keys do not consume the window
            assert engine.decide(None, "This is CAT") is True
            assert engine.decide("PLANT", "This is CAT") is True

        for _ in range(3):
            assert engine.decide("ANIMAL", "This is DOG") is True
        assert registry.counter_for(rule) == 8

    def test_configured_threshold(self):
        engine, registry, _ = make_engine(
            {"FUZZER_ENABLED": "1", "FUZZER_ANIMAL_SKIP_FIRST_N": "2"}
        )
        registry.register("animal", "skip_first_n", 5)

        results = [engine.decide("animal", "x") for _ in range(4)]
        assert results == [False, False, True, True]

    def test_zero_skips_nothing(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1"})
        registry.register("animal", "skip_first_n", 0)
        assert engine.decide("animal", "x") is True

    def test_malformed_threshold_leaves_counter(self):
        engine, registry, values = make_engine(
            {"FUZZER_ENABLED": "1", "FUZZER_ANIMAL_SKIP_FIRST_N": "lots"}
        )
        rule = registry.register("animal", "skip_first_n", 5)

        with pytest.raises(TypeMismatchError):
            engine.decide("animal", "x")
        assert registry.counter_for(rule) == 0


class TestCombinedRules:
    """Tests for several rules on one key."""

    def test_veto_is_not_reverted(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1"})
        registry.register("animal", "boolean", False)
        registry.register("animal", "skip_substring", "NEVER_PRESENT")

        assert engine.decide("animal", "x") is False

    def test_counter_advances_after_earlier_veto(self):
        engine, registry, values = make_engine({"FUZZER_ENABLED": "1"})
        registry.register("animal", "skip_substring", "DOG")
        rule = registry.register("animal", "skip_first_n", 2)

        assert engine.decide("animal", "DOG") is False
        assert engine.decide("animal", "DOG") is False
        assert registry.counter_for(rule) == 2

        # Window consumed; only the substring rule still applies
        assert engine.decide("animal", "CAT") is True
        assert engine.decide("animal", "DOG") is False

    def test_error_in_later_rule_leaves_earlier_counter(self):
        engine, registry, values = make_engine(
            {"FUZZER_ENABLED": "1", "FUZZER_ANIMAL": "nope"}
        )
        rule = registry.register("animal", "skip_first_n", 2)
        registry.register("animal", "boolean", True)

        with pytest.raises(TypeMismatchError):
            engine.decide("animal", "x")
        assert registry.counter_for(rule) == 0


class TestExplain:
    """Tests for decision explanations."""

    def test_reasons(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1"})
        registry.register("animal", "boolean", False)
        registry.register("animal", "skip_substring", "DOG")
        registry.register("animal", "skip_first_n", 1)

        decision = engine.explain("animal", "This is DOG")

        assert decision.allowed is False
        assert decision.reasons == (
            "ANIMAL_disabled",
            "ANIMAL_SKIP_SUBSTRING_matched",
            "ANIMAL_SKIP_FIRST_N_0_of_1",
        )

    def test_globally_disabled_reason(self):
        engine, _, _ = make_engine()
        decision = engine.explain("animal", "x")
        assert decision.enabled is False
        assert decision.reasons == ("globally_disabled",)

    def test_explain_decision_readable(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1"})
        registry.register("animal", "skip_first_n", 3)

        text = engine.explain_decision(engine.explain("animal", "x")).lower()

        assert "data key: animal" in text
        assert "skip_first_n" in text
        assert "veto" in text

    def test_to_dict(self):
        engine, registry, _ = make_engine({"FUZZER_ENABLED": "1"})
        registry.register("animal", "skip_substring", "DOG")

        data = engine.explain("animal", "CAT").to_dict()

        assert data["allowed"] is True
        assert data["rules"][0]["source_name"] == "ANIMAL_SKIP_SUBSTRING"
        assert data["rules"][0]["vetoed"] is False
