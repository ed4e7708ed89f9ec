"""
Tests for the Config Resolver.
"""

import pytest

from mutation_gate.errors import InvalidArgumentError, TypeMismatchError
from mutation_gate.resolver import ConfigResolver, EnvironmentSource, MappingSource
from mutation_gate.types import ABSENT, ValueType


def make_resolver(values: dict, prefix: str = "FUZZER_") -> ConfigResolver:
    """Helper to create a resolver over a plain dict."""
    return ConfigResolver(source=MappingSource(values), prefix=prefix)


class TestKeys:
    """Tests for name normalization."""

    def test_name_is_prefixed_and_uppercased(self):
        resolver = make_resolver({})
        assert resolver.key_for("animal_skip_first_n") == "FUZZER_ANIMAL_SKIP_FIRST_N"

    def test_prefix_is_uppercased(self):
        resolver = make_resolver({}, prefix="demo_")
        assert resolver.prefix == "DEMO_"
        assert resolver.key_for("enabled") == "DEMO_ENABLED"

    def test_prefix_can_be_changed(self):
        values = {"A_ENABLED": "1", "B_ENABLED": "0"}
        resolver = make_resolver(values, prefix="a_")
        assert resolver.resolve("enabled", ValueType.BOOLEAN) is True

        resolver.prefix = "b_"
        assert resolver.resolve("enabled", ValueType.BOOLEAN) is False

    def test_non_string_prefix_rejected(self):
        resolver = make_resolver({})
        with pytest.raises(InvalidArgumentError):
            resolver.prefix = 42


class TestAbsent:
    """Missing entries are ABSENT, not errors."""

    @pytest.mark.parametrize("value_type", list(ValueType))
    def test_missing_entry_is_absent(self, value_type):
        resolver = make_resolver({})
        assert resolver.resolve("nothing", value_type) is ABSENT

    def test_absent_is_distinct_from_false(self):
        assert ABSENT is not False
        assert ABSENT is not None
        assert not ABSENT

    def test_resolve_or_default(self):
        resolver = make_resolver({"FUZZER_LIMIT": "3"})
        assert resolver.resolve_or_default("limit", ValueType.NUMBER, 9) == 3
        assert resolver.resolve_or_default("other", ValueType.NUMBER, 9) == 9


class TestBooleanDecoding:
    """Tests for boolean values."""

    @pytest.mark.parametrize("raw", ["1", "true", "TRUE", "True", " true "])
    def test_true_values(self, raw):
        resolver = make_resolver({"FUZZER_FLAG": raw})
        assert resolver.resolve("flag", ValueType.BOOLEAN) is True

    @pytest.mark.parametrize("raw", ["0", "false", "FALSE", "False"])
    def test_false_values(self, raw):
        resolver = make_resolver({"FUZZER_FLAG": raw})
        assert resolver.resolve("flag", ValueType.BOOLEAN) is False

    @pytest.mark.parametrize("raw", ["maybe", "yes", "2", ""])
    def test_malformed_boolean_raises(self, raw):
        resolver = make_resolver({"FUZZER_FLAG": raw})
        with pytest.raises(TypeMismatchError) as exc_info:
            resolver.resolve("flag", ValueType.BOOLEAN)
        assert exc_info.value.details["key"] == "FUZZER_FLAG"


class TestOtherDecoding:
    """Tests for string and number values."""

    def test_string_is_verbatim(self):
        resolver = make_resolver({"FUZZER_ANIMAL_SKIP_SUBSTRING": " Cat "})
        value = resolver.resolve("animal_skip_substring", ValueType.STRING)
        assert value == " Cat "

    def test_number_is_parsed(self):
        resolver = make_resolver({"FUZZER_N": "12"})
        assert resolver.resolve("n", ValueType.NUMBER) == 12

    def test_negative_number(self):
        resolver = make_resolver({"FUZZER_N": "-1"})
        assert resolver.resolve("n", ValueType.NUMBER) == -1

    @pytest.mark.parametrize("raw", ["abc", "1.5", ""])
    def test_malformed_number_raises(self, raw):
        resolver = make_resolver({"FUZZER_N": raw})
        with pytest.raises(TypeMismatchError):
            resolver.resolve("n", ValueType.NUMBER)


class TestNoCaching:
    """The source is re-read on every call."""

    def test_changes_are_seen(self):
        values = {}
        resolver = make_resolver(values)
        assert resolver.resolve("enabled", ValueType.BOOLEAN) is ABSENT

        values["FUZZER_ENABLED"] = "1"
        assert resolver.resolve("enabled", ValueType.BOOLEAN) is True

        values["FUZZER_ENABLED"] = "0"
        assert resolver.resolve("enabled", ValueType.BOOLEAN) is False

    def test_environment_source_reads_live(self, monkeypatch):
        resolver = ConfigResolver(source=EnvironmentSource(), prefix="MG_TEST_")
        monkeypatch.delenv("MG_TEST_ENABLED", raising=False)
        assert resolver.resolve("enabled", ValueType.BOOLEAN) is ABSENT

        monkeypatch.setenv("MG_TEST_ENABLED", "true")
        assert resolver.resolve("enabled", ValueType.BOOLEAN) is True
