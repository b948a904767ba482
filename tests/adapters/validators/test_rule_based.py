"""
Tests for RuleBasedValidator.

This module contains tests for the RuleBasedValidator implementation.
"""

import logging
import threading
import time

import pytest

from sieve.adapters.validators.rule_based import RuleBasedValidator
from sieve.core.models import RuleType, ValidationResult
from sieve.core.exceptions import ConfigurationError, ValidationError


def _reason(template: str, input: str) -> str:
    return f'"{template}" is not met by "{input}"'


RULE_CASES = [
    pytest.param(
        lambda v: v.starts_with("123"), RuleType.STARTS_WITH, "starts with 123",
        ["123aaa", "123bbb", "123ccc"], ["aaa123", "bbb123", "ccc123"],
        id="starts_with",
    ),
    pytest.param(
        lambda v: v.ends_with("123"), RuleType.ENDS_WITH, "ends with 123",
        ["aaa123", "bbb123", "ccc123"], ["123aaa", "123bbb", "123ccc"],
        id="ends_with",
    ),
    pytest.param(
        lambda v: v.longer_than(4), RuleType.LONGER_THAN, "longer than 4",
        ["aaaaa", "aaaaaa"], ["a", "aa", "aaa", "aaaa"],
        id="longer_than",
    ),
    pytest.param(
        lambda v: v.longer_than_or_equal(5), RuleType.LONGER_THAN_OR_EQUAL, "longer than or equal to 5",
        ["aaaaa", "aaaaaa", "aaaaaaa"], ["a", "aa", "aaa", "aaaa"],
        id="longer_than_or_equal",
    ),
    pytest.param(
        lambda v: v.shorter_than(4), RuleType.SHORTER_THAN, "shorter than 4",
        ["a", "aa", "aaa"], ["aaaa", "aaaaa", "aaaaaa"],
        id="shorter_than",
    ),
    pytest.param(
        lambda v: v.shorter_than_or_equal(5), RuleType.SHORTER_THAN_OR_EQUAL, "shorter than or equal to 5",
        ["a", "aa", "aaa", "aaaa", "aaaaa"], ["aaaaaa", "aaaaaaa", "aaaaaaaa"],
        id="shorter_than_or_equal",
    ),
    pytest.param(
        lambda v: v.contains("123"), RuleType.CONTAINS, "contains 123",
        ["aaa123aaa", "bbb123bbb", "ccc123ccc"], ["aaa", "bbb", "ccc"],
        id="contains",
    ),
    pytest.param(
        lambda v: v.contains_a_character(), RuleType.CONTAINS_A_CHARACTER, "contains a character",
        ["aaa", "bbb", "ccc"], ["111", "222", "333"],
        id="contains_a_character",
    ),
    pytest.param(
        lambda v: v.contains_a_number(), RuleType.CONTAINS_A_NUMBER, "contains a number",
        ["111", "222", "333"], ["aaa", "bbb", "ccc"],
        id="contains_a_number",
    ),
    pytest.param(
        lambda v: v.ignore("aaa"), RuleType.IGNORE, "ignore aaa",
        ["bbb", "ccc"], ["aaa"],
        id="ignore",
    ),
    pytest.param(
        lambda v: v.regexp("t([a-z]+)t"), RuleType.REGEXP, "regexp t([a-z]+)t",
        ["test", "talent"], ["aaa", "bbb", "ccc"],
        id="regexp",
    ),
    pytest.param(
        lambda v: v.regexp("[0-9"), RuleType.REGEXP, "regexp [0-9",
        [], ["aaa", "bbb", "ccc", "[0-9", "123"],
        id="invalid_regexp",
    ),
    pytest.param(
        lambda v: v.custom("custom reason", lambda input: len(input) % 3 == 0), RuleType.CUSTOM, "custom reason",
        ["aaa", "aaaaaa"], ["a", "aa", "aaaa", "aaaaa"],
        id="custom",
    ),
]


@pytest.fixture
def validator():
    """Create a RuleBasedValidator and stop its suppression on teardown."""
    with RuleBasedValidator() as validator:
        yield validator


@pytest.mark.parametrize("configure, rule_type, template, approved, denied", RULE_CASES)
def test_rules(validator, configure, rule_type, template, approved, denied):
    """Each rule approves satisfying input and names itself when denying."""
    assert configure(validator) is validator

    for input in approved:
        result = validator.validate(input)
        assert result.approval is True
        assert result.rule_type == ""
        assert result.reason == ""

    for input in denied:
        result = validator.validate(input)
        assert result.approval is False
        assert result.rule_type == rule_type
        assert result.rule_type == rule_type.value
        assert result.reason == _reason(template, input)


def test_empty_validator_approves_everything(validator):
    """A validator without rules approves any input, including the empty string."""
    assert validator.validate("") == ValidationResult(approval=True, rule_type="", reason="")
    assert validator.validate("anything").approval is True


def test_first_failing_rule_is_reported(validator):
    """The first failing rule in append order is the one reported."""
    validator.starts_with("x").longer_than(10).contains_a_number()

    result = validator.validate("abc")
    assert result.rule_type == RuleType.STARTS_WITH

    result = validator.validate("xabc")
    assert result.rule_type == RuleType.LONGER_THAN

    result = validator.validate("xabcdefghijk")
    assert result.rule_type == RuleType.CONTAINS_A_NUMBER
    assert result.reason == _reason("contains a number", "xabcdefghijk")


def test_rules_keep_append_order(validator):
    """Rule order is the order of the fluent calls."""
    validator.ends_with("z").ignore("q").contains("m")
    assert [rule.rule_type for rule in validator.rules] == [
        RuleType.ENDS_WITH, RuleType.IGNORE, RuleType.CONTAINS
    ]


def test_ignore_all_equals_chained_ignores():
    """ignore_all([a, b]) behaves like ignore(a).ignore(b)."""
    with RuleBasedValidator() as grouped, RuleBasedValidator() as chained:
        grouped.ignore_all(["a", "b"])
        chained.ignore("a").ignore("b")

        assert [r.reason for r in grouped.rules] == [r.reason for r in chained.rules]
        for input in ["a", "b", "c"]:
            assert grouped.validate(input) == chained.validate(input)


def test_custom_rule_error_is_raised(validator):
    """A custom predicate that raises surfaces as ValidationError."""
    def broken(input):
        raise KeyError(input)

    validator.custom("never works", broken)

    with pytest.raises(ValidationError) as exc_info:
        validator.validate("aaa")
    assert isinstance(exc_info.value.__cause__, KeyError)


def test_ignore_duplicates(validator):
    """A repeat within the window is denied; after the window it is approved again."""
    validator.ignore_duplicates_for(0.05)

    assert validator.validate("aaa").approval is True

    result = validator.validate("aaa")
    assert result.approval is False
    assert result.rule_type == RuleType.IGNORE_DUPLICATES
    assert result.reason == "ignore duplication"

    time.sleep(0.2)

    assert validator.validate("aaa").approval is True
    assert validator.validate("aaa").approval is False

    validator.stop_ignoring_duplicates()

    assert validator.validate("aaa").approval is True
    assert validator.validate("aaa").approval is True
    assert len(validator.recents) == 0


def test_denied_input_is_not_recorded(validator):
    """Only inputs that pass every rule are remembered."""
    validator.contains_a_number().ignore_duplicates_for(5)

    assert validator.validate("abc").rule_type == RuleType.CONTAINS_A_NUMBER
    assert validator.validate("abc").rule_type == RuleType.CONTAINS_A_NUMBER
    assert "abc" not in validator.recents


def test_duplicate_does_not_extend_window(validator):
    """Repeated denials leave the original expiry untouched."""
    validator.ignore_duplicates_for(5)

    assert validator.validate("aaa").approval is True
    expires = validator.recents._recents["aaa"]
    for _ in range(3):
        time.sleep(0.01)
        assert validator.validate("aaa").approval is False

    assert validator.recents._recents["aaa"] == expires


def test_multiple():
    """Character, number, length and ignore rules combined with suppression."""
    validator = (
        RuleBasedValidator()
        .contains_a_character()
        .contains_a_number()
        .longer_than_or_equal(5)
        .ignore_all(["ABC002", "ABC003"])
        .ignore_duplicates_for(0.5)
    )
    try:
        result = validator.validate("ABC002")
        assert result.approval is False
        assert result.rule_type == RuleType.IGNORE

        result = validator.validate("ABC003")
        assert result.approval is False
        assert result.rule_type == RuleType.IGNORE

        assert validator.validate("ABC001").approval is True

        result = validator.validate("ABC001")
        assert result.approval is False
        assert result.rule_type == RuleType.IGNORE_DUPLICATES
    finally:
        validator.close()


def test_concurrent_validation_approves_once(validator):
    """Many threads validating the same input produce exactly one approval."""
    validator.longer_than(0).ignore_duplicates_for(10)
    threads_count = 16
    barrier = threading.Barrier(threads_count)
    results = []
    results_lock = threading.Lock()

    def worker():
        barrier.wait()
        result = validator.validate("shared")
        with results_lock:
            results.append(result)

    threads = [threading.Thread(target=worker) for _ in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == threads_count
    assert sum(1 for r in results if r.approval) == 1
    assert all(r.rule_type == RuleType.IGNORE_DUPLICATES for r in results if not r.approval)


def test_initialize_from_config(tmp_path):
    """Rules and the suppression window are read from the validator section."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "validator:\n"
        "  rules:\n"
        "    - type: containsACharacter\n"
        "    - type: containsANumber\n"
        "    - type: longerThanOrEqual\n"
        "      value: 5\n"
        "    - type: ignoreAll\n"
        "      value: [ABC002, ABC003]\n"
        "  ignore_duplicates_for: 0.5\n"
    )

    with RuleBasedValidator(config_path=str(config_file)) as validator:
        validator.initialize()

        assert len(validator.rules) == 5
        assert validator.recents.window == pytest.approx(0.5)
        assert validator.validate("ABC002").rule_type == RuleType.IGNORE
        assert validator.validate("ABC1").rule_type == RuleType.LONGER_THAN_OR_EQUAL
        assert validator.validate("ABC001").approval is True
        assert validator.validate("ABC001").rule_type == RuleType.IGNORE_DUPLICATES


def test_initialize_uses_env_config_path(tmp_path, monkeypatch):
    """SIEVE_CONFIG_PATH is used when no path is given."""
    config_file = tmp_path / "env_config.yaml"
    config_file.write_text("validator:\n  rules:\n    - type: startsWith\n      value: ok\n")
    monkeypatch.setenv("SIEVE_CONFIG_PATH", str(config_file))

    with RuleBasedValidator() as validator:
        validator.initialize()
        assert validator.validate("ok then").approval is True
        assert validator.validate("not ok").rule_type == RuleType.STARTS_WITH


@pytest.mark.parametrize("body", [
    "validator:\n  rules:\n    - type: sortOf\n",
    "validator:\n  rules:\n    - type: longerThan\n      value: five\n",
    "validator:\n  rules:\n    - type: custom\n      value: anything\n",
    "validator:\n  rules: startsWith\n",
    "validator:\n  ignore_duplicates_for: -1\n",
    "validator: [\n",
])
def test_initialize_rejects_bad_config(tmp_path, body):
    """Invalid configuration raises ConfigurationError."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(body)

    with RuleBasedValidator(config_path=str(config_file)) as validator:
        with pytest.raises(ConfigurationError):
            validator.initialize()


def test_initialize_missing_file(tmp_path):
    """A missing configuration file raises ConfigurationError."""
    with RuleBasedValidator(config_path=str(tmp_path / "absent.yaml")) as validator:
        with pytest.raises(ConfigurationError):
            validator.initialize()


def test_healthcheck(validator):
    """Test the healthcheck method."""
    health_result = validator.healthcheck()

    assert isinstance(health_result, dict)
    assert "healthy" in health_result
    assert "message" in health_result
    assert "details" in health_result
    assert health_result["healthy"] is True
    assert health_result["details"]["ignoring_duplicates"] is False

    validator.starts_with("a").ignore_duplicates_for(1)
    validator.validate("abc")
    health_result = validator.healthcheck()

    assert health_result["healthy"] is True
    assert health_result["details"]["rules"] == 1
    assert health_result["details"]["recents"] == 1
    assert health_result["details"]["reaper_alive"] is True


def test_close_stops_suppression():
    """Leaving the context manager disables suppression and its reaper."""
    with RuleBasedValidator() as validator:
        validator.ignore_duplicates_for(1)
        reaper = validator.recents._state.reaper
        assert reaper.is_alive()

    assert not reaper.is_alive()
    assert validator.recents.enabled is False
    validator.close()


def test_initialize_applies_logger_level(tmp_path):
    """loggers.structured_logger.level from the config sets the validator's log level."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "validator:\n"
        "  rules:\n"
        "    - type: containsANumber\n"
        "loggers:\n"
        "  structured_logger:\n"
        "    level: DEBUG\n"
    )

    with RuleBasedValidator(logger_name="test_validator_debug", config_path=str(config_file)) as validator:
        assert validator.logger.logger.level == logging.INFO
        validator.initialize()
        assert validator.logger.logger.level == logging.DEBUG

        # A second validator on the same logger keeps the configured level
        with RuleBasedValidator(logger_name="test_validator_debug") as other:
            assert other.logger.logger.level == logging.DEBUG


def test_initialize_rejects_unknown_logger_level(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("loggers:\n  structured_logger:\n    level: LOUD\n")

    with RuleBasedValidator(logger_name="test_validator_loud", config_path=str(config_file)) as validator:
        with pytest.raises(ConfigurationError):
            validator.initialize()
