"""
Catalog of rule constructors.

Every constructor returns an immutable Rule whose predicate is a pure function
of the input string. Lengths are measured in UTF-8 bytes so that multi-byte
characters count once per encoded byte.
"""

import re
from typing import Any, Callable, Dict, Iterable, List, Mapping

from sieve.core.models import Rule, RuleType
from sieve.core.exceptions import ConfigurationError
from sieve.adapters.loggers import StructuredLogger


def _byte_length(input: str) -> int:
    return len(input.encode("utf-8"))


def starts_with(text: str) -> Rule:
    return Rule(
        reason=f"starts with {text}",
        rule_type=RuleType.STARTS_WITH,
        predicate=lambda input: input.startswith(text),
    )


def ends_with(text: str) -> Rule:
    return Rule(
        reason=f"ends with {text}",
        rule_type=RuleType.ENDS_WITH,
        predicate=lambda input: input.endswith(text),
    )


def longer_than(length: int) -> Rule:
    return Rule(
        reason=f"longer than {length}",
        rule_type=RuleType.LONGER_THAN,
        predicate=lambda input: _byte_length(input) > length,
    )


def longer_than_or_equal(length: int) -> Rule:
    return Rule(
        reason=f"longer than or equal to {length}",
        rule_type=RuleType.LONGER_THAN_OR_EQUAL,
        predicate=lambda input: _byte_length(input) >= length,
    )


def shorter_than(length: int) -> Rule:
    return Rule(
        reason=f"shorter than {length}",
        rule_type=RuleType.SHORTER_THAN,
        predicate=lambda input: _byte_length(input) < length,
    )


def shorter_than_or_equal(length: int) -> Rule:
    return Rule(
        reason=f"shorter than or equal to {length}",
        rule_type=RuleType.SHORTER_THAN_OR_EQUAL,
        predicate=lambda input: _byte_length(input) <= length,
    )


def contains(text: str) -> Rule:
    return Rule(
        reason=f"contains {text}",
        rule_type=RuleType.CONTAINS,
        predicate=lambda input: text in input,
    )


def _has_ascii_letter(input: str) -> bool:
    return any(("a" <= c <= "z") or ("A" <= c <= "Z") for c in input)


def _has_ascii_digit(input: str) -> bool:
    return any("0" <= c <= "9" for c in input)


def contains_a_character() -> Rule:
    return Rule(
        reason="contains a character",
        rule_type=RuleType.CONTAINS_A_CHARACTER,
        predicate=_has_ascii_letter,
    )


def contains_a_number() -> Rule:
    return Rule(
        reason="contains a number",
        rule_type=RuleType.CONTAINS_A_NUMBER,
        predicate=_has_ascii_digit,
    )


def ignore(text: str) -> Rule:
    return Rule(
        reason=f"ignore {text}",
        rule_type=RuleType.IGNORE,
        predicate=lambda input: input != text,
    )


def ignore_all(texts: Iterable[str]) -> List[Rule]:
    """One ignore rule per element, in iteration order."""
    return [ignore(text) for text in texts]


def regexp(pattern: str) -> Rule:
    """
    Rule matching ``pattern`` anywhere in the input.

    A pattern that fails to compile never raises here: it is logged and the
    resulting rule rejects every input.
    """
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        StructuredLogger(name="validator.catalog").warning({
            "action": "RULE_REGEXP_INVALID",
            "message": f"Invalid regular expression, rule will reject all input: {str(e)}",
            "data": {"pattern": pattern, "error": str(e)}
        })
        compiled = None

    def predicate(input: str) -> bool:
        if compiled is None:
            return False
        return compiled.search(input) is not None

    return Rule(
        reason=f"regexp {pattern}",
        rule_type=RuleType.REGEXP,
        predicate=predicate,
    )


def custom(reason: str, function: Callable[[str], bool]) -> Rule:
    return Rule(
        reason=reason,
        rule_type=RuleType.CUSTOM,
        predicate=function,
    )


RULE_FACTORIES: Dict[str, Callable[..., Any]] = {
    RuleType.STARTS_WITH.value: starts_with,
    RuleType.ENDS_WITH.value: ends_with,
    RuleType.LONGER_THAN.value: longer_than,
    RuleType.LONGER_THAN_OR_EQUAL.value: longer_than_or_equal,
    RuleType.SHORTER_THAN.value: shorter_than,
    RuleType.SHORTER_THAN_OR_EQUAL.value: shorter_than_or_equal,
    RuleType.CONTAINS.value: contains,
    RuleType.CONTAINS_A_CHARACTER.value: contains_a_character,
    RuleType.CONTAINS_A_NUMBER.value: contains_a_number,
    RuleType.IGNORE.value: ignore,
    "ignoreAll": ignore_all,
    RuleType.REGEXP.value: regexp,
    RuleType.CUSTOM.value: custom,
}

# Shape of the configured value each factory takes
_NO_VALUE = "none"
_STRING = "string"
_LENGTH = "length"
_STRINGS = "strings"
_CALLABLE = "callable"

_VALUE_SHAPES = {
    RuleType.STARTS_WITH.value: _STRING,
    RuleType.ENDS_WITH.value: _STRING,
    RuleType.LONGER_THAN.value: _LENGTH,
    RuleType.LONGER_THAN_OR_EQUAL.value: _LENGTH,
    RuleType.SHORTER_THAN.value: _LENGTH,
    RuleType.SHORTER_THAN_OR_EQUAL.value: _LENGTH,
    RuleType.CONTAINS.value: _STRING,
    RuleType.CONTAINS_A_CHARACTER.value: _NO_VALUE,
    RuleType.CONTAINS_A_NUMBER.value: _NO_VALUE,
    RuleType.IGNORE.value: _STRING,
    "ignoreAll": _STRINGS,
    RuleType.REGEXP.value: _STRING,
    RuleType.CUSTOM.value: _CALLABLE,
}


def build_rules(entry: Mapping[str, Any]) -> List[Rule]:
    """
    Build rules from one configuration entry.

    Args:
        entry: Mapping such as ``{"type": "longerThan", "value": 4}``

    Returns:
        List[Rule]: The rules in the order they must be appended

    Raises:
        ConfigurationError: If the tag is unknown, not configurable, or the
                           value has the wrong shape
    """
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Rule entry must be a mapping, got {type(entry).__name__}")

    rule_type = entry.get("type")
    value = entry.get("value")

    if not isinstance(rule_type, str) or rule_type not in RULE_FACTORIES:
        raise ConfigurationError(f"Unknown rule type: {rule_type!r}")

    factory = RULE_FACTORIES[rule_type]
    shape = _VALUE_SHAPES[rule_type]

    if shape == _NO_VALUE:
        return [factory()]

    if shape == _STRING:
        if not isinstance(value, str):
            raise ConfigurationError(f"Rule '{rule_type}' requires a string value, got {value!r}")
        return [factory(value)]

    if shape == _LENGTH:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"Rule '{rule_type}' requires an integer value, got {value!r}")
        return [factory(value)]

    if shape == _STRINGS:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(f"Rule '{rule_type}' requires a list of strings, got {value!r}")
        return factory(value)

    raise ConfigurationError(f"Rule '{rule_type}' needs a callable and cannot be built from configuration")
