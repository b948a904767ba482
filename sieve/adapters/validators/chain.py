"""
Ordered rule chain.

Rules are evaluated in the order they were appended and evaluation stops at
the first rule the input does not satisfy.
"""

from typing import Iterator, List, Optional

from sieve.core.models import Rule, ValidationResult
from sieve.core.exceptions import ValidationError


class RuleChain:
    """Append-only sequence of rules."""

    def __init__(self):
        self._rules: List[Rule] = []

    def append(self, rule: Rule) -> None:
        if not isinstance(rule, Rule):
            raise TypeError(f"Expected Rule, got {type(rule).__name__}")
        self._rules.append(rule)

    def extend(self, rules: List[Rule]) -> None:
        for rule in rules:
            self.append(rule)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(tuple(self._rules))

    def evaluate(self, input: str) -> Optional[ValidationResult]:
        """
        Run every rule against the input.

        Returns:
            Optional[ValidationResult]: The denial for the first failing rule,
            or None when all rules pass

        Raises:
            ValidationError: If a rule predicate raises
        """
        for rule in tuple(self._rules):
            try:
                passed = rule.check(input)
            except Exception as e:
                raise ValidationError(
                    f"Rule '{rule.rule_type}' ({rule.reason}) raised {type(e).__name__}: {str(e)}"
                ) from e
            if not passed:
                return ValidationResult.denied_by(rule, input)
        return None
