"""
Value types shared by validators.

Rules and results are immutable: a rule is created once by the catalog and
owned by the chain that holds it, and a result is produced per validation call.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict


class RuleType(str, Enum):
    """Tag identifying which kind of rule denied an input."""
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    LONGER_THAN = "longerThan"
    LONGER_THAN_OR_EQUAL = "longerThanOrEqual"
    SHORTER_THAN = "shorterThan"
    SHORTER_THAN_OR_EQUAL = "shorterThanOrEqual"
    CONTAINS = "contains"
    CONTAINS_A_CHARACTER = "containsACharacter"
    CONTAINS_A_NUMBER = "containsANumber"
    IGNORE = "ignore"
    IGNORE_DUPLICATES = "ignoreDuplicates"
    REGEXP = "regexp"
    CUSTOM = "custom"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Rule:
    """
    A single named predicate.

    Attributes:
        reason: Human-readable description of the constraint
        rule_type: Tag reported when the predicate fails
        predicate: Pure function returning True when the input satisfies the rule
    """
    reason: str
    rule_type: RuleType
    predicate: Callable[[str], bool]

    def check(self, input: str) -> bool:
        return bool(self.predicate(input))


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a single input.

    ``rule_type`` and ``reason`` are empty strings on approval.
    """
    approval: bool
    rule_type: str = ""
    reason: str = ""

    @classmethod
    def approved(cls) -> "ValidationResult":
        return cls(approval=True)

    @classmethod
    def denied_by(cls, rule: Rule, input: str) -> "ValidationResult":
        return cls(
            approval=False,
            rule_type=rule.rule_type,
            reason=f'"{rule.reason}" is not met by "{input}"',
        )

    @classmethod
    def duplicate(cls) -> "ValidationResult":
        return cls(
            approval=False,
            rule_type=RuleType.IGNORE_DUPLICATES,
            reason="ignore duplication",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "approval": self.approval,
            "rule_type": str(self.rule_type),
            "reason": self.reason,
        }
