"""
Validator implementations.

This package provides the rule catalog, the rule chain, the duplicate
suppression cache and the RuleBasedValidator facade that composes them.
"""

from sieve.adapters.validators.rule_based import RuleBasedValidator
from sieve.adapters.validators.chain import RuleChain
from sieve.adapters.validators.recents import RecentsCache

__all__ = ["RuleBasedValidator", "RuleChain", "RecentsCache"]
