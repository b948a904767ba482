"""
Adapters module for sieve.

This module contains concrete implementations of the interfaces defined in the core module.
"""

# Import logger implementations
from sieve.adapters.loggers import StructuredLogger

# Import validator implementations
from sieve.adapters.validators import RuleBasedValidator, RuleChain, RecentsCache

# Export all implementations
__all__ = [
    # Logger implementations
    "StructuredLogger",

    # Validator implementations
    "RuleBasedValidator",
    "RuleChain",
    "RecentsCache",
]
