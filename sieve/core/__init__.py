"""
Core module for sieve.

This module contains the core interfaces, value types and exceptions that
define the contract all validator implementations follow.
"""

# Import all interfaces
from sieve.core.interfaces import (
    Validator,
    Logger,
)

# Import value types
from sieve.core.models import (
    RuleType,
    Rule,
    ValidationResult,
)

# Import all exceptions
from sieve.core.exceptions import (
    SieveError,
    ValidationError,
    ConfigurationError,
    LoggerError,
)

__all__ = [
    # Interfaces
    "Validator",
    "Logger",
    # Value types
    "RuleType",
    "Rule",
    "ValidationResult",
    # Exceptions
    "SieveError",
    "ValidationError",
    "ConfigurationError",
    "LoggerError",
]
