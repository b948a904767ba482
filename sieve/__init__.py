"""
sieve

Composable string validation: an ordered chain of named rules (prefix,
suffix, length, substring, character class, regular expression, custom
predicates) followed by optional time-windowed duplicate suppression.
"""

__version__ = "0.1.0"

# Import core interfaces, value types and exceptions
from sieve.core import (
    # Interfaces
    Validator,
    Logger,
    # Value types
    RuleType,
    Rule,
    ValidationResult,
    # Exceptions
    SieveError,
    ValidationError,
    ConfigurationError,
    LoggerError,
)

# Import implementations
from sieve.adapters import (
    StructuredLogger,
    RuleBasedValidator,
    RuleChain,
    RecentsCache,
)

# Import utilities
from sieve.utils import (
    load_config,
    get_component_config,
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
    # Implementations
    "StructuredLogger",
    "RuleBasedValidator",
    "RuleChain",
    "RecentsCache",
    # Utilities
    "load_config",
    "get_component_config",
]
