"""
Exception hierarchy for the sieve library.

This module defines the base exception types for all components, providing
a structured hierarchy for error handling and recovery.
"""


class SieveError(Exception):
    """Base exception for all sieve-related errors."""

    pass


class ValidationError(SieveError):
    """Raised when the validation process itself fails."""

    pass


class ConfigurationError(SieveError):
    """Raised when configuration is invalid."""

    pass


class LoggerError(SieveError):
    """Raised when a logger cannot be set up."""

    pass
