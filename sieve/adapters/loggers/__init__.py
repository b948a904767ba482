"""
Logger implementations for sieve.

This module provides the StructuredLogger implementation of the Logger interface.
"""

from sieve.adapters.loggers.structured_logger import StructuredLogger

__all__ = ["StructuredLogger"]
