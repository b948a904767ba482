"""
Utility modules for sieve.

This package contains utility modules that provide common functionality
across the library.
"""

from sieve.utils.config import get_component_config, load_config
from sieve.utils.rwlock import ReadWriteLock

__all__ = [
    "get_component_config",
    "load_config",
    "ReadWriteLock",
]
