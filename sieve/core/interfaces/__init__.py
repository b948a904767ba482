from sieve.core.interfaces.validator import Validator
from sieve.core.interfaces.logger import Logger

__all__ = [
    "Validator",
    "Logger",
]
