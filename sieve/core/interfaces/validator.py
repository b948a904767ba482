from abc import ABC, abstractmethod
from typing import Dict, Any

from sieve.core.models import ValidationResult


class Validator(ABC):
    """
    Interface for components that accept or reject input strings.

    A Validator holds an ordered set of rules and reports, for each input,
    whether it is approved and which rule denied it otherwise.
    """

    @abstractmethod
    def initialize(self) -> None:
        """
        Initialize the validator with configuration parameters.

        Configuration should be loaded from a central configuration source
        (e.g., config.yaml). Validators built programmatically do not need
        to call this method.

        Returns:
            None

        Raises:
            ConfigurationError: If the configuration cannot be loaded or applied.
        """
        pass

    @abstractmethod
    def validate(self, input: str) -> ValidationResult:
        """
        Validates the input against the configured rules.

        Rule outcomes are never raised: a denied input is reported through
        the returned result.

        Args:
            input: The string to validate

        Returns:
            ValidationResult: approval flag, failing rule type and reason

        Raises:
            ValidationError: If the validation process itself fails
        """
        pass

    @abstractmethod
    def healthcheck(self) -> Dict[str, Any]:
        """
        Checks if the validator is properly configured and functioning.

        Returns:
            Dict[str, Any]: A dictionary containing health status information:
                {
                    'healthy': bool,  # Whether the validator is functioning properly
                    'message': str,   # Optional message providing more details
                    'details': dict   # Optional additional details about the health check
                }
        """
        pass
