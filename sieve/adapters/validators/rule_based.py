"""
RuleBasedValidator implementation for the Validator interface.

This module provides the validator facade: an ordered rule chain built with
fluent calls (or from config.yaml), followed by optional duplicate suppression.
"""

from typing import Any, Callable, Dict, Iterable, Optional

from sieve.core.interfaces.validator import Validator
from sieve.core.models import Rule, ValidationResult
from sieve.core.exceptions import ConfigurationError, ValidationError
from sieve.utils.config import get_component_config, resolve_config_path
from sieve.adapters.loggers.structured_logger import StructuredLogger
from sieve.adapters.validators import catalog
from sieve.adapters.validators.chain import RuleChain
from sieve.adapters.validators.recents import Duration, RecentsCache


class RuleBasedValidator(Validator):
    """
    Validator implementation using an ordered chain of rules.

    Every fluent method appends to the chain (or toggles duplicate
    suppression) and returns the validator itself:

        validator = (
            RuleBasedValidator()
            .contains_a_character()
            .longer_than_or_equal(5)
            .ignore_duplicates_for(0.5)
        )
        validator.validate("ABC001")

    One instance may be validated from many threads at once. Rules are
    expected to be appended before validation starts.
    """

    def __init__(self, logger_name: str = "validator", config_path: Optional[str] = None):
        """
        Initialize the RuleBasedValidator.

        Args:
            logger_name: Name to use for the logger
            config_path: YAML file read by initialize(); defaults to
                         $SIEVE_CONFIG_PATH or config.yaml
        """
        self.logger = StructuredLogger(name=logger_name)
        self._config_path = resolve_config_path(config_path)
        self._chain = RuleChain()
        self._recents = RecentsCache(logger=self.logger)

    def initialize(self) -> None:
        """
        Apply the configuration sections owned by this validator.

        The 'validator' section supplies the rules and the suppression window;
        'loggers.structured_logger.level', when set, changes the log level.

        Raises:
            ConfigurationError: If the configuration cannot be loaded or applied
        """
        try:
            self.logger.info({
                "action": "VALIDATOR_INIT_START",
                "message": "Initializing RuleBasedValidator",
                "data": {"config_path": self._config_path}
            })

            logger_config = get_component_config("loggers.structured_logger", self._config_path)
            if logger_config.get("level") is not None:
                self.logger.set_level(logger_config["level"])

            validator_config = get_component_config("validator", self._config_path)

            rules = validator_config.get("rules") or []
            if not isinstance(rules, list):
                raise ConfigurationError("'validator.rules' must be a list")
            for entry in rules:
                self._chain.extend(catalog.build_rules(entry))

            window = validator_config.get("ignore_duplicates_for")
            if window is not None:
                self._recents.configure(window)

            self.logger.info({
                "action": "VALIDATOR_INIT_SUCCESS",
                "message": "RuleBasedValidator initialized successfully",
                "data": {
                    "rules": len(self._chain),
                    "ignore_duplicates_for": self._recents.window
                }
            })

        except Exception as e:
            self.logger.error({
                "action": "VALIDATOR_INIT_ERROR",
                "message": f"Failed to initialize validator: {str(e)}",
                "data": {"error": str(e), "error_type": type(e).__name__}
            })
            if isinstance(e, ConfigurationError):
                raise
            raise ConfigurationError(f"Validator initialization failed: {str(e)}") from e

    def validate(self, input: str) -> ValidationResult:
        """
        Validates the input against the rule chain, then duplicate suppression.

        Args:
            input: The string to validate

        Returns:
            ValidationResult: Approval, or the first failing rule and its reason

        Raises:
            ValidationError: If a custom rule predicate raises
        """
        try:
            denial = self._chain.evaluate(input)
        except ValidationError as e:
            self.logger.error({
                "action": "VALIDATOR_ERROR",
                "message": str(e),
                "data": {"error": str(e), "error_type": type(e.__cause__).__name__}
            })
            raise

        if denial is None and not self._recents.check_and_record(input):
            denial = ValidationResult.duplicate()

        if denial is not None:
            self.logger.debug({
                "action": "VALIDATOR_DENIED",
                "message": denial.reason,
                "data": denial.to_dict()
            })
            return denial

        self.logger.debug({
            "action": "VALIDATOR_SUCCESS",
            "message": "Input validation successful",
            "data": {"input": input}
        })
        return ValidationResult.approved()

    def healthcheck(self) -> Dict[str, Any]:
        """
        Check if the validator is properly configured and functioning.

        Returns:
            Dict[str, Any]: Health status information
        """
        health_result = {
            "healthy": False,
            "message": "Validator health check failed",
            "details": {
                "rules": len(self._chain),
                "ignoring_duplicates": self._recents.enabled,
                "ignore_duplicates_for": self._recents.window,
            }
        }

        try:
            reaper_alive = self._recents.reaper_alive
            health_result["details"].update({
                "recents": len(self._recents),
                "reaper_alive": reaper_alive,
            })

            health_result["healthy"] = reaper_alive or not self._recents.enabled
            health_result["message"] = (
                "Validator is healthy" if health_result["healthy"]
                else "Duplicate suppression reaper is not running"
            )
            return health_result

        except Exception as e:
            health_result["message"] = f"Validator health check failed: {str(e)}"
            health_result["details"]["error"] = str(e)
            health_result["details"]["error_type"] = type(e).__name__

            self.logger.error({
                "action": "VALIDATOR_HEALTHCHECK_ERROR",
                "message": f"Health check failed: {str(e)}",
                "data": {"error": str(e), "error_type": type(e).__name__}
            })

            return health_result

    @property
    def rules(self):
        """Snapshot of the rule chain in evaluation order."""
        return tuple(self._chain)

    @property
    def recents(self) -> RecentsCache:
        return self._recents

    def add_rule(self, rule: Rule) -> "RuleBasedValidator":
        self._chain.append(rule)
        return self

    def custom(self, deny_reason: str, function: Callable[[str], bool]) -> "RuleBasedValidator":
        return self.add_rule(catalog.custom(deny_reason, function))

    def starts_with(self, text: str) -> "RuleBasedValidator":
        return self.add_rule(catalog.starts_with(text))

    def ends_with(self, text: str) -> "RuleBasedValidator":
        return self.add_rule(catalog.ends_with(text))

    def longer_than(self, length: int) -> "RuleBasedValidator":
        return self.add_rule(catalog.longer_than(length))

    def longer_than_or_equal(self, length: int) -> "RuleBasedValidator":
        return self.add_rule(catalog.longer_than_or_equal(length))

    def shorter_than(self, length: int) -> "RuleBasedValidator":
        return self.add_rule(catalog.shorter_than(length))

    def shorter_than_or_equal(self, length: int) -> "RuleBasedValidator":
        return self.add_rule(catalog.shorter_than_or_equal(length))

    def contains(self, text: str) -> "RuleBasedValidator":
        return self.add_rule(catalog.contains(text))

    def contains_a_character(self) -> "RuleBasedValidator":
        return self.add_rule(catalog.contains_a_character())

    def contains_a_number(self) -> "RuleBasedValidator":
        return self.add_rule(catalog.contains_a_number())

    def ignore(self, text: str) -> "RuleBasedValidator":
        return self.add_rule(catalog.ignore(text))

    def ignore_all(self, texts: Iterable[str]) -> "RuleBasedValidator":
        self._chain.extend(catalog.ignore_all(texts))
        return self

    def regexp(self, pattern: str) -> "RuleBasedValidator":
        return self.add_rule(catalog.regexp(pattern))

    def ignore_duplicates_for(self, duration: Duration) -> "RuleBasedValidator":
        self._recents.configure(duration)
        return self

    def stop_ignoring_duplicates(self) -> "RuleBasedValidator":
        self._recents.disable()
        return self

    def close(self) -> None:
        self._recents.disable()

    def __enter__(self) -> "RuleBasedValidator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
