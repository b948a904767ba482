"""
Configuration utilities for sieve.

This module provides functions for loading and accessing configuration from YAML files.
"""

import os
import re
import yaml
from typing import Dict, Any, Optional

from sieve.core.exceptions import ConfigurationError

CONFIG_PATH_ENV = "SIEVE_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "config.yaml"


def _process_env_vars(value: Any) -> Any:
    """
    Process a configuration value to replace environment variable references.

    Replaces any string containing $ENV_VAR or ${ENV_VAR} with the corresponding
    environment variable value.

    Args:
        value: The configuration value to process

    Returns:
        The processed value with environment variables substituted
    """
    if isinstance(value, str):
        # Pattern to match ${VAR} and $VAR formats
        pattern = r"\${([a-zA-Z0-9_]+)}|\$([a-zA-Z0-9_]+)"

        def replace_env_var(match):
            env_var = match.group(1) or match.group(2)
            env_value = os.environ.get(env_var)
            if env_value is None:
                return match.group(0)  # Keep original if not found
            return env_value

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _process_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_process_env_vars(item) for item in value]
    else:
        return value


def resolve_config_path(config_path: Optional[str] = None) -> str:
    """Return the explicit path, else $SIEVE_CONFIG_PATH, else 'config.yaml'."""
    if config_path is not None:
        return config_path
    return os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the configuration file. If None, uses the environment
                    variable SIEVE_CONFIG_PATH or defaults to 'config.yaml'

    Returns:
        Dict[str, Any]: The loaded configuration with environment variables processed

    Raises:
        ConfigurationError: If the configuration file cannot be loaded
    """
    config_path = resolve_config_path(config_path)

    if not os.path.exists(config_path):
        raise ConfigurationError(f"Configuration file error: Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"YAML parsing error: {str(e)}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to load configuration: {str(e)}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Invalid configuration format: expected dictionary, got {type(config).__name__}"
        )

    return _process_env_vars(config)


def get_component_config(component_name: str, config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration for a specific component.

    Args:
        component_name: Dotted path of the component section (e.g., 'validator',
                        'loggers.structured_logger')
        config_path: Optional path to the configuration file

    Returns:
        Dict[str, Any]: The component's configuration section, empty if absent

    Raises:
        ConfigurationError: If the configuration cannot be loaded or the component
                           section is not a mapping
    """
    component_config: Any = load_config(config_path)

    for component in component_name.split("."):
        if not isinstance(component_config, dict):
            break
        component_config = component_config.get(component) or {}

    if not isinstance(component_config, dict):
        raise ConfigurationError(
            f"Invalid configuration for component '{component_name}': "
            f"expected dictionary, got {type(component_config).__name__}"
        )

    return component_config
