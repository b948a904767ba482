#!/usr/bin/env python3
"""
Example script demonstrating RuleBasedValidator.

This script shows how to:
1. Build a rule chain with fluent calls
2. Enable and disable duplicate suppression
3. Build the same validator from a configuration file
"""

import json
import os
import sys
import tempfile
import time

# Add the parent directory to the path to allow importing the sieve package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sieve import RuleBasedValidator, ConfigurationError


def show(validator, input):
    result = validator.validate(input)
    print(f"{input!r:12} -> {json.dumps(result.to_dict())}")


def fluent_example():
    print("\nFluent configuration")
    print("====================")
    with (
        RuleBasedValidator(logger_name="example.validator")
        .contains_a_character()
        .contains_a_number()
        .longer_than_or_equal(5)
        .ignore_all(["ABC002", "ABC003"])
        .ignore_duplicates_for(0.2)
    ) as validator:
        for input in ["ABC002", "ABC003", "ABC", "ABC001", "ABC001"]:
            show(validator, input)

        time.sleep(0.5)
        print("after the window:")
        show(validator, "ABC001")

        validator.stop_ignoring_duplicates()
        print("suppression disabled:")
        show(validator, "ABC001")
        show(validator, "ABC001")

        print(json.dumps(validator.healthcheck(), indent=2))


def config_example():
    print("\nConfiguration file")
    print("==================")
    with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False) as f:
        f.write(
            "validator:\n"
            "  rules:\n"
            "    - type: regexp\n"
            "      value: '^[A-Z]{3}[0-9]{3}$'\n"
            "  ignore_duplicates_for: 1\n"
        )
        config_path = f.name

    try:
        with RuleBasedValidator(logger_name="example.validator", config_path=config_path) as validator:
            validator.initialize()
            for input in ["ABC001", "abc001", "ABC001"]:
                show(validator, input)
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
    finally:
        os.unlink(config_path)


if __name__ == "__main__":
    fluent_example()
    config_example()
