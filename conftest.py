"""
Top-level pytest configuration.

Its presence keeps the repository root on sys.path so the tests import the
local sieve package without installing it first.
"""
