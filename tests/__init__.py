#!/usr/bin/env python3
"""
Test suite for the matching engine.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Skip tests that touch a database (SQLite in-memory included)
    python -m pytest tests/ -v -m "not db"

    # Using unittest
    python -m unittest discover tests -v

Engine, scorer and API tests use the in-memory stores from
tests/mocks/matching_mocks.py; repository tests create a throwaway
SQLite database per test.
"""
