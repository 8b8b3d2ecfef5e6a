"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For in-memory store fakes, see tests/mocks/matching_mocks.py
"""

import pytest


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


def pytest_collection_modifyitems(config, items):
    """Mark every repository test as a db test."""
    for item in items:
        if "database" in item.path.parts:
            item.add_marker(pytest.mark.db)

