#!/usr/bin/env python3
"""
Configuration access for the matching web application.

The models and YAML loading live in core.config_loader; this module only
caches the loaded AppConfig for the lifetime of the process.
"""

from functools import lru_cache

from core.config_loader import AppConfig, load_config


@lru_cache()
def get_config() -> AppConfig:
    """
    Get application configuration with caching.

    Loads from YAML (MATCHING_CONFIG or config.yaml) and applies environment
    variable overrides. Result is cached for performance.

    Returns:
        AppConfig: The application configuration.
    """
    return load_config()
