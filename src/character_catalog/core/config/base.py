"""
Base configuration infrastructure for the Character Catalog.

Contains shared constants and the Environment enum.
"""

from enum import Enum

# Prefix for every environment variable override, e.g. CATALOG_DATABASE__PATH
ENV_PREFIX = "CATALOG_"

DEFAULT_CONFIG_FILE = "configs/catalog.yaml"


class Environment(Enum):
    """Environment types for configuration."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"
