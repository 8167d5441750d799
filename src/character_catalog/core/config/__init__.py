"""
Configuration management for the Character Catalog.

Provides a clean public API for all configuration components.
"""

# Base infrastructure
from .base import DEFAULT_CONFIG_FILE, ENV_PREFIX, Environment

# Main configuration class
from .main import Config

# Runtime configuration
from .runtime import APIConfig, AssetStorageConfig, DatabaseConfig, MonitoringConfig
from .yaml_loader import YAMLConfigLoader

# Public API
__all__ = [
    # Main class
    "Config",
    # Base
    "Environment",
    "ENV_PREFIX",
    "DEFAULT_CONFIG_FILE",
    # Sections
    "APIConfig",
    "AssetStorageConfig",
    "DatabaseConfig",
    "MonitoringConfig",
    # Loading
    "YAMLConfigLoader",
]
