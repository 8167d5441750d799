"""
Main configuration class for the Character Catalog.

Contains the Config class that orchestrates all configuration sections.
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml

from ..exceptions import ConfigurationError
from .base import DEFAULT_CONFIG_FILE, ENV_PREFIX, Environment
from .runtime import APIConfig, AssetStorageConfig, DatabaseConfig, MonitoringConfig
from .yaml_loader import YAMLConfigLoader

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Main configuration class for the Character Catalog."""

    # Environment
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    # Persistence
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    storage: AssetStorageConfig = field(default_factory=AssetStorageConfig)

    # API configuration
    api: APIConfig = field(default_factory=APIConfig)

    # Logging and metrics
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def __post_init__(self) -> None:
        """Apply environment-specific defaults."""
        if self.environment == Environment.PRODUCTION:
            self.debug = False
            self.monitoring.json_logs = True
        elif self.environment == Environment.TESTING:
            self.debug = True
            self.monitoring.metrics_enabled = False

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(config_path)
        try:
            data = YAMLConfigLoader.load_yaml(config_path)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Could not read configuration file {config_path}: {e}",
                component="Config",
            ) from e

        try:
            environment = Environment(data.get("environment", "development"))
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown environment in {config_path}: {data.get('environment')}",
                component="Config",
            ) from e

        database_data = dict(data.get("database", {}) or {})
        storage_data = dict(data.get("storage", {}) or {})
        api_data = data.get("api", {}) or {}
        monitoring_data = data.get("monitoring", {}) or {}

        if "path" in database_data:
            database_data["path"] = Path(database_data["path"])
        if "upload_dir" in storage_data:
            storage_data["upload_dir"] = Path(storage_data["upload_dir"])

        try:
            return cls(
                environment=environment,
                debug=data.get("debug", False),
                database=DatabaseConfig(**database_data),
                storage=AssetStorageConfig(**storage_data),
                api=APIConfig(**api_data),
                monitoring=MonitoringConfig(**monitoring_data),
            )
        except TypeError as e:
            raise ConfigurationError(
                f"Invalid configuration in {config_path}: {e}", component="Config"
            ) from e

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""

        def getenv_bool(name: str, default: bool) -> bool:
            v = os.getenv(ENV_PREFIX + name)
            return default if v is None else v.lower() in {"1", "true", "yes", "on"}

        def getenv_number(name: str, default: Any, parse: Callable[[str], Any]) -> Any:
            v = os.getenv(ENV_PREFIX + name)
            if v is None:
                return default
            try:
                return parse(v)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {ENV_PREFIX}{name}: {v!r}", component="Config"
                ) from e

        def getenv_int(name: str, default: int) -> int:
            return getenv_number(name, default, int)  # type: ignore[no-any-return]

        def getenv_float(name: str, default: float) -> float:
            return getenv_number(name, default, float)  # type: ignore[no-any-return]

        def getenv_str(name: str, default: str) -> str:
            return os.getenv(ENV_PREFIX + name, default)

        # CATALOG_* env overrides only
        try:
            env = Environment(getenv_str("ENV", "development"))
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown environment in {ENV_PREFIX}ENV: {getenv_str('ENV', '')}",
                component="Config",
            ) from e
        debug = getenv_bool("DEBUG", False)

        database = DatabaseConfig(
            path=Path(getenv_str("DATABASE__PATH", "data/characters.db")),
            max_connections=getenv_int("DATABASE__MAX_CONNECTIONS", 5),
            connection_timeout=getenv_float("DATABASE__CONNECTION_TIMEOUT", 30.0),
            enable_wal_mode=getenv_bool("DATABASE__ENABLE_WAL_MODE", True),
        )

        storage = AssetStorageConfig(
            upload_dir=Path(getenv_str("STORAGE__UPLOAD_DIR", "uploads")),
            url_prefix=getenv_str("STORAGE__URL_PREFIX", "/uploads/"),
            max_upload_bytes=getenv_int("STORAGE__MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        )

        api = APIConfig(
            host=getenv_str("API__HOST", "127.0.0.1"),
            port=getenv_int("API__PORT", 8080),
            default_page_size=getenv_int("API__DEFAULT_PAGE_SIZE", 10),
            search_page_size=getenv_int("API__SEARCH_PAGE_SIZE", 12),
            max_page_size=getenv_int("API__MAX_PAGE_SIZE", 100),
        )

        monitoring = MonitoringConfig(
            log_level=getenv_str("MONITORING__LOG_LEVEL", "INFO"),
            json_logs=getenv_bool("MONITORING__JSON_LOGS", True),
            metrics_enabled=getenv_bool("MONITORING__METRICS_ENABLED", True),
        )

        return cls(
            environment=env,
            debug=debug,
            database=database,
            storage=storage,
            api=api,
            monitoring=monitoring,
        )

    @classmethod
    def load(cls, config_path: Optional[Union[str, Path]] = None) -> "Config":
        """Load from an explicit file, the default file if present, or the environment."""
        if config_path is not None:
            return cls.from_file(config_path)

        default_path = Path(
            os.getenv(ENV_PREFIX + "CONFIG_FILE", DEFAULT_CONFIG_FILE)
        )
        if default_path.exists():
            logger.debug(f"Loading configuration from {default_path}")
            return cls.from_file(default_path)

        return cls.from_env()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a plain, YAML-serializable dictionary."""

        def _plain(value: Any) -> Any:
            if isinstance(value, Enum):
                return value.value
            if isinstance(value, Path):
                return str(value)
            if isinstance(value, dict):
                return {k: _plain(v) for k, v in value.items()}
            if isinstance(value, list):
                return [_plain(v) for v in value]
            return value

        return _plain(asdict(self))  # type: ignore[no-any-return]
