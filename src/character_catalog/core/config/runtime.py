"""
Runtime configuration sections for the Character Catalog.

Contains the database, asset storage, API and monitoring configuration classes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class DatabaseConfig:
    """SQLite character store configuration."""

    path: Path = field(default_factory=lambda: Path("data/characters.db"))
    max_connections: int = 5
    connection_timeout: float = 30.0
    enable_wal_mode: bool = True


@dataclass
class AssetStorageConfig:
    """Sprite/asset storage configuration."""

    upload_dir: Path = field(default_factory=lambda: Path("uploads"))
    url_prefix: str = "/uploads/"
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080
    default_page_size: int = 10
    search_page_size: int = 12
    max_page_size: int = 100
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class MonitoringConfig:
    """Logging and metrics configuration."""

    log_level: str = "INFO"
    json_logs: bool = True
    metrics_enabled: bool = True
