"""Application configuration helpers."""

from __future__ import annotations

from .chambermaster import (
    DEFAULT_CHAMBERMASTER_BASE_URL,
    ChamberMasterConfig,
    get_chambermaster_config,
)
from .env import env_flag
from .errors import ConfigurationError
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)
from .sync import SyncConfig, get_sync_config

__all__ = [
    "DEFAULT_CHAMBERMASTER_BASE_URL",
    "NO_RETRY",
    "ChamberMasterConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "env_flag",
    "get_chambermaster_config",
    "get_database_config",
    "get_database_uri",
    "get_storage_config",
    "get_sync_config",
]
