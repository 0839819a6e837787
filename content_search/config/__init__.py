"""
Configuration Package for Content Search

This package loads and validates the settings of a search service from YAML/JSON files,
a ``.env`` file and environment variables.

Sources (later sources win):
1. ``config.yaml`` (or ``config.json``) in the configuration directory
2. ``config.<environment>.yaml``
3. Environment variables, optionally loaded from ``.env``

Environment Variables:
    ENVIRONMENT: Environment name (development/staging/production)
    SERVICE_NAME: Service name used in logs
    REFRESH_INTERVAL: Minutes between refreshes
    ENABLE_CACHE_TRIGGER: Allow manual refreshes (true/false)
    INSTANCE_DELAY: Seconds to wait before the first refresh
    RANDOMIZE_INSTANCE_DELAY: Pick a random first-refresh delay (true/false)
    FETCH_TIMEOUT: Seconds before a mirror request times out
    SYNONYMS_PATH: Synonym dictionary file
    LOG_LEVEL: Logging level
    METRICS_PORT: Port of the Prometheus metrics server

Example Usage:
    from content_search.config import get_config

    config = get_config(config_dir="deploy")
    print(config.service_name, config.refresh_interval)
"""

from .base import (
    Config,
    ConfigurationError,
    Environment,
    FetchConfig,
    InvalidConfigurationError,
    MonitoringConfig,
    RankedFieldConfig,
    RefreshConfig,
    ServiceConfig,
    SourceConfig,
    SynonymConfig,
)
from .loader import ConfigLoader, get_config

__all__ = [
    "Config",
    "ConfigLoader",
    "ConfigurationError",
    "Environment",
    "FetchConfig",
    "InvalidConfigurationError",
    "MonitoringConfig",
    "RankedFieldConfig",
    "RefreshConfig",
    "ServiceConfig",
    "SourceConfig",
    "SynonymConfig",
    "get_config",
]
