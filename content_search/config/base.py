"""Base configuration classes and utilities."""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Environment(str, Enum):
    """Environment enumeration."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class ConfigurationError(Exception):
    """Base configuration error."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Invalid configuration error."""
    pass


class ServiceConfig(BaseModel):
    """Service configuration."""
    name: str = "content-search"
    environment: Environment = Environment.DEVELOPMENT


class RefreshConfig(BaseModel):
    """Cache refresh configuration."""
    interval_minutes: float = 15.0
    enable_manual_trigger: bool = False
    startup_delay: Optional[float] = None
    randomize_startup_delay: bool = False
    max_startup_delay: float = 300.0


class FetchConfig(BaseModel):
    """Remote fetch configuration."""
    timeout: float = 10.0
    max_depth: int = 64


class SynonymConfig(BaseModel):
    """Synonym dictionary configuration."""
    path: Optional[Path] = None


class MonitoringConfig(BaseModel):
    """Monitoring configuration."""
    log_level: str = "INFO"
    enable_metrics: bool = True
    metrics_port: Optional[int] = None


class RankedFieldConfig(BaseModel):
    """Ranked field of the bundled JCR provider."""
    field: str
    weight: int
    synonym_weight: Optional[int] = None
    full_match: bool = False


class SourceConfig(BaseModel):
    """Content source of the bundled JCR provider."""
    urls: List[str] = Field(default_factory=list)
    partial_urls: List[str] = Field(default_factory=list)
    headers: Dict[str, str] = Field(default_factory=dict)
    content_attr: str = "_jcrContent"
    content_keys: List[str] = Field(default_factory=list)
    ranked_fields: List[RankedFieldConfig] = Field(default_factory=list)
    key_field: Optional[str] = None
    type: str = "cq:Page"


class Config(BaseModel):
    """Complete configuration."""
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    refresh: RefreshConfig = Field(default_factory=RefreshConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    synonyms: SynonymConfig = Field(default_factory=SynonymConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    source: Optional[SourceConfig] = None

    @property
    def service_name(self) -> str:
        """Get service name."""
        return self.service.name

    @property
    def refresh_interval(self) -> float:
        """Get refresh interval in seconds."""
        return self.refresh.interval_minutes * 60

    @property
    def log_level(self) -> str:
        """Get log level."""
        return self.monitoring.log_level

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        if self.refresh.interval_minutes <= 0:
            raise InvalidConfigurationError("Refresh interval must be positive")
        if self.refresh.startup_delay is not None and self.refresh.startup_delay < 0:
            raise InvalidConfigurationError("Startup delay must not be negative")
        if self.refresh.max_startup_delay < 0:
            raise InvalidConfigurationError("Maximum startup delay must not be negative")
        if self.fetch.timeout <= 0:
            raise InvalidConfigurationError("Fetch timeout must be positive")
        if self.fetch.max_depth < 1:
            raise InvalidConfigurationError("Maximum tree depth must be at least 1")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary.

        Returns:
            Configuration instance.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        try:
            config = cls(**data)
        except Exception as e:
            raise ConfigurationError(f"Failed to create configuration: {e}")
        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration dictionary.
        """
        return self.model_dump(mode="json")
