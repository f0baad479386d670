"""Configuration schema using Pydantic.

Why this exists:
- Type-safe configuration with validation
- Environment variable support
- Per-site/per-language backend connections in one place
- Clear documentation of all settings

How to extend:
1. Add new fields to existing config classes
2. Create new config classes for new components
3. Update smlt.example.toml with new settings
"""

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ResolverType(str, Enum):
    """Supported endpoint resolvers."""

    CONFIG = "config"


class LoggingConfig(BaseModel):
    """Logging output configuration."""

    level: LogLevel = LogLevel.INFO
    json_logs: bool = False
    log_dir: Optional[Path] = None
    enable_file: bool = False

    def model_post_init(self, __context: Any) -> None:
        """Expand ~ in paths."""
        if self.log_dir:
            self.log_dir = self.log_dir.expanduser()


class TransportConfig(BaseModel):
    """HTTP transport settings for talking to the search backend."""

    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")
    verify_tls: bool = True
    user_agent: str = "smlt-client"
    debug: bool = Field(default=False, description="Ask the backend for per-document score breakdowns")


class QueryDefaultsConfig(BaseModel):
    """Default tuning parameters used when a caller does not pass them."""

    count: int = Field(default=5, ge=0)
    mode: str = "hybrid"
    vector_weight: float = 0.7
    mlt_weight: float = 0.3


class ResolverConfig(BaseModel):
    """Endpoint resolver configuration."""

    resolver_type: ResolverType = ResolverType.CONFIG
    strict_resolution: bool = Field(
        default=False,
        description="Raise resolution errors instead of returning the empty result",
    )


class ConnectionConfig(BaseModel):
    """Read endpoint of one search core, bound to a site root and language.

    Either ``base_uri`` is given directly, or it is assembled from
    scheme/host/port/path/core. A connection without ``language_id`` serves
    every language of its site root.
    """

    site_root_id: int
    language_id: Optional[int] = None
    base_uri: Optional[str] = None
    scheme: str = "http"
    host: str = "localhost"
    port: int = Field(default=8983, gt=0)
    path: str = "/solr/"
    core: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode="after")
    def check_location(self) -> "ConnectionConfig":
        if not self.base_uri and not self.core:
            raise ValueError("Connection needs either base_uri or core")
        return self

    def core_base_uri(self) -> str:
        """Return the core URI without a trailing slash."""
        if self.base_uri:
            return self.base_uri.rstrip("/")
        path = "/" + self.path.strip("/") if self.path.strip("/") else ""
        return f"{self.scheme}://{self.host}:{self.port}{path}/{self.core}"


class AppConfig(BaseSettings):
    """Main application configuration.

    Loads from:
    1. Config file (TOML)
    2. Environment variables (prefixed with SMLT_)
    3. .env file
    """

    model_config = SettingsConfigDict(
        env_prefix="SMLT_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    app_name: str = "smlt"

    # Component configurations
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    defaults: QueryDefaultsConfig = Field(default_factory=QueryDefaultsConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    connections: list[ConnectionConfig] = Field(default_factory=list)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over values read from the TOML file
        return env_settings, init_settings, dotenv_settings, file_secret_settings
