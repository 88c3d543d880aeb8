"""
Application configuration using Pydantic settings.

Configuration is loaded from a TOML file, with environment variables able
to override scalar values. Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Example ``config.toml``::

    host = "127.0.0.1:8080"

    [[bucket]]
    bucket = "assets-primary"
    region = "eu-west-1"
    access-key = "AKIA..."
    secret-key = "..."

    [[bucket]]
    bucket = "assets-archive"
    region = "auto"
    endpoint = "https://minio.internal:9000"

Buckets are searched in the order they appear in the file.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

CONFIG_PATH_ENV = "BUCKETGATE_CONFIG"
DEFAULT_CONFIG_PATH = "config.toml"
DEFAULT_HOST = "127.0.0.1:8080"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""
    pass


def config_path() -> Path:
    """Location of the TOML config file, overridable via BUCKETGATE_CONFIG."""
    return Path(os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH))


class BucketConfig(BaseModel):
    """
    One configured backend bucket.

    Field names follow the config file, so ``access-key`` and
    ``secret-key`` are accepted as written there. The python names work
    too, which keeps test fixtures readable.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    bucket: str = Field(
        default="bucket",
        description="Bucket name"
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region name, or the signing region for a custom endpoint"
    )
    endpoint: Optional[str] = Field(
        default=None,
        description="Custom S3-compatible endpoint URL. When set, region is used verbatim."
    )
    access_key: str = Field(
        default="",
        alias="access-key",
        description="Access key ID. Leave empty with secret-key for anonymous access."
    )
    secret_key: str = Field(
        default="",
        alias="secret-key",
        description="Secret access key"
    )


class Settings(BaseSettings):
    """
    Application settings.

    Sources, highest priority first: constructor arguments, environment
    variables prefixed ``BUCKETGATE_``, then the TOML config file.
    """

    host: str = Field(
        default=DEFAULT_HOST,
        description="Bind address as host:port. IPv6 hosts go in brackets: [::1]:8080"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    bucket: list[BucketConfig] = Field(
        default_factory=list,
        description="Backends in search priority order"
    )

    model_config = SettingsConfigDict(
        env_prefix="BUCKETGATE_",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=config_path()),
        )

    @field_validator("host")
    @classmethod
    def _check_host(cls, value: str) -> str:
        _split_host(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def bind_host(self) -> str:
        return _split_host(self.host)[0]

    @property
    def bind_port(self) -> int:
        return _split_host(self.host)[1]


def _split_host(value: str) -> tuple[str, int]:
    host, sep, port = value.strip().rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"host must look like 'address:port', got {value!r}")
    port_number = int(port)
    if not 0 < port_number < 65536:
        raise ValueError(f"port out of range in {value!r}")
    return host.strip("[]"), port_number


def load_settings() -> Settings:
    """
    Load settings from the config file and environment.

    The config file must exist. A gateway with no file would silently
    start with zero buckets and answer 404 to everything.

    Raises:
        ConfigError: File is missing, is not valid TOML, or fails validation
    """
    path = config_path()
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
    except ValueError as e:
        # tomllib.TOMLDecodeError is a ValueError
        raise ConfigError(f"Could not parse {path}: {e}") from e


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, call get_settings.cache_clear() to reset.
    """
    return load_settings()
