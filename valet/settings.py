"""Application settings using pydantic-settings.

Loads configuration from CLI-supplied values, environment variables
(``VALET_`` prefix), a ``.env`` file and an optional YAML config file,
in that order of precedence.
"""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_FILE = ".valet.yaml"
DEFAULT_OUTPUT = "values.schema.json"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class RegistryType(StrEnum):
    """Supported chart registry types."""

    HTTP = "HTTP"
    HTTPS = "HTTPS"
    OCI = "OCI"


class HelmAuth(BaseModel):
    """Registry credentials."""

    username: str = ""
    password: SecretStr = SecretStr("")
    token: SecretStr = SecretStr("")


class HelmTLS(BaseModel):
    """Client TLS configuration for a registry."""

    insecure_skip_tls_verify: bool = False
    cert_file: str = ""
    key_file: str = ""
    ca_file: str = ""

    @model_validator(mode="after")
    def _check_cert_pair(self) -> "HelmTLS":
        if bool(self.cert_file) != bool(self.key_file):
            raise ValueError("cert_file and key_file must be provided together")
        return self


class HelmRegistry(BaseModel):
    """Chart registry location and access settings."""

    url: str = Field(..., min_length=1, description="Registry base URL")
    type: RegistryType = Field(
        default=RegistryType.HTTPS,
        description="Registry type (HTTP, HTTPS, OCI)",
    )
    insecure: bool = Field(default=False, description="Allow insecure connections")
    auth: HelmAuth = Field(default_factory=HelmAuth)
    tls: HelmTLS = Field(default_factory=HelmTLS)

    @model_validator(mode="before")
    @classmethod
    def _normalize_type(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("type"), str):
            data = {**data, "type": data["type"].upper()}
        return data


class HelmChart(BaseModel):
    """A remote chart reference."""

    name: str = Field(..., min_length=1, description="Chart name")
    version: str = Field(..., min_length=1, description="Chart version")
    registry: HelmRegistry

    @property
    def ref(self) -> str:
        """Human-readable chart reference (``name/version``)."""
        return f"{self.name}/{self.version}"


class HelmConfig(BaseModel):
    """Remote chart configuration."""

    chart: HelmChart | None = None


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="VALET_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        yaml_file=DEFAULT_CONFIG_FILE,
    )

    log_level: LogLevel = Field(default="INFO", description="Application log level")
    debug: bool = Field(default=False, description="Force DEBUG logging")

    context: str | None = Field(
        default=None,
        description="Context directory containing values.yaml",
    )
    overrides: str | None = Field(
        default=None,
        description="Overrides file, relative to the context directory",
    )
    output: str = Field(
        default=DEFAULT_OUTPUT,
        description="Output schema file name",
    )

    helm: HelmConfig | None = Field(default=None, description="Remote chart configuration")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

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
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def effective_log_level(self) -> LogLevel:
        """Log level after applying the ``debug`` switch."""
        return "DEBUG" if self.debug else self.log_level

    @property
    def remote_chart(self) -> HelmChart | None:
        """Configured remote chart, if any."""
        if self.helm is None:
            return None
        return self.helm.chart


def load_settings(config_file: str | Path | None = None, **overrides: Any) -> Settings:
    """Build settings reading an explicit YAML config file.

    A missing config file is ignored. Keyword overrides take precedence
    over every other source; ``None`` values are dropped so unset CLI
    flags fall through to the environment and the file.

    Args:
        config_file: YAML config path (defaults to ``.valet.yaml``).
        **overrides: Explicit field values, typically from CLI flags.

    Returns:
        A Settings instance.
    """
    path = Path(config_file) if config_file is not None else Path(DEFAULT_CONFIG_FILE)

    class _FileSettings(Settings):
        model_config = SettingsConfigDict(yaml_file=path)

    values = {key: value for key, value in overrides.items() if value is not None}
    return _FileSettings(**values)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are loaded once and reused.
    """
    return Settings()
