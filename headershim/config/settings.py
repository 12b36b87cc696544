import os
import tomllib
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, SettingsError

from headershim.config.discovery import find_toml_config_file
from headershim.core.logging import get_logger
from headershim.utils.headers import mask_header_values, normalize_headers


__all__ = [
    "ConfigurationError",
    "HTTPSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
]

ENV_PREFIX = "HEADERSHIM_"
CONFIG_FILE_ENV = f"{ENV_PREFIX}CONFIG_FILE"

# Nested sections that are merged key by key from the config file
_NESTED_SECTIONS = ("http", "logging")


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


class HTTPSettings(BaseModel):
    """Settings for the base transport built under the header transport."""

    model_config = ConfigDict(validate_assignment=True)

    insecure: bool = Field(
        default=False,
        description="Skip TLS certificate verification on the base transport",
    )

    ca_bundle: str | None = Field(
        default=None,
        description="Path to a CA bundle used to verify server certificates",
    )

    proxy_url: str | None = Field(
        default=None,
        description="HTTP proxy URL for outbound requests",
    )

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds for clients created from settings",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(validate_assignment=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )

    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON instead of console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class Settings(BaseSettings):
    """
    Configuration for header injection.

    Values come from keyword arguments, a TOML config file, HEADERSHIM_*
    environment variables and .env files. Config files are searched in order:
    1. .headershim.toml in current directory
    2. headershim.toml in git repository root
    3. config.toml in XDG_CONFIG_HOME/headershim/

    ``extra_headers`` may be given as a table, a JSON object string or a
    ``"Key: Value, Key2: Value2"`` string.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
        validate_assignment=True,
    )

    extra_headers: Annotated[dict[str, str], NoDecode] = Field(
        default_factory=dict,
        description="Extra HTTP headers added to every outbound request",
    )

    http: HTTPSettings = Field(
        default_factory=HTTPSettings,
        description="Base transport configuration",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @field_validator("extra_headers", mode="before")
    @classmethod
    def _parse_extra_headers(cls, value: Any) -> dict[str, str]:
        return normalize_headers(value)

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump settings with header values masked."""
        data = self.model_dump(mode="json")
        data["extra_headers"] = mask_header_values(self.extra_headers)
        return data

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def load_config_file(cls, config_path: Path) -> dict[str, Any]:
        """Load configuration from a file based on its extension."""
        suffix = config_path.suffix.lower()

        if suffix in [".toml"]:
            return cls.load_toml_config(config_path)
        else:
            raise ConfigurationError(
                f"Unsupported config file format: {suffix}. "
                "Only TOML (.toml) files are supported."
            )

    @classmethod
    def from_config(
        cls,
        config_path: Path | str | None = None,
        **kwargs: Any,
    ) -> "Settings":
        """Create Settings from the environment, a config file and overrides.

        Environment variables beat file values, except for a non-empty
        ``extra_headers`` in the file, which wins over HEADERSHIM_EXTRA_HEADERS.
        Keyword overrides beat both. An invalid HEADERSHIM_EXTRA_HEADERS only
        raises when no file or override headers shadow it.
        """
        if config_path is None:
            config_path_env = os.environ.get(CONFIG_FILE_ENV)
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            config_data = cls.load_config_file(config_path)
            logger.info(
                "config_file_loaded",
                path=str(config_path),
                category="config",
            )
        elif config_path:
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            # Headers from overrides or the file shadow HEADERSHIM_EXTRA_HEADERS,
            # which is then never parsed
            init_values: dict[str, Any] = {}
            file_headers = normalize_headers(config_data.get("extra_headers"))
            if "extra_headers" in kwargs:
                init_values["extra_headers"] = kwargs["extra_headers"]
            elif file_headers:
                init_values["extra_headers"] = file_headers

            settings = cls(**init_values)
            settings._apply_file_values(config_data)
            if kwargs:
                _apply_overrides(settings, kwargs)
        except (ValidationError, SettingsError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        return settings

    def _apply_file_values(self, config_data: dict[str, Any]) -> None:
        for key, value in config_data.items():
            if not hasattr(self, key):
                logger.debug("config_key_ignored", key=key, category="config")
                continue

            if key == "extra_headers":
                # Applied at construction
                continue

            if key in _NESTED_SECTIONS and isinstance(value, dict):
                nested_obj = getattr(self, key)
                for nested_key, nested_value in value.items():
                    env_key = f"{ENV_PREFIX}{key.upper()}__{nested_key.upper()}"
                    if os.getenv(env_key) is None:
                        setattr(nested_obj, nested_key, nested_value)
            else:
                if os.getenv(f"{ENV_PREFIX}{key.upper()}") is None:
                    setattr(self, key, value)


def _apply_overrides(target: Any, overrides: dict[str, Any]) -> None:
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(getattr(target, k, None), BaseModel):
            _apply_overrides(getattr(target, k), v)
        else:
            setattr(target, k, v)


logger = get_logger(__name__)


def get_settings() -> Settings:
    return Settings.from_config()
