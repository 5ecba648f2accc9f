"""Configuration management for the Lettermint client."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.lettermint.co/v1"
DEFAULT_TIMEOUT = 30000

QueryParams = Union[Mapping[str, str], Sequence[Tuple[str, str]]]


class ClientConfig(BaseSettings):
    """Connection settings captured once per client.

    Values can be passed directly or picked up from ``LETTERMINT_*``
    environment variables. Instances are frozen.
    """

    api_token: str = Field(..., min_length=1, description="API token used to authenticate")
    base_url: str = Field(DEFAULT_BASE_URL, description="Root URL of the API")
    timeout: int = Field(DEFAULT_TIMEOUT, gt=0, description="Request timeout in milliseconds")

    model_config = SettingsConfigDict(
        env_prefix="LETTERMINT_",
        case_sensitive=False,
        frozen=True,
    )

    @field_validator("base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {value!r}")
        return value.rstrip("/") + "/"


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Logging level")
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    file_path: Optional[str] = Field(None, description="Path to log file")
    max_file_size: int = Field(10 * 1024 * 1024, description="Maximum log file size in bytes")
    backup_count: int = Field(5, description="Number of backup log files to keep")
    console_output: bool = Field(True, description="Enable console logging")

    model_config = SettingsConfigDict(env_prefix="LETTERMINT_LOG_", case_sensitive=False)


@dataclass
class RequestConfig:
    """Per-call overrides for a single request."""

    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[int] = None
    params: Optional[QueryParams] = None

    def __post_init__(self):
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(
                f"Request timeout must be a positive number of milliseconds, got {self.timeout}"
            )


def build_config(**values) -> ClientConfig:
    """Create a ClientConfig, turning validation failures into ConfigurationError.

    Args:
        **values: Field values (``api_token``, ``base_url``, ``timeout``);
            ``None`` values fall back to environment or defaults

    Returns:
        Validated client configuration
    """
    values = {key: value for key, value in values.items() if value is not None}
    try:
        return ClientConfig(**values)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid client configuration: {e}") from e


def load_config(env_file: Optional[str] = None, **overrides) -> ClientConfig:
    """
    Load client configuration from the environment.

    Sources are applied in order of precedence (later sources override earlier):
    1. Default values
    2. Environment file (.env)
    3. Environment variables already set in the process
    4. Explicit keyword overrides

    Args:
        env_file: Path to environment file (default: .env in the current directory)
        **overrides: Explicit field values

    Returns:
        Loaded configuration
    """
    env_path = Path(env_file) if env_file else Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return build_config(**overrides)
