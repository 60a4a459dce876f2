"""Configuration management for sourced-core.

Loads environment variables using pydantic-settings for type-safe configuration.
The temporary directory root and the default database credentials are defined here.
"""

import os
from functools import lru_cache
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_LOADED = False
_ENV_LOCK = Lock()

DEFAULT_TEMP_DIR = "/tmp/sourced"


def _resolve_env_file() -> str | None:
    """Locate the .env file regardless of the current working directory.

    Preference order:
        1. SOURCED_ENV_FILE environment variable (explicit override)
        2. Current working directory
        3. Ancestors of this file
    """
    override = os.getenv("SOURCED_ENV_FILE")
    if override:
        override_path = Path(override).expanduser()
        if override_path.is_file():
            return str(override_path)

    cwd_candidate = Path.cwd() / ".env"
    if cwd_candidate.is_file():
        return str(cwd_candidate)

    for parent in Path(__file__).resolve().parents:
        candidate = parent / ".env"
        if candidate.is_file():
            return str(candidate)

    return None


_DEFAULT_ENV_FILE = _resolve_env_file()


def ensure_env_loaded() -> None:
    """Load environment variables from disk exactly once."""
    global _ENV_LOADED

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        env_path = _DEFAULT_ENV_FILE or _resolve_env_file()
        if env_path:
            load_dotenv(env_path, override=False)

        _ENV_LOADED = True


ensure_env_loaded()


class SourcedConfig(BaseSettings):
    """Process configuration for the dependency container.

    Every field can be overridden through the environment (case-insensitive)
    or by passing keyword arguments, which is how tests point the container
    at a scratch temp root.
    """

    model_config = SettingsConfigDict(
        env_file=_DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========== Temporary Filesystem ==========
    temp_dir: str = DEFAULT_TEMP_DIR
    remove_temp_dir_on_close: bool = False

    # ========== Default Database ==========
    postgres_user: str = "sourced"
    postgres_password: SecretStr = SecretStr("changeme")
    postgres_db: str = "sourced"
    postgres_host: str = "localhost"
    postgres_port: int = Field(default=5432, ge=1, le=65535)
    postgres_sslmode: str = "disable"
    postgres_connect_timeout: int = Field(default=30, ge=1, le=300)

    # ========== Observability ==========
    log_level: str = "INFO"

    @field_validator("temp_dir")
    @classmethod
    def _validate_temp_dir(cls, value: str) -> str:
        if not value:
            raise ValueError("temp_dir must not be empty")
        if not os.path.isabs(value):
            raise ValueError("temp_dir must be an absolute path")
        return value

    @property
    def postgres_connection_string(self) -> str:
        """Get PostgreSQL connection string."""
        pwd = self.postgres_password.get_secret_value()
        return (
            f"postgresql://{self.postgres_user}:{pwd}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}?sslmode={self.postgres_sslmode}"
        )


@lru_cache(maxsize=1)
def get_config() -> SourcedConfig:
    """Return cached settings instance (process-local).

    Returns:
        SourcedConfig: The configuration instance loaded from environment variables.
    """
    return SourcedConfig()


# Export convenience accessors
__all__ = ["DEFAULT_TEMP_DIR", "SourcedConfig", "ensure_env_loaded", "get_config"]
