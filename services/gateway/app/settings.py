"""Gateway service configuration.

All settings come from environment variables (or a local `.env` file) and are
validated once at startup. A missing `MONGO_URI` is fatal: `load_settings`
raises `ConfigError` and the entrypoint exits before opening a listener.

Variables:
- MONGO_URI (required)
- PORT / HOST: listener address, default `0.0.0.0:3333`
- MONGO_DATABASE: database holding the collections, default `app-db`
- CONNECT_TIMEOUT / PING_TIMEOUT: startup bounds in seconds (5 / 2)
- REQUEST_TIMEOUT: per-request deadline in seconds (10)
- LOG_LEVEL / LOG_JSON: logging setup
"""

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

DEFAULT_PORT = 3333
DEFAULT_DATABASE = "app-db"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongo_uri: str = ""
    mongo_database: str = DEFAULT_DATABASE
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    connect_timeout: float = 5.0
    ping_timeout: float = 2.0
    request_timeout: float = 10.0
    log_level: str = "INFO"
    log_json: bool = False


def load_settings(**overrides) -> Settings:
    """Read and validate settings from the environment.

    Args:
        **overrides: Field values that take precedence over the environment.

    Returns:
        Settings: The validated settings.

    Raises:
        ConfigError: If `MONGO_URI` is empty or a value fails validation.
    """
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc

    if not settings.mongo_uri.strip():
        raise ConfigError("please specify MONGO_URI")
    return settings
