import os
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from .db.db import DEFAULT_DB_URL
from .errors import ConfigError

DEFAULT_PORT = 9000
DEFAULT_IDLE_TIMEOUT = 300.0  # seconds; 0 disables


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    db_url: str = DEFAULT_DB_URL
    idle_timeout: float = Field(default=DEFAULT_IDLE_TIMEOUT, ge=0)
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, **overrides) -> "ServerConfig":
        """Defaults < environment < explicit (non-None) overrides."""
        values = {
            "host": os.getenv("PRICER_HOST", "0.0.0.0"),
            "port": os.getenv("PRICER_PORT", str(DEFAULT_PORT)),
            "db_url": os.getenv("DB_URL", DEFAULT_DB_URL),
            "idle_timeout": os.getenv("PRICER_IDLE_TIMEOUT", str(DEFAULT_IDLE_TIMEOUT)),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "log_file": os.getenv("LOG_FILE") or None,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
