"""Runtime settings read from the environment."""
import os
from functools import lru_cache

from pydantic import BaseModel, Field

DEFAULT_API_URL = "https://api.coingecko.com/api/v3"
DEFAULT_RELAY_URL = "https://api.allorigins.win/raw"


class Settings(BaseModel):
    api_url: str = DEFAULT_API_URL
    relay_url: str = DEFAULT_RELAY_URL
    poll_interval: float = Field(default=60.0, gt=0)
    tick_interval: float = Field(default=1.5, gt=0)
    request_timeout: float = Field(default=10.0, gt=0)
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(default=8001, ge=1, le=65535)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from GOLD_MONITOR_* variables; unset ones keep defaults."""
        env = {
            "api_url": os.getenv("GOLD_MONITOR_API_URL"),
            "relay_url": os.getenv("GOLD_MONITOR_RELAY_URL"),
            "poll_interval": os.getenv("GOLD_MONITOR_POLL_INTERVAL"),
            "tick_interval": os.getenv("GOLD_MONITOR_TICK_INTERVAL"),
            "request_timeout": os.getenv("GOLD_MONITOR_TIMEOUT"),
            "log_level": os.getenv("GOLD_MONITOR_LOG_LEVEL"),
            "host": os.getenv("GOLD_MONITOR_HOST"),
            "port": os.getenv("GOLD_MONITOR_PORT"),
        }
        return cls.model_validate({k: v for k, v in env.items() if v})


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
