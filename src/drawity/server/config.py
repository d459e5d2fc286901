from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from drawity.protocol.constants import DEFAULT_POLL_INTERVAL_MS


class Settings(BaseSettings):
    """
    Runtime config.

    - Loaded from environment variables (`DRAWITY_*`)
    - Also reads `.env` if present (via pydantic-settings + python-dotenv)
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DRAWITY_", extra="ignore")

    # Storage
    database_url: str = "sqlite:///./drawity.db"
    database_echo: bool = False

    # Client polling / HTTP
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    request_timeout_s: float = 10.0

    # Default drawing surface for new snapshots (px)
    canvas_width: int = 800
    canvas_height: int = 600

    # Off by default: any holder of a valid player link may move.
    enforce_turn_order: bool = False

    # Serving
    host: str = "127.0.0.1"
    port: int = 8000

    # Debugging
    log_level: str = "INFO"
    debug_log_msgs: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
