"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic_settings import BaseSettings

# Resolve config: prefer system config (installed), fall back to repo .env (dev)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_SYSTEM_CONF = Path("/etc/wxdash/wxdash.conf")
_ENV_FILE = _SYSTEM_CONF if _SYSTEM_CONF.exists() else _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    # OpenWeather
    openweather_api_key: str = ""
    openweather_onecall_url: str = "https://api.openweathermap.org/data/3.0/onecall"
    request_timeout: float = 10.0

    # Activity recommendations
    recommendation_cache_ttl_sec: int = 600
    hourly_window: int = 8  # forecast hours scored for best-hour selection

    # Precipitation alerts
    precipitation_cache_ttl_sec: int = 300
    alert_cooldown_minutes: int = 30

    # Cache housekeeping
    cache_sweep_interval_sec: int = 60
    cache_max_entries: int = 1000

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:4200", "http://localhost:4201"]
    log_level: str = "INFO"

    model_config = {"env_prefix": "WXDASH_", "env_file": str(_ENV_FILE)}


settings = Settings()
