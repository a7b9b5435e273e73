"""Configuration management for countdown-binge."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment or config file."""

    # Database; empty means the SQLite file under data/
    database_url: str = ""

    # TMDB API
    tmdb_api_key: str = ""
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_image_base_url: str = "https://image.tmdb.org/t/p"

    # Server
    host: str = "0.0.0.0"
    port: int = 8096
    debug: bool = False

    # Cache refresh policy
    refresh_stale_hours: int = 24
    background_refresh_enabled: bool = True
    background_refresh_interval_minutes: int = 60

    # Shows premiering within this many days are "premiering soon"
    premiering_soon_days: int = 30

    model_config = SettingsConfigDict(env_prefix="COUNTDOWN_BINGE_", env_file=".env")


# Global settings instance
settings = Settings()


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def get_data_dir() -> Path:
    """Get the data directory path, creating it on first use."""
    data_dir = get_project_root() / "data"
    data_dir.mkdir(exist_ok=True)
    return data_dir


def get_database_url() -> str:
    """SQLAlchemy URL of the cache-of-record database."""
    if settings.database_url:
        return settings.database_url
    return f"sqlite:///{get_data_dir() / 'countdown-binge.db'}"
