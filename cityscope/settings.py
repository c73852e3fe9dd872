# cityscope/settings.py
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Pick up a local .env if present; real env vars win.
load_dotenv(PROJECT_ROOT / ".env")


@dataclass(frozen=True)
class Settings:
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'cityscope.sqlite3'}"
    app_api_key: str = ""                       # shared secret for POST /api/save-city-data
    identity_header: str = "X-Authenticated-User"

    openweather_url: str = "https://api.openweathermap.org/data/2.5/weather"
    openweather_api_key: str = ""
    air_quality_url: str = "https://air-quality-api.open-meteo.com/v1/air-quality"
    geodb_url: str = "https://wft-geo-db.p.rapidapi.com/v1/geo/cities"
    geodb_host: str = "wft-geo-db.p.rapidapi.com"
    geodb_api_key: str = ""
    upstream_timeout: float = 10.0              # seconds, per request

    population_locale: str = "en_US"
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("*",)


def load_settings() -> Settings:
    """Build Settings from the environment, falling back to the defaults above."""
    d = Settings()
    origins = os.getenv("CORS_ORIGINS")
    return Settings(
        database_url=os.getenv("DATABASE_URL", d.database_url),
        app_api_key=os.getenv("APP_API_KEY", d.app_api_key),
        identity_header=os.getenv("IDENTITY_HEADER", d.identity_header),
        openweather_url=os.getenv("OPENWEATHER_URL", d.openweather_url),
        openweather_api_key=os.getenv("OPENWEATHER_API_KEY", d.openweather_api_key),
        air_quality_url=os.getenv("AIR_QUALITY_URL", d.air_quality_url),
        geodb_url=os.getenv("GEODB_URL", d.geodb_url),
        geodb_host=os.getenv("GEODB_HOST", d.geodb_host),
        geodb_api_key=os.getenv("GEODB_API_KEY", d.geodb_api_key),
        upstream_timeout=float(os.getenv("UPSTREAM_TIMEOUT", d.upstream_timeout)),
        population_locale=os.getenv("POPULATION_LOCALE", d.population_locale),
        log_level=os.getenv("LOG_LEVEL", d.log_level),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) if origins else d.cors_origins,
    )


@lru_cache
def get_settings() -> Settings:
    # FastAPI dependency; tests swap it via app.dependency_overrides
    return load_settings()
