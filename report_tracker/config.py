# config.py
from functools import lru_cache

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    APP_TITLE: str = "Daily Report Tracker API"
    DATABASE_URL: str = "sqlite+aiosqlite:///./reports.db"
    DATABASE_ECHO: bool = False

    SESSION_TTL_DAYS: int = 7
    SESSION_SWEEP_INTERVAL_SECONDS: float = 60 * 60

    SEED_DEFAULT_ADMIN: bool = True
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
