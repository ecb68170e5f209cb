from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "MaxMetrics"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True
    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # ── PageSpeed Insights ──────────────────────
    GOOGLE_PAGESPEED_API_KEY: Optional[str] = None
    PAGESPEED_API_URL: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    PAGESPEED_SUMMARY_TIMEOUT: float = 60.0
    PAGESPEED_DETAILS_TIMEOUT: float = 90.0  # detailed runs are slower upstream
    PAGESPEED_RETRY_DELAY: float = 1.0

    # ── Cache ───────────────────────────────────
    CACHE_BACKEND: Literal["memory", "redis", "none"] = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    DETAILS_CACHE_TTL: int = 300  # 5 minutes

    # ── Database ────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./pagespeed.db"
    RECORD_SUBMISSIONS: bool = True

    # ── Lead capture ────────────────────────────
    LEAD_CAPTURE_THRESHOLD: int = 60

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
