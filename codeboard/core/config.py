from functools import lru_cache
from typing import Any

from pydantic import PostgresDsn, RedisDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Codeboard Leaderboard"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database
    database_url: PostgresDsn
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Redis
    redis_url: RedisDsn

    # Platform APIs
    github_token: str | None = None
    github_api_base_url: str = "https://api.github.com"
    codechef_api_url: str = "https://codechef-api.vercel.app"
    codeforces_api_url: str = "https://codeforces.com/api"
    leetcode_api_url: str = "https://leetcode-stats-api.herokuapp.com"
    http_timeout: float = 20.0
    platform_max_concurrency: int = 5  # In-flight requests per platform

    # Leaderboard refresh
    refresh_batch_size: int = 10
    refresh_update_interval: float = 60.0  # Seconds between batch starts
    refresh_settle_delay: float = 5.0
    refresh_cron_hour: int = 18
    refresh_cron_minute: int = 0
    refresh_timezone: str = "Asia/Kolkata"
    refresh_synchronous_default: bool = False
    refresh_time_headroom: int = 1800  # Added to the staggered schedule for task time limits

    # Job processing
    celery_broker_url: str | None = None
    celery_result_backend: str | None = None
    job_default_timeout: int = 14400  # 4 hours

    @field_validator("celery_broker_url", "celery_result_backend", mode="before")
    @classmethod
    def set_celery_urls(cls, v: str | None, info: Any) -> str | None:
        if v is None and "redis_url" in info.data:
            return str(info.data["redis_url"])
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
