"""
Application settings.

Values come from the environment (and a local ``.env``) through
pydantic-settings. Monetary rates are Decimals; cron expressions use the
five-field crontab syntax and fire in ``SCHEDULER_TIMEZONE``.
"""

import json
from decimal import Decimal
from functools import lru_cache
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application configuration
    APP_NAME: str = Field(default="Fraction Car Ownership API", alias="PROJECT_NAME")
    API_VERSION: str = Field(default="v1", alias="PROJECT_VERSION")
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    FRONTEND_URL: str = "http://localhost:4200"

    CORS_ORIGINS: List[str] = Field(default=["*"], alias="BACKEND_CORS_ORIGINS")

    # Database configuration
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "fraction"
    DB_POOL_SIZE: int = 20
    DB_POOL_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Redis (Celery broker and result backend)
    REDIS_URL: str = "redis://localhost:6379/0"

    # Email configuration
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = Field(default=None, alias="SMTP_USERNAME")
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TLS: bool = True
    EMAIL_FROM_ADDRESS: Optional[str] = Field(default=None, alias="FROM_EMAIL")
    SUPERADMIN_EMAIL: Optional[str] = None

    # Inventory limits per car
    WAITLIST_TOKENS_MAX: int = 20
    BOOK_NOW_TOKENS_MAX: int = 12

    # AMC penalty and reminder policy
    AMC_PENALTY_ANNUAL_RATE: Decimal = Decimal("0.18")
    AMC_PENALTY_RECALC_HOURS: int = 24
    AMC_REMINDER_WINDOW_DAYS: int = 30
    KYC_REMINDER_MIN_DAYS: int = 1

    # Scheduled jobs (cron expressions are evaluated in SCHEDULER_TIMEZONE)
    SCHEDULER_TIMEZONE: str = "Asia/Kolkata"
    CRON_AMC_REMINDERS: str = "0 9 * * *"
    CRON_AMC_PENALTIES: str = "0 10 * * *"
    CRON_USER_SUSPENSIONS: str = "0 11 * * *"
    CRON_KYC_REMINDERS: str = "0 11 * * *"
    CRON_STOP_BOOKINGS_RECONCILE: str = "*/30 * * * *"

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Accept a JSON list or a comma separated string."""
        if not isinstance(v, str):
            return v
        v = v.strip()
        if v.startswith("["):
            return json.loads(v)
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    def get_database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
