from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    env: str = Field(default="development", alias="APP_ENV")
    host: str = Field(default="0.0.0.0", alias="APP_HOST")
    port: int = Field(default=8000, alias="APP_PORT")
    # "local" resolves to the host timezone via tzlocal
    timezone: str = Field(default="local", alias="PRIMARY_TIMEZONE")

    database_url: str = Field(default="sqlite:///./data/frontdesk.db", alias="DATABASE_URL")

    queue_allocation_mode: Literal["serialized", "compat"] = Field(
        default="serialized", alias="QUEUE_ALLOCATION_MODE"
    )
    appointment_patient_link: Literal["enforce", "null"] = Field(
        default="enforce", alias="APPOINTMENT_PATIENT_LINK"
    )

    default_role: Literal["admin", "staff", "patient"] = Field(default="admin", alias="DEFAULT_ROLE")
    allow_role_override: bool = Field(default=True, alias="ALLOW_ROLE_OVERRIDE")

    low_stock_threshold: int = Field(default=10, alias="LOW_STOCK_THRESHOLD")
    expiry_window_days: int = Field(default=30, alias="EXPIRY_WINDOW_DAYS")
    recent_discharge_limit: int = Field(default=10, alias="RECENT_DISCHARGE_LIMIT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache
def get_settings() -> AppConfig:
    return AppConfig()
