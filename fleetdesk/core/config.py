from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so the dashboard's shared .env can be reused as-is.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "FleetDesk Backend"
    environment: str = "development"
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")

    business_timezone: str = Field(default="UTC", alias="BUSINESS_TIMEZONE")
    default_commission_rate: Decimal = Field(
        default=Decimal("0.1"), ge=0, le=1, alias="DEFAULT_COMMISSION_RATE"
    )
    agent_sales_target: Decimal = Field(default=Decimal("10000"), gt=0, alias="AGENT_SALES_TARGET")
    time_status_unknown_text: str = Field(default="Unknown", alias="TIME_STATUS_UNKNOWN_TEXT")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]


def get_business_timezone() -> ZoneInfo:
    return ZoneInfo(get_settings().business_timezone)
