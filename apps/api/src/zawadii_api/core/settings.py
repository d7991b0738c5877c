from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="allow")

    environment: Literal["development", "staging", "production"] = "development"
    database_url: str = "sqlite+aiosqlite:///./zawadii.db"
    log_level: str = "INFO"

    # Application
    app_download_url: str = "zawadii.app"
    cors_allowed_origins: list[str] = Field(default_factory=list)

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def _parse_origin_list(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple, set)):
            return [str(item).strip() for item in value if str(item).strip()]
        return []

    # Internal API security
    operator_api_key: str = ""
    admin_api_key: str = ""

    # Points economy
    default_money_points_ratio: float = 100.0
    default_points_conversion: float = 2.0
    points_conversion_min: float = 1.0
    points_conversion_max: float = 10.0

    # Purchase activity
    activity_amount_limit: float = 10_000_000
    duplicate_activity_window_seconds: int = 300

    # Reward codes
    reward_code_batch_limit: int = 100
    reward_code_default_batch: int = 10

    # Messaging
    sms_enabled: bool = False
    sms_message_max_length: int = 500
    sms_timeout_seconds: float = 10.0
    beem_api_url: str = "https://apisms.beem.africa/v1/send"
    beem_api_key: str | None = None
    beem_secret_key: str | None = None
    beem_sms_source_addr: str | None = None

    @property
    def sms_configured(self) -> bool:
        return bool(self.beem_api_key and self.beem_secret_key and self.beem_sms_source_addr)


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
