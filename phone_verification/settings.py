from functools import lru_cache
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from phone_verification.domain.services import MAX_CODE_LENGTH


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    app_name: str = "Remore"
    log_level: str = "INFO"
    # Echoes issued codes back to the caller and into logs. Never in production.
    diagnostics_mode: bool = False

    # Verification policy
    code_ttl_seconds: int = 600
    code_length: int = 6

    # Code store
    code_store_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://redis:6379/0"
    redis_key_prefix: str = "pv:"
    expired_retention_seconds: int = 3600
    purge_interval_seconds: float = 60.0

    # SMS delivery
    sms_provider: Literal["console", "http", "twilio"] = "console"
    sms_base_url: str = "http://sms-mock:8026"
    sms_api_token: str | None = None
    sms_sender: str | None = None
    sms_timeout_seconds: float = 5.0
    twilio_account_sid: str | None = None
    twilio_auth_token: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_policies(self) -> "Settings":
        if self.diagnostics_mode and self.app_env.lower() == "production":
            raise ValueError("diagnostics_mode cannot be enabled in production")
        if self.code_ttl_seconds <= 0:
            raise ValueError("code_ttl_seconds must be positive")
        if not 0 < self.code_length <= MAX_CODE_LENGTH:
            raise ValueError(f"code_length must be between 1 and {MAX_CODE_LENGTH}")
        if self.sms_provider == "twilio" and not (
            self.twilio_account_sid and self.twilio_auth_token and self.sms_sender
        ):
            raise ValueError(
                "twilio provider requires twilio_account_sid, twilio_auth_token and sms_sender"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
