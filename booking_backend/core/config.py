from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    create_tables_on_startup: bool = False

    # Auth: every route except /health requires X-API-Key
    api_key: str = ""

    # HTTP
    api_prefix: str = ""
    cors_origins: str = "http://localhost:3000"

    # Env
    env: str = "development"
    log_level: str = "INFO"

    # Availability rules
    business_start_hour: int = Field(9, ge=0, le=24)
    business_end_hour: int = Field(17, ge=0, le=24)  # exclusive, so last slot ends at 17:00
    slot_minutes: int = Field(60, gt=0)
    slot_width_from_item_duration: bool = False
    max_slot_range_days: int = Field(62, gt=0)

    # Booking rules
    cancellation_window_hours: int = 24
    booking_conflict_scope: Literal["business", "bookable_item"] = "business"
    conflict_excludes_cancelled: bool = False

    # Background job: confirmed bookings that have ended become completed
    booking_completion_enabled: bool = True
    booking_completion_interval_seconds: int = Field(60 * 60, gt=0)

    @model_validator(mode="after")
    def _check_business_window(self) -> "Settings":
        if self.business_start_hour >= self.business_end_hour:
            raise ValueError("business_start_hour must be earlier than business_end_hour")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.env == "production"


settings = Settings()
