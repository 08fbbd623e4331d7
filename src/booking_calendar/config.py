"""Runtime settings read from environment variables.

Usage:
    from booking_calendar.config import get_settings

    settings = get_settings()
    settings.checkout_only_policy  # CheckoutOnlyPolicy.ALLOW

Testing:
    Use reset_settings() after changing environment variables.
"""

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from booking_calendar.models.enums import CheckoutOnlyPolicy


class CalendarSettings(BaseModel):
    """Calendar engine and API settings."""

    model_config = ConfigDict(frozen=True)

    environment: str = "dev"
    dynamodb_table_prefix: str = "booking-calendar-dev"
    # Max selectable date = today + booking_window_days (None = no window)
    booking_window_days: int | None = Field(default=None, ge=0)
    checkout_only_policy: CheckoutOnlyPolicy = CheckoutOnlyPolicy.ALLOW
    # Reject completing clicks whose range encloses a booked night
    block_booked_spans: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@lru_cache
def get_settings() -> CalendarSettings:
    """Get cached settings built from the environment.

    Returns:
        CalendarSettings for the current process
    """
    environment = os.getenv("ENVIRONMENT", "dev")
    window = os.getenv("BOOKING_WINDOW_DAYS", "").strip()
    origins = os.getenv("CORS_ORIGINS", "").strip()

    overrides: dict[str, object] = {}
    if origins:
        overrides["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    return CalendarSettings(
        environment=environment,
        # Allow override via DYNAMODB_TABLE_PREFIX for testing
        dynamodb_table_prefix=os.getenv(
            "DYNAMODB_TABLE_PREFIX", f"booking-calendar-{environment}"
        ),
        booking_window_days=int(window) if window else None,
        checkout_only_policy=CheckoutOnlyPolicy(
            os.getenv("CHECKOUT_ONLY_POLICY", CheckoutOnlyPolicy.ALLOW.value).lower()
        ),
        block_booked_spans=_env_flag("BLOCK_BOOKED_SPANS"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        **overrides,
    )


def reset_settings() -> None:
    """Clear the cached settings (for testing only)."""
    get_settings.cache_clear()
