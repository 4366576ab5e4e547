from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Global application-level configuration.

    This class is the single source of truth for:
    - environment selection
    - logging behavior
    - run cadence (tick interval)
    - dashboard presentation limits
    """

    model_config = SettingsConfigDict(
        env_prefix="SCRAPEDASH_",
        env_file=".env",
        extra="ignore",
    )

    # ---- Environment -------------------------------------------------

    env: Literal["local", "staging", "prod"] = "local"

    # ---- Logging -----------------------------------------------------

    log_level: str = "INFO"

    # ---- Run ---------------------------------------------------------

    tick_interval_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Delay between simulated work units while running",
    )

    # None keeps the run log unbounded
    log_capacity: int | None = Field(
        default=None,
        ge=1,
        description="Optional cap on retained run log entries (newest kept)",
    )

    # ---- Dashboard ---------------------------------------------------

    recent_log_limit: int = Field(
        default=10,
        ge=1,
        description="Number of log entries shown on the dashboard",
    )

    toast_ttl_seconds: float = Field(
        default=4.0,
        gt=0,
        description="Seconds before a toast notification expires",
    )


# Singleton settings object
settings = AppSettings()
