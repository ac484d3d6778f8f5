from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .business_days import BusinessDayCalendar
from .config import StatutoryConfig
from .holidays import StaticHolidayProvider


load_dotenv()


@dataclass(frozen=True)
class EngineSettings:
    default_region: Optional[str] = None
    # None means the bundled NZ holiday table.
    holidays_path: Optional[str] = None
    statutory: StatutoryConfig = field(default_factory=StatutoryConfig)


def load_engine_settings() -> EngineSettings:
    """
    Load engine settings from environment variables (and `.env`, if present).

    Reads:
      TENANCY_DEFAULT_REGION, TENANCY_HOLIDAYS_PATH, TENANCY_TIMEZONE,
      TENANCY_SERVICE_CUTOFF_HOUR, TENANCY_STRIKE_WORKING_DAYS,
      TENANCY_ARREARS_TERMINATION_DAYS, TENANCY_STRIKE_WINDOW_DAYS,
      TENANCY_TRIBUNAL_FILING_WINDOW_DAYS, TENANCY_REMEDY_PERIOD_DAYS,
      TENANCY_MAX_STRIKES
    Unset variables keep the statutory defaults.
    """
    overrides: dict[str, object] = {}
    tz = os.getenv("TENANCY_TIMEZONE", "").strip()
    if tz:
        overrides["timezone"] = tz

    for env_name, field_name in (
        ("TENANCY_SERVICE_CUTOFF_HOUR", "service_cutoff_hour"),
        ("TENANCY_STRIKE_WORKING_DAYS", "strike_working_days"),
        ("TENANCY_ARREARS_TERMINATION_DAYS", "arrears_termination_days"),
        ("TENANCY_STRIKE_WINDOW_DAYS", "strike_window_days"),
        ("TENANCY_TRIBUNAL_FILING_WINDOW_DAYS", "tribunal_filing_window_days"),
        ("TENANCY_REMEDY_PERIOD_DAYS", "remedy_period_days"),
        ("TENANCY_MAX_STRIKES", "max_strikes"),
    ):
        value = _int_env(env_name)
        if value is not None:
            overrides[field_name] = value

    return EngineSettings(
        default_region=_optional_env("TENANCY_DEFAULT_REGION"),
        holidays_path=_optional_env("TENANCY_HOLIDAYS_PATH"),
        statutory=StatutoryConfig(**overrides),
    )


def _optional_env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def _int_env(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}") from None


def build_calendar(settings: Optional[EngineSettings] = None, region: Optional[str] = None) -> BusinessDayCalendar:
    settings = settings or load_engine_settings()
    provider = (
        StaticHolidayProvider.from_yaml(settings.holidays_path)
        if settings.holidays_path
        else StaticHolidayProvider.default()
    )
    return BusinessDayCalendar(
        provider=provider,
        config=settings.statutory,
        region=region or settings.default_region,
    )
