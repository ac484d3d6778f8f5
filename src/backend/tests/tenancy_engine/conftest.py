from datetime import date

import pytest

from common.tenancy_engine.business_days import BusinessDayCalendar
from common.tenancy_engine.config import StatutoryConfig
from common.tenancy_engine.holidays import DEFAULT_HOLIDAYS_PATH, StaticHolidayProvider


@pytest.fixture
def nz_provider() -> StaticHolidayProvider:
    # Fresh per test: the shared default provider remembers which years it has already warned about.
    return StaticHolidayProvider.from_yaml(DEFAULT_HOLIDAYS_PATH)


@pytest.fixture
def auckland_calendar(nz_provider) -> BusinessDayCalendar:
    return BusinessDayCalendar(provider=nz_provider, region="Auckland")


@pytest.fixture
def no_holiday_calendar() -> BusinessDayCalendar:
    # Weekends only, no holidays; the blackout window shrinks to Jan 1.
    provider = StaticHolidayProvider.from_mapping({2024: {}, 2025: {}, 2026: {}, 2027: {}})
    config = StatutoryConfig(blackout_start=(1, 1), blackout_end=(1, 1), weekend_days=(5, 6))
    return BusinessDayCalendar(provider=provider, config=config)


@pytest.fixture
def thursday_schedule(make_schedule):
    """Weekly $400 due Thursdays, tracked from Thursday 2026-01-15."""
    return make_schedule(due_anchor="Thursday", tracking_start_date=date(2026, 1, 15))
