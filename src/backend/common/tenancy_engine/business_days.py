from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from .config import DEFAULT_STATUTORY_CONFIG, StatutoryConfig
from .holidays import HolidayProvider, StaticHolidayProvider, YearHolidays

logger = logging.getLogger(__name__)


class BusinessDayCalendar:
    """Working-day arithmetic for statutory notice periods.

    A working day is not a weekend, not inside the annual Christmas/New Year blackout,
    not a national holiday, and not the region's anniversary day.
    """

    def __init__(
        self,
        provider: Optional[HolidayProvider] = None,
        config: Optional[StatutoryConfig] = None,
        region: Optional[str] = None,
    ):
        self.provider = provider if provider is not None else StaticHolidayProvider.default()
        self.config = config or DEFAULT_STATUTORY_CONFIG
        self.region = region

    def _region(self, region: Optional[str]) -> Optional[str]:
        return region if region is not None else self.region

    def is_weekend(self, d: date) -> bool:
        return d.weekday() in self.config.weekend_days

    def in_blackout(self, d: date) -> bool:
        return self.config.in_blackout(d)

    def is_holiday(self, d: date, region: Optional[str] = None) -> bool:
        return self.provider.holidays_for(d.year).is_holiday(d, self._region(region))

    def is_working_day(self, d: date, region: Optional[str] = None) -> bool:
        return self._is_working(d, self._region(region), {})

    def _is_working(self, d: date, region: Optional[str], years: Dict[int, YearHolidays]) -> bool:
        if self.is_weekend(d) or self.in_blackout(d):
            return False
        if d.year not in years:
            years[d.year] = self.provider.holidays_for(d.year)
        return not years[d.year].is_holiday(d, region)

    def next_working_day(self, d: date, region: Optional[str] = None) -> date:
        """`d` itself when it is a working day, otherwise the next one."""
        region = self._region(region)
        years: Dict[int, YearHolidays] = {}
        current = d
        for _ in range(self.config.max_iterations):
            if self._is_working(current, region, years):
                return current
            current += timedelta(days=1)
        raise ValueError(f"No working day found within {self.config.max_iterations} days of {d.isoformat()}")

    def count_working_days(self, start: date, end: date, region: Optional[str] = None) -> int:
        """Working days in (start, end]: the start day itself never counts."""
        if start >= end:
            return 0
        region = self._region(region)
        years: Dict[int, YearHolidays] = {}
        count = 0
        current = start + timedelta(days=1)
        while current <= end:
            if self._is_working(current, region, years):
                count += 1
            current += timedelta(days=1)
        logger.debug("Working days in (%s, %s] region=%s: %d", start, end, region, count)
        return count

    def add_working_days(self, d: date, n: int, region: Optional[str] = None) -> date:
        """Walk forward from `d` until `n` working days have been counted."""
        if n < 0:
            raise ValueError(f"Working-day offsets must be non-negative, got {n}")
        region = self._region(region)
        years: Dict[int, YearHolidays] = {}
        current = d
        remaining = n
        gap = 0
        while remaining > 0:
            current += timedelta(days=1)
            if self._is_working(current, region, years):
                remaining -= 1
                gap = 0
                continue
            gap += 1
            if gap >= self.config.max_iterations:
                raise ValueError(
                    f"No working day found within {self.config.max_iterations} days of {d.isoformat()}"
                )
        return current

    def missing_holiday_years(self, start: date, end: date) -> List[int]:
        """Years in [start, end] that the holiday provider has no data for."""
        lo, hi = sorted((start.year, end.year))
        return [y for y in range(lo, hi + 1) if not self.provider.has_year(y)]
