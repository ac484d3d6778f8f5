from __future__ import annotations

from typing import Optional


class TenancyEngineError(Exception):
    """Base class for errors raised by the tenancy engine."""


class InvalidSchedule(TenancyEngineError):
    """The rent schedule cannot be evaluated (bad amount, anchor, or frequency)."""


class CalendarConvergenceError(TenancyEngineError, RuntimeError):
    """A due-date search hit its iteration ceiling.

    This always indicates a logic defect or an absurd input range; it is never retried.
    """

    def __init__(self, message: str, *, iterations: int):
        super().__init__(message)
        self.iterations = iterations


class MissingHolidayData(TenancyEngineError, LookupError):
    """Holiday data is not available for the requested year.

    `fallback_year` is the nearest year that is available (None when the table is empty).
    """

    def __init__(self, year: int, fallback_year: Optional[int] = None):
        msg = f"No holiday data for year {year}"
        if fallback_year is not None:
            msg += f"; nearest available year is {fallback_year}"
        super().__init__(msg)
        self.year = year
        self.fallback_year = fallback_year


class ReconciliationMismatch(TenancyEngineError):
    """Recomputing under the reconciled schedule did not reproduce the carried balance."""
