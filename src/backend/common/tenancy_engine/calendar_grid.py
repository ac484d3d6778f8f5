from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Iterator, Optional, Union

from dateutil.relativedelta import relativedelta

from .config import DEFAULT_STATUTORY_CONFIG
from .errors import CalendarConvergenceError
from .models import (
    WEEKDAY_NAMES,
    DueCycle,
    Frequency,
    RentSchedule,
    normalize_due_anchor,
    normalize_frequency,
)

_STEP_DAYS = {Frequency.WEEKLY: 7, Frequency.FORTNIGHTLY: 14}


def clamp_day(year: int, month: int, day: int) -> date:
    """Return `day` of the month, pulled back to the month's last day when it does not exist."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last))


class DueDateGrid:
    """Infinite sequence of rent due dates for one frequency/anchor pair.

    Due dates are never stored; every date is derived on demand from the anchor.
    """

    def __init__(
        self,
        frequency: Union[Frequency, str],
        due_anchor: Union[int, str],
        *,
        max_iterations: Optional[int] = None,
    ):
        self.frequency = normalize_frequency(frequency)
        self.due_anchor = normalize_due_anchor(self.frequency, due_anchor)
        self.max_iterations = max_iterations or DEFAULT_STATUTORY_CONFIG.max_iterations

    @classmethod
    def for_schedule(cls, schedule: RentSchedule, *, max_iterations: Optional[int] = None) -> "DueDateGrid":
        return cls(schedule.frequency, schedule.due_anchor, max_iterations=max_iterations)

    def matches(self, d: date) -> bool:
        if self.frequency == Frequency.MONTHLY:
            return d == clamp_day(d.year, d.month, int(self.due_anchor))
        return d.weekday() == WEEKDAY_NAMES.index(str(self.due_anchor))

    def first_due_date(self, start: date) -> date:
        """Earliest due date on or after `start`. A matching `start` is cycle 1."""
        if self.frequency == Frequency.MONTHLY:
            candidate = clamp_day(start.year, start.month, int(self.due_anchor))
            if candidate < start:
                nxt = start + relativedelta(months=1)
                candidate = clamp_day(nxt.year, nxt.month, int(self.due_anchor))
            return candidate

        target = WEEKDAY_NAMES.index(str(self.due_anchor))
        return start + timedelta(days=(target - start.weekday()) % 7)

    def advance(self, d: date) -> date:
        if self.frequency == Frequency.MONTHLY:
            nxt = d + relativedelta(months=1)
            # Re-clamp against the anchor so a Jan 31 anchor recovers to Mar 31 after Feb 28.
            return clamp_day(nxt.year, nxt.month, int(self.due_anchor))
        return d + timedelta(days=_STEP_DAYS[self.frequency])

    def iter_due_dates(self, start: date, through: Optional[date] = None) -> Iterator[date]:
        """Yield due dates from `first_due_date(start)`, stopping after `through` (inclusive)."""
        current = self.first_due_date(start)
        iterations = 0
        while through is None or current <= through:
            iterations += 1
            if through is not None and iterations > self.max_iterations:
                raise CalendarConvergenceError(
                    f"Due-date search from {start.isoformat()} to {through.isoformat()} exceeded "
                    f"{self.max_iterations} iterations",
                    iterations=iterations,
                )
            yield current
            current = self.advance(current)

    def count_cycles(self, start: date, end: date) -> int:
        """Number of due dates in [start, end]."""
        if end < start:
            return 0
        count = 0
        for _ in self.iter_due_dates(start, end):
            count += 1
        return count

    def due_date_for_cycle(self, n: int, start: date) -> date:
        """Due date of cycle `n` (1-based) counted from `first_due_date(start)`."""
        if n < 1:
            raise ValueError(f"Cycle numbers start at 1, got {n}")
        if n > self.max_iterations:
            raise CalendarConvergenceError(
                f"Cycle {n} is beyond the {self.max_iterations} iteration ceiling",
                iterations=n,
            )
        current = self.first_due_date(start)
        for _ in range(n - 1):
            current = self.advance(current)
        return current

    def next_due_date_after(self, d: date) -> date:
        """Earliest due date strictly after `d`."""
        return self.first_due_date(d + timedelta(days=1))

    def cycles(self, start: date, through: date) -> Iterator[DueCycle]:
        for n, due in enumerate(self.iter_due_dates(start, through), start=1):
            yield DueCycle(cycle_number=n, due_date=due)
