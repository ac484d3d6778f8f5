from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from .business_days import BusinessDayCalendar
from .config import StatutoryConfig
from .models import BalanceSnapshot, Payment, RentSchedule, StrikeEligibility, StrikeNotice

CENT = Decimal("0.01")


def round_money(value) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ComplianceContext:
    """Everything a compliance rule may read, computed once per evaluation."""

    as_of: date
    schedule: RentSchedule
    balance: BalanceSnapshot
    strikes: StrikeEligibility
    working_days_overdue: int
    calendar: BusinessDayCalendar
    config: StatutoryConfig
    payments: tuple[Payment, ...] = ()
    notices: tuple[StrikeNotice, ...] = ()
    region: Optional[str] = None
    active_strikes: tuple[StrikeNotice, ...] = field(default_factory=tuple)

    @property
    def days_in_arrears(self) -> int:
        return self.balance.days_overdue

    @property
    def active_strike_count(self) -> int:
        return len(self.active_strikes)

    def nth_active_strike(self, n: int) -> Optional[StrikeNotice]:
        """The nth (1-based) active strike by official service date."""
        if n < 1 or n > len(self.active_strikes):
            return None
        return self.active_strikes[n - 1]
