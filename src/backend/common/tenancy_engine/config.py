from __future__ import annotations

from datetime import date
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class StatutoryConfig(BaseModel):
    """Statutory thresholds and calendar rules (Residential Tenancies Act 1986).

    These are legal constants subject to legislative change; they are configuration, not literals.
    """

    model_config = ConfigDict(frozen=True)

    # s55(1)(aa): an amount unpaid for this many working days is a strike occasion.
    strike_working_days: int = Field(default=5, ge=1)
    # s55(1)(a): rent this many calendar days in arrears allows an immediate tribunal application.
    arrears_termination_days: int = Field(default=21, ge=1)
    # s55(1)(aa): strikes count only inside this rolling window (calendar days, inclusive).
    strike_window_days: int = Field(default=90, ge=1)
    max_strikes: int = Field(default=3, ge=1)
    # Filing window after the OSD of the third strike.
    tribunal_filing_window_days: int = Field(default=28, ge=0)
    # s56: remedy period after the OSD of a notice to remedy.
    remedy_period_days: int = Field(default=14, ge=0)

    # s136: notices sent at or after this local hour are served the next working day.
    service_cutoff_hour: int = Field(default=17, ge=0, le=24)
    timezone: str = "Pacific/Auckland"

    # Annual non-working window, inclusive, as (month, day). May wrap the year end.
    blackout_start: Tuple[int, int] = (12, 25)
    blackout_end: Tuple[int, int] = (1, 15)
    # date.weekday() values.
    weekend_days: Tuple[int, ...] = (5, 6)

    # Ceiling for every due-date search loop.
    max_iterations: int = Field(default=2600, ge=1)

    def in_blackout(self, d: date) -> bool:
        key = (d.month, d.day)
        start = tuple(self.blackout_start)
        end = tuple(self.blackout_end)
        if start <= end:
            return start <= key <= end
        return key >= start or key <= end


DEFAULT_STATUTORY_CONFIG = StatutoryConfig()
