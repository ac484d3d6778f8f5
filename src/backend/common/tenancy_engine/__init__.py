"""Rent balance and Residential Tenancies Act compliance engine.

This package intentionally contains only domain logic:
- Inputs are a rent schedule, the payment history, the served-notice log and an explicit as-of date.
- Nothing here reads the clock, persists state, or sends notices.
"""

from .balance import calculate_balance
from .business_days import BusinessDayCalendar
from .calendar_grid import DueDateGrid
from .compliance import evaluate_compliance
from .config import StatutoryConfig
from .errors import (
    CalendarConvergenceError,
    InvalidSchedule,
    MissingHolidayData,
    ReconciliationMismatch,
    TenancyEngineError,
)
from .holidays import HolidayProvider, StaticHolidayProvider
from .models import (
    BalanceSnapshot,
    ComplianceState,
    ComplianceStatus,
    Frequency,
    NoticeType,
    Payment,
    RentSchedule,
    ScheduleChange,
    StrikeNotice,
    TerminationBasis,
)
from .reconciliation import reconcile_schedule_change, requires_reconciliation
from .runner import ComplianceRunner
from .service import official_service_date, prepare_strike_notice

# Import built-in rules so they self-register with the global registry.
from . import rules as _builtin_rules  # noqa: F401
