from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from .balance import calculate_balance
from .business_days import BusinessDayCalendar
from .config import StatutoryConfig
from .context import ComplianceContext
from .models import (
    ComplianceStatus,
    LegalContext,
    Payment,
    RentSchedule,
    StatusOrdering,
    StrikeNotice,
)
from .runner import ComplianceRunner
from .strikes import strike_eligibility

logger = logging.getLogger(__name__)


def _compliant_context(working_days_overdue: int, threshold: int) -> LegalContext:
    if 0 < working_days_overdue < threshold:
        next_step = (
            f"Monitor - rent {working_days_overdue} working days overdue. "
            f"Strike eligible after {threshold} working days."
        )
    else:
        next_step = "Continue monitoring rent payments."
    return LegalContext(
        citation="Residential Tenancies Act 1986",
        requirement="No action required at this time.",
        next_step=next_step,
    )


def evaluate_compliance(
    schedule: RentSchedule,
    payments: Iterable[Payment],
    notices: Iterable[StrikeNotice],
    as_of: date,
    *,
    region: Optional[str] = None,
    calendar: Optional[BusinessDayCalendar] = None,
    config: Optional[StatutoryConfig] = None,
    runner: Optional[ComplianceRunner] = None,
) -> ComplianceStatus:
    """Statutory status of one tenancy as of `as_of`, recomputed from scratch.

    The notice log is read as-is; duplicate strikes for the same due date are ignored
    after the first one served. Statutory constants come from `calendar.config`; passing a
    different `config` alongside a calendar is an error.
    """
    if calendar is None:
        calendar = BusinessDayCalendar(config=config, region=region)
    elif config is not None and config != calendar.config:
        raise ValueError("config conflicts with calendar.config; build the calendar with that config instead")
    cfg = calendar.config
    region = region if region is not None else calendar.region
    payments = tuple(payments)
    notices = tuple(notices)

    balance = calculate_balance(schedule, payments, as_of, config=cfg)
    working_days_overdue = 0
    if balance.is_overdue and balance.oldest_unpaid_due_date is not None:
        working_days_overdue = calendar.count_working_days(balance.oldest_unpaid_due_date, as_of, region)

    strikes = strike_eligibility(schedule, balance, notices, as_of, calendar, region)
    ctx = ComplianceContext(
        as_of=as_of,
        schedule=schedule,
        balance=balance,
        strikes=strikes,
        working_days_overdue=working_days_overdue,
        calendar=calendar,
        config=cfg,
        payments=payments,
        notices=notices,
        region=region,
        active_strikes=tuple(strikes.active_strikes),
    )

    findings = (runner or ComplianceRunner()).run(ctx)
    status = StatusOrdering.default().worst([f.status for f in findings])
    top = findings[0] if findings else None

    missing_years = calendar.missing_holiday_years(
        balance.oldest_unpaid_due_date or balance.first_due_date, as_of
    )
    if missing_years:
        logger.warning("Compliance for %s evaluated with fallback holiday data for %s", as_of, missing_years)

    logger.debug(
        "Compliance as of %s: status=%s rule=%s days_in_arrears=%d working_days_overdue=%d active_strikes=%d",
        as_of,
        status.value,
        top.rule_id if top else None,
        balance.days_overdue,
        working_days_overdue,
        strikes.active_strike_count,
    )
    return ComplianceStatus(
        status=status,
        days_in_arrears=balance.days_overdue,
        working_days_overdue=working_days_overdue,
        active_strike_count=strikes.active_strike_count,
        next_strike_number=strikes.next_strike_number,
        termination_basis=top.termination_basis if top else None,
        as_of_date=as_of,
        region=region,
        rule_id=top.rule_id if top else None,
        tribunal_deadline=top.tribunal_deadline if top else None,
        can_issue_remedy_notice=balance.is_overdue,
        legal_context=top.legal_context
        if top
        else _compliant_context(working_days_overdue, cfg.strike_working_days),
        balance=balance,
        strikes=strikes,
        findings=findings,
        holiday_data_missing_years=missing_years,
    )
