"""Per-due-date strike eligibility and the rolling strike window.

Each missed due date is a separate occasion: it becomes strikeable once it has been
unpaid for the statutory number of working days, and it can be struck at most once.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from .business_days import BusinessDayCalendar
from .calendar_grid import DueDateGrid
from .models import (
    BalanceSnapshot,
    DueDateStrikeStatus,
    NoticeType,
    RentSchedule,
    StrikeEligibility,
    StrikeNotice,
)

logger = logging.getLogger(__name__)


def strike_notices(notices: Iterable[StrikeNotice]) -> List[StrikeNotice]:
    return [n for n in notices if n.type == NoticeType.STRIKE]


def dedupe_strike_notices(notices: Iterable[StrikeNotice]) -> List[StrikeNotice]:
    """One strike per due date: the earliest served wins, later duplicates are dropped."""
    by_due_date: Dict[date, StrikeNotice] = {}
    for notice in sorted(strike_notices(notices), key=lambda n: (n.official_service_date, n.notice_id)):
        kept = by_due_date.get(notice.due_date_for)
        if kept is not None:
            logger.warning(
                "Dropping duplicate strike notice %s for due date %s (already struck by %s)",
                notice.notice_id,
                notice.due_date_for,
                kept.notice_id,
            )
            continue
        by_due_date[notice.due_date_for] = notice
    return sorted(by_due_date.values(), key=lambda n: (n.official_service_date, n.notice_id))


def active_strikes(
    notices: Iterable[StrikeNotice],
    as_of: date,
    calendar: BusinessDayCalendar,
) -> List[StrikeNotice]:
    """Strikes served within the window ending at `as_of` (inclusive at both ends), oldest first."""
    window_start = as_of - timedelta(days=calendar.config.strike_window_days)
    return [n for n in dedupe_strike_notices(notices) if window_start <= n.official_service_date <= as_of]


def strike_window_expiry(active: List[StrikeNotice], calendar: BusinessDayCalendar) -> Optional[date]:
    if not active:
        return None
    oldest = min(n.official_service_date for n in active)
    return oldest + timedelta(days=calendar.config.strike_window_days)


def due_date_statuses(
    schedule: RentSchedule,
    balance: BalanceSnapshot,
    notices: Iterable[StrikeNotice],
    as_of: date,
    calendar: BusinessDayCalendar,
    region: Optional[str] = None,
) -> List[DueDateStrikeStatus]:
    """Strike status of every due date from Ground Zero through `as_of`."""
    struck = {n.due_date_for: n for n in dedupe_strike_notices(notices)}
    grid = DueDateGrid.for_schedule(schedule, max_iterations=calendar.config.max_iterations)
    threshold = calendar.config.strike_working_days

    statuses: List[DueDateStrikeStatus] = []
    for cycle in grid.cycles(schedule.tracking_start_date, as_of):
        is_paid = cycle.cycle_number <= balance.cycles_paid_in_full
        working_days = 0 if is_paid else calendar.count_working_days(cycle.due_date, as_of, region)
        existing = struck.get(cycle.due_date)
        statuses.append(
            DueDateStrikeStatus(
                cycle_number=cycle.cycle_number,
                due_date=cycle.due_date,
                is_paid=is_paid,
                working_days_overdue=working_days,
                is_strike_eligible=not is_paid and existing is None and working_days >= threshold,
                strike_already_issued=existing is not None,
                existing_notice=existing,
            )
        )
    return statuses


def strike_eligibility(
    schedule: RentSchedule,
    balance: BalanceSnapshot,
    notices: Iterable[StrikeNotice],
    as_of: date,
    calendar: BusinessDayCalendar,
    region: Optional[str] = None,
) -> StrikeEligibility:
    notices = dedupe_strike_notices(notices)
    cfg = calendar.config
    statuses = due_date_statuses(schedule, balance, notices, as_of, calendar, region)
    active = active_strikes(notices, as_of, calendar)
    window_expiry = strike_window_expiry(active, calendar)

    unpaid = [s for s in statuses if not s.is_paid]
    next_strikeable = next((s for s in statuses if s.is_strike_eligible), None)
    can_issue = next_strikeable is not None and len(active) < cfg.max_strikes

    if not balance.is_overdue or not unpaid:
        reason = "No unpaid rent due dates."
    elif len(active) >= cfg.max_strikes:
        reason = f"Already have {cfg.max_strikes} strikes in window. Apply to Tribunal instead."
    elif next_strikeable is not None:
        reason = (
            f"Strike notice can be issued for rent due {next_strikeable.due_date.isoformat()} "
            f"({next_strikeable.working_days_overdue} working days overdue)."
        )
    elif any(s.working_days_overdue >= cfg.strike_working_days for s in unpaid):
        reason = "All overdue due dates already have strike notices issued."
    else:
        reason = (
            f"Only {unpaid[0].working_days_overdue} working days overdue. "
            f"Must be at least {cfg.strike_working_days} working days."
        )

    logger.debug(
        "Strike eligibility as of %s: active=%d can_issue=%s next_due_date=%s",
        as_of,
        len(active),
        can_issue,
        next_strikeable.due_date if next_strikeable else None,
    )
    return StrikeEligibility(
        can_issue_strike=can_issue,
        next_strike_number=len(active) + 1 if can_issue else None,
        next_strikeable_due_date=next_strikeable.due_date if next_strikeable else None,
        next_strikeable_working_days=next_strikeable.working_days_overdue if next_strikeable else None,
        active_strike_count=len(active),
        active_strikes=active,
        window_expiry_date=window_expiry,
        due_date_statuses=statuses,
        reason=reason,
    )
