from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, List

from .business_days import BusinessDayCalendar
from .context import round_money
from .models import (
    Payment,
    RemedyNoticeStatus,
    StrikeNotice,
    StrikeWindowStatus,
    TribunalWindowStatus,
)
from .service import remedy_expiry_date, tribunal_deadline
from .strikes import active_strikes, strike_window_expiry


def remedy_notice_status(
    notice: StrikeNotice,
    payments: Iterable[Payment],
    as_of: date,
    calendar: BusinessDayCalendar,
) -> RemedyNoticeStatus:
    """Whether a 14-day notice to remedy has been satisfied or has run out.

    Payments dated on or after the notice's service date count toward the amount it demanded.
    """
    expiry = remedy_expiry_date(notice.official_service_date, calendar)
    paid = round_money(
        sum((p.amount for p in payments if p.date >= notice.official_service_date), Decimal("0"))
    )
    required = round_money(notice.amount_owed)
    delta = (as_of - expiry).days
    is_expired = delta > 0
    is_remedied = paid >= required
    return RemedyNoticeStatus(
        notice_id=notice.notice_id,
        expiry_date=expiry,
        is_expired=is_expired,
        is_remedied=is_remedied,
        days_remaining=None if is_expired else -delta,
        days_past_expiry=delta if is_expired else None,
        amount_required=required,
        amount_paid_toward_notice=paid,
        can_apply_to_tribunal=is_expired and not is_remedied,
    )


def strike_window_status(
    notices: Iterable[StrikeNotice],
    as_of: date,
    calendar: BusinessDayCalendar,
) -> StrikeWindowStatus:
    active: List[StrikeNotice] = active_strikes(notices, as_of, calendar)
    expiry = strike_window_expiry(active, calendar)
    if expiry is None:
        return StrikeWindowStatus(window_expiry_date=None, is_expired=True, active_strike_count=0)
    return StrikeWindowStatus(
        window_expiry_date=expiry,
        is_expired=False,
        days_remaining=(expiry - as_of).days,
        active_strike_count=len(active),
    )


def tribunal_window_status(third_strike_osd: date, as_of: date, calendar: BusinessDayCalendar) -> TribunalWindowStatus:
    deadline = tribunal_deadline(third_strike_osd, calendar)
    remaining = (deadline - as_of).days
    return TribunalWindowStatus(
        deadline_date=deadline,
        is_open=remaining >= 0,
        days_remaining=remaining if remaining >= 0 else None,
    )
