"""Official Service Date (OSD) and the deadlines hanging off it.

A notice sent before the cutoff hour (local time) on a working day is served that day;
otherwise it is served on the next working day. Window placement and every deadline
use the OSD, never the send time.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo

from .business_days import BusinessDayCalendar
from .context import round_money
from .models import NoticeType, ServiceDates, StrikeNotice

logger = logging.getLogger(__name__)


def local_send_time(sent_at: datetime, calendar: BusinessDayCalendar) -> datetime:
    # Naive timestamps are already local.
    if sent_at.tzinfo is None:
        return sent_at
    return sent_at.astimezone(ZoneInfo(calendar.config.timezone))


def official_service_date(
    sent_at: datetime,
    calendar: BusinessDayCalendar,
    region: Optional[str] = None,
) -> date:
    local = local_send_time(sent_at, calendar)
    sent_day = local.date()
    if calendar.is_working_day(sent_day, region) and local.hour < calendar.config.service_cutoff_hour:
        osd = sent_day
    else:
        osd = calendar.next_working_day(sent_day + timedelta(days=1), region)
    logger.debug("Notice sent %s (local %s) served on %s", sent_at.isoformat(), local.isoformat(), osd)
    return osd


def remedy_expiry_date(osd: date, calendar: BusinessDayCalendar) -> date:
    return osd + timedelta(days=calendar.config.remedy_period_days)


def tribunal_deadline(osd: date, calendar: BusinessDayCalendar) -> date:
    return osd + timedelta(days=calendar.config.tribunal_filing_window_days)


def strike_window_expiry_date(osd: date, calendar: BusinessDayCalendar) -> date:
    return osd + timedelta(days=calendar.config.strike_window_days)


def service_dates(
    sent_at: datetime,
    calendar: BusinessDayCalendar,
    region: Optional[str] = None,
) -> ServiceDates:
    osd = official_service_date(sent_at, calendar, region)
    return ServiceDates(
        sent_at=sent_at,
        official_service_date=osd,
        remedy_expiry_date=remedy_expiry_date(osd, calendar),
        tribunal_deadline=tribunal_deadline(osd, calendar),
        strike_window_expiry_date=strike_window_expiry_date(osd, calendar),
    )


def prepare_strike_notice(
    sent_at: datetime,
    due_date_for: date,
    amount_owed: Decimal,
    calendar: BusinessDayCalendar,
    *,
    region: Optional[str] = None,
    notice_id: Optional[str] = None,
) -> StrikeNotice:
    """Build the log record for a strike about to be sent; the caller persists it."""
    return StrikeNotice(
        notice_id=notice_id or uuid.uuid4().hex,
        official_service_date=official_service_date(sent_at, calendar, region),
        type=NoticeType.STRIKE,
        due_date_for=due_date_for,
        amount_owed=round_money(amount_owed),
        sent_at=sent_at,
    )


def prepare_remedy_notice(
    sent_at: datetime,
    amount_owed: Decimal,
    calendar: BusinessDayCalendar,
    *,
    region: Optional[str] = None,
    due_date_for: Optional[date] = None,
    notice_id: Optional[str] = None,
) -> StrikeNotice:
    return StrikeNotice(
        notice_id=notice_id or uuid.uuid4().hex,
        official_service_date=official_service_date(sent_at, calendar, region),
        type=NoticeType.REMEDY_NOTICE,
        due_date_for=due_date_for,
        amount_owed=round_money(amount_owed),
        sent_at=sent_at,
    )
