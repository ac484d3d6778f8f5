import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work,
# even when pytest's rootdir is the repository root.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from datetime import date
from decimal import Decimal

import pytest

from common.tenancy_engine.models import NoticeType, Payment, RentSchedule, StrikeNotice


@pytest.fixture
def make_schedule():
    def _make(
        *,
        frequency: str = "Weekly",
        rent_amount="400",
        due_anchor="Wednesday",
        tracking_start_date: date = date(2025, 1, 6),
        opening_arrears="0",
    ) -> RentSchedule:
        return RentSchedule(
            frequency=frequency,
            rent_amount=Decimal(str(rent_amount)),
            due_anchor=due_anchor,
            tracking_start_date=tracking_start_date,
            opening_arrears=Decimal(str(opening_arrears)),
        )

    return _make


@pytest.fixture
def make_payment():
    counter = {"n": 0}

    def _make(amount, paid_on: date, *, payment_id: str | None = None) -> Payment:
        counter["n"] += 1
        return Payment(id=payment_id or f"pay-{counter['n']}", amount=Decimal(str(amount)), date=paid_on)

    return _make


@pytest.fixture
def make_strike():
    counter = {"n": 0}

    def _make(osd: date, due_date_for: date, *, amount_owed="400", notice_id: str | None = None) -> StrikeNotice:
        counter["n"] += 1
        return StrikeNotice(
            notice_id=notice_id or f"strike-{counter['n']}",
            official_service_date=osd,
            type=NoticeType.STRIKE,
            due_date_for=due_date_for,
            amount_owed=Decimal(str(amount_owed)),
        )

    return _make
