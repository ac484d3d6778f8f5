from datetime import date
from decimal import Decimal

import pytest

from common.tenancy_engine.balance import calculate_balance
from common.tenancy_engine.errors import InvalidSchedule
from common.tenancy_engine.models import Frequency, ScheduleChange
from common.tenancy_engine.reconciliation import (
    POLICY,
    reconcile_schedule_change,
    requires_reconciliation,
)

NOW = date(2025, 1, 16)


@pytest.fixture
def schedule(make_schedule):
    # Weekly $400 due Wednesdays from Monday 2025-01-06; first due 2025-01-08.
    return make_schedule()


@pytest.fixture
def payments(make_payment):
    return [make_payment("500", date(2025, 1, 10))]


def test_rent_increase_due_today_turns_arrears_into_credit(schedule, payments):
    result = reconcile_schedule_change(
        schedule, payments, ScheduleChange(rent_amount=Decimal("450"), due_anchor="Thursday"), NOW
    )

    assert result.policy == POLICY == "preserve_cash_balance"
    assert result.pre_change_balance.current_balance == Decimal("300.00")
    assert result.due_on_effective_date == Decimal("450.00")
    assert result.schedule.tracking_start_date == NOW
    assert result.schedule.opening_arrears == Decimal("0.00")
    assert result.carried_credit == Decimal("150.00")
    assert len(result.carried_payments) == 1
    assert result.carried_payments[0].amount == Decimal("150.00")
    assert result.carried_payments[0].date == NOW
    assert result.post_change_balance.current_balance == Decimal("300.00")
    assert result.absorbed_payment_ids == ["pay-1"]
    assert result.previous_schedule == schedule


def test_switch_to_monthly_carries_arrears(schedule, payments):
    result = reconcile_schedule_change(
        schedule, payments, ScheduleChange(frequency="monthly", due_anchor=1), NOW
    )

    assert result.schedule.frequency == Frequency.MONTHLY
    assert result.schedule.due_anchor == 1
    assert result.schedule.opening_arrears == Decimal("300.00")
    assert result.carried_payments == []
    assert result.due_on_effective_date == Decimal("0.00")
    assert result.implied_cycles_behind == Decimal("0.75")
    assert result.post_change_balance.current_balance == Decimal("300.00")

    # Nothing before the change date is re-rated; the first monthly cycle adds to the carried amount.
    later = calculate_balance(result.schedule, result.carried_payments, date(2025, 2, 1))
    assert later.current_balance == Decimal("700.00")


def test_weekday_anchor_does_not_fit_monthly(schedule, payments):
    with pytest.raises(InvalidSchedule):
        reconcile_schedule_change(schedule, payments, ScheduleChange(frequency="Monthly"), NOW)


def test_reconciling_twice_changes_nothing(schedule, payments):
    first = reconcile_schedule_change(
        schedule, payments, ScheduleChange(rent_amount=Decimal("450"), due_anchor="Thursday"), NOW
    )
    second = reconcile_schedule_change(first.schedule, first.carried_payments, ScheduleChange(), NOW)

    assert second.schedule == first.schedule
    assert second.post_change_balance.current_balance == first.post_change_balance.current_balance


def test_requires_reconciliation(schedule, make_schedule):
    assert requires_reconciliation(schedule, schedule) is False
    assert requires_reconciliation(schedule, ScheduleChange(rent_amount=Decimal("400"))) is False
    assert requires_reconciliation(schedule, ScheduleChange(rent_amount=Decimal("420"))) is True
    assert requires_reconciliation(schedule, ScheduleChange(due_anchor="friday")) is True
    assert requires_reconciliation(schedule, make_schedule(frequency="Fortnightly")) is True
