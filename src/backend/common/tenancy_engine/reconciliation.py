"""Mid-tenancy schedule changes.

One policy applies everywhere: the cash balance owed on the change date is carried
forward unchanged and nothing before that date is re-rated. The new schedule starts
tracking on the change date with the carried arrears as its opening arrears; a carried
credit becomes a single payment dated on the change date. Recomputing the balance under
the new schedule on the change date therefore reproduces the old balance.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Union

from .balance import calculate_balance
from .calendar_grid import DueDateGrid
from .config import StatutoryConfig
from .context import CENT, round_money
from .errors import ReconciliationMismatch
from .models import Payment, ReconciliationResult, RentSchedule, ScheduleChange

logger = logging.getLogger(__name__)

POLICY = "preserve_cash_balance"


def requires_reconciliation(old: RentSchedule, new: Union[RentSchedule, ScheduleChange]) -> bool:
    """True when amount, frequency, or due anchor differ."""
    if isinstance(new, ScheduleChange):
        new = apply_change(old, new, old.tracking_start_date)
    return (
        round_money(old.rent_amount) != round_money(new.rent_amount)
        or old.frequency != new.frequency
        or old.due_anchor != new.due_anchor
    )


def apply_change(
    schedule: RentSchedule,
    change: ScheduleChange,
    effective_date: date,
    opening_arrears: Decimal = Decimal("0"),
) -> RentSchedule:
    # Re-validated from raw values; an anchor that does not fit the new frequency raises InvalidSchedule.
    return RentSchedule(
        frequency=change.frequency if change.frequency is not None else schedule.frequency,
        rent_amount=change.rent_amount if change.rent_amount is not None else schedule.rent_amount,
        due_anchor=change.due_anchor if change.due_anchor is not None else schedule.due_anchor,
        tracking_start_date=effective_date,
        opening_arrears=opening_arrears,
    )


def reconcile_schedule_change(
    schedule: RentSchedule,
    payments: Iterable[Payment],
    change: ScheduleChange,
    now: date,
    *,
    config: Optional[StatutoryConfig] = None,
) -> ReconciliationResult:
    payments = tuple(payments)
    pre = calculate_balance(schedule, payments, now, config=config)

    draft = apply_change(schedule, change, now)
    grid = DueDateGrid.for_schedule(draft, max_iterations=config.max_iterations if config else None)
    # Rent falling due on the change date is charged by the new schedule itself.
    due_today = round_money(draft.rent_amount) if grid.first_due_date(now) == now else Decimal("0.00")
    carried = round_money(pre.current_balance - due_today)

    opening_arrears = max(Decimal("0.00"), carried)
    carried_credit = max(Decimal("0.00"), round_money(-carried))
    new_schedule = apply_change(schedule, change, now, opening_arrears=opening_arrears)

    carried_payments: List[Payment] = []
    if carried_credit > 0:
        carried_payments.append(
            Payment(id=f"carried-credit-{now.isoformat()}", amount=carried_credit, date=now)
        )

    post = calculate_balance(new_schedule, carried_payments, now, config=config)
    if abs(post.current_balance - pre.current_balance) > CENT:
        raise ReconciliationMismatch(
            f"Balance {pre.current_balance} became {post.current_balance} after reconciling on {now.isoformat()}"
        )

    logger.info(
        "Schedule change on %s: balance %s carried as opening arrears %s, credit %s",
        now,
        pre.current_balance,
        opening_arrears,
        carried_credit,
    )
    return ReconciliationResult(
        policy=POLICY,
        effective_date=now,
        previous_schedule=schedule,
        schedule=new_schedule,
        carried_payments=carried_payments,
        absorbed_payment_ids=[p.id for p in payments],
        pre_change_balance=pre,
        post_change_balance=post,
        due_on_effective_date=due_today,
        carried_credit=carried_credit,
        implied_cycles_behind=round_money(opening_arrears / round_money(new_schedule.rent_amount)),
    )
