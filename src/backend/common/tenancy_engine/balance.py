from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from .calendar_grid import DueDateGrid
from .config import StatutoryConfig
from .context import round_money
from .errors import InvalidSchedule
from .models import BalanceSnapshot, Payment, RentSchedule

logger = logging.getLogger(__name__)


def calculate_balance(
    schedule: RentSchedule,
    payments: Iterable[Payment],
    as_of: date,
    *,
    config: Optional[StatutoryConfig] = None,
) -> BalanceSnapshot:
    """Rent balance of `schedule` as of `as_of`, from the full payment history.

    Payments dated after `as_of` still count: the ledger is whatever the caller passes in.
    Every intermediate amount is rounded to the cent as soon as it is produced.
    """
    rent = round_money(schedule.rent_amount)
    if rent <= 0:
        raise InvalidSchedule(f"rent_amount must be at least one cent, got {schedule.rent_amount}")

    grid = DueDateGrid.for_schedule(schedule, max_iterations=config.max_iterations if config else None)
    ground_zero = grid.first_due_date(schedule.tracking_start_date)

    cycles_elapsed = 0 if as_of < ground_zero else grid.count_cycles(ground_zero, as_of)
    total_rent_due = round_money(Decimal(cycles_elapsed) * rent)
    total_payments = round_money(sum((p.amount for p in payments), Decimal("0")))
    opening_arrears = round_money(schedule.opening_arrears)
    current_balance = round_money(total_rent_due + opening_arrears - total_payments)

    payments_for_rent = max(Decimal("0.00"), round_money(total_payments - opening_arrears))
    cycles_paid_in_full = int(payments_for_rent // rent)
    cycles_unpaid = max(0, cycles_elapsed - cycles_paid_in_full)
    logger.debug(
        "Balance as of %s: ground_zero=%s cycles_elapsed=%d due=%s paid=%s balance=%s cycles_paid=%d",
        as_of,
        ground_zero,
        cycles_elapsed,
        total_rent_due,
        total_payments,
        current_balance,
        cycles_paid_in_full,
    )

    paid_until_date: Optional[date] = None
    if cycles_paid_in_full > cycles_elapsed:
        # Paid beyond the last due date: the surplus shows up as credit, not a future date.
        paid_until_date = as_of
    elif cycles_paid_in_full > 0:
        paid_until_date = min(grid.due_date_for_cycle(cycles_paid_in_full, ground_zero), as_of)

    is_overdue = current_balance > 0
    oldest_unpaid_due_date: Optional[date] = None
    days_overdue = 0
    if is_overdue:
        if opening_arrears > 0 and cycles_paid_in_full == 0:
            oldest_unpaid_due_date = schedule.tracking_start_date
        else:
            oldest_unpaid_due_date = grid.due_date_for_cycle(cycles_paid_in_full + 1, ground_zero)
        days_overdue = max(0, (as_of - oldest_unpaid_due_date).days)

    next_due_date = ground_zero if as_of < ground_zero else grid.next_due_date_after(as_of)
    has_credit = current_balance < 0

    return BalanceSnapshot(
        as_of_date=as_of,
        rent_amount=round_money(rent),
        total_rent_due=total_rent_due,
        total_payments=total_payments,
        opening_arrears=opening_arrears,
        current_balance=current_balance,
        cycles_elapsed=cycles_elapsed,
        cycles_paid_in_full=cycles_paid_in_full,
        cycles_unpaid=cycles_unpaid,
        first_due_date=ground_zero,
        next_due_date=next_due_date,
        paid_until_date=paid_until_date,
        oldest_unpaid_due_date=oldest_unpaid_due_date,
        days_overdue=days_overdue,
        is_overdue=is_overdue,
        has_credit=has_credit,
        credit_amount=round_money(-current_balance) if has_credit else Decimal("0.00"),
    )
