from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import InvalidSchedule

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class Frequency(str, Enum):
    WEEKLY = "Weekly"
    FORTNIGHTLY = "Fortnightly"
    MONTHLY = "Monthly"


class NoticeType(str, Enum):
    STRIKE = "Strike"
    REMEDY_NOTICE = "RemedyNotice"


class ComplianceState(str, Enum):
    COMPLIANT = "Compliant"
    ACTION_REQUIRED = "ActionRequired"
    TRIBUNAL_ELIGIBLE = "TribunalEligible"


class TerminationBasis(str, Enum):
    TWENTY_ONE_DAY_RULE = "21_day_rule"
    THREE_STRIKES = "three_strikes"


def normalize_frequency(value: Any) -> Frequency:
    if isinstance(value, Frequency):
        return value
    if isinstance(value, str):
        for freq in Frequency:
            if freq.value.lower() == value.strip().lower():
                return freq
    raise InvalidSchedule(f"Unrecognised rent frequency: {value!r}")


def normalize_due_anchor(frequency: Frequency, value: Any) -> Union[int, str]:
    """Validate a due anchor: a day-of-month (1-31) for Monthly, a weekday name otherwise."""
    if frequency == Frequency.MONTHLY:
        if isinstance(value, bool):
            raise InvalidSchedule(f"Invalid day-of-month due anchor: {value!r}")
        try:
            day = int(str(value).strip()) if isinstance(value, str) else int(value)
        except (TypeError, ValueError):
            raise InvalidSchedule(f"Invalid day-of-month due anchor: {value!r}") from None
        if day < 1 or day > 31:
            raise InvalidSchedule(f"Day-of-month due anchor out of range (1-31): {day}")
        return day

    if isinstance(value, str):
        for name in WEEKDAY_NAMES:
            if name.lower() == value.strip().lower():
                return name
    raise InvalidSchedule(f"Unrecognised weekday due anchor for {frequency.value} rent: {value!r}")


def _schedule_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise InvalidSchedule(f"{field_name} is required and must be numeric")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidSchedule(f"{field_name} must be numeric, got {value!r}") from None


class RentSchedule(BaseModel):
    """Rent parameters owned by the surrounding application; the engine never mutates them."""

    model_config = ConfigDict(frozen=True)

    frequency: Frequency
    rent_amount: Decimal
    # Weekday name for Weekly/Fortnightly, day-of-month for Monthly.
    due_anchor: Union[int, str]
    tracking_start_date: date
    opening_arrears: Decimal = Decimal("0")

    @model_validator(mode="before")
    @classmethod
    def _validate_schedule(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        frequency = normalize_frequency(data.get("frequency"))
        data["frequency"] = frequency
        data["due_anchor"] = normalize_due_anchor(frequency, data.get("due_anchor"))

        rent = _schedule_decimal(data.get("rent_amount"), "rent_amount")
        # Rent is charged in whole cents, so anything that rounds to zero is no rent at all.
        if not rent.is_finite() or rent.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) <= 0:
            raise InvalidSchedule(f"rent_amount must be at least one cent, got {rent}")
        data["rent_amount"] = rent

        opening = data.get("opening_arrears")
        if opening is not None:
            opening = _schedule_decimal(opening, "opening_arrears")
            if not opening.is_finite() or opening < 0:
                raise InvalidSchedule(f"opening_arrears cannot be negative, got {opening}")
            data["opening_arrears"] = opening
        return data


class Payment(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    amount: Decimal = Field(gt=0)
    date: date


class DueCycle(BaseModel):
    model_config = ConfigDict(frozen=True)

    cycle_number: int = Field(ge=1)
    due_date: date


class StrikeNotice(BaseModel):
    """A served notice. The log is append-only; it is only filtered and windowed at read time."""

    model_config = ConfigDict(frozen=True)

    notice_id: str
    official_service_date: date
    type: NoticeType = NoticeType.STRIKE
    # The specific missed due date a strike targets.
    due_date_for: Optional[date] = None
    amount_owed: Decimal = Field(default=Decimal("0"), ge=0)
    sent_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _strike_targets_due_date(self) -> "StrikeNotice":
        if self.type == NoticeType.STRIKE and self.due_date_for is None:
            raise ValueError("Strike notices must name the due date they are issued for (due_date_for)")
        return self


class BalanceSnapshot(BaseModel):
    as_of_date: date
    rent_amount: Decimal

    total_rent_due: Decimal
    total_payments: Decimal
    opening_arrears: Decimal
    # Positive: tenant owes. Negative: tenant is in credit.
    current_balance: Decimal

    cycles_elapsed: int
    cycles_paid_in_full: int
    cycles_unpaid: int

    first_due_date: date
    next_due_date: date
    paid_until_date: Optional[date] = None
    oldest_unpaid_due_date: Optional[date] = None

    days_overdue: int = 0
    is_overdue: bool = False
    has_credit: bool = False
    credit_amount: Decimal = Decimal("0.00")


class DueDateStrikeStatus(BaseModel):
    cycle_number: int
    due_date: date
    is_paid: bool
    working_days_overdue: int
    is_strike_eligible: bool
    strike_already_issued: bool
    existing_notice: Optional[StrikeNotice] = None


class StrikeEligibility(BaseModel):
    can_issue_strike: bool
    next_strike_number: Optional[int] = None
    next_strikeable_due_date: Optional[date] = None
    next_strikeable_working_days: Optional[int] = None
    active_strike_count: int = 0
    active_strikes: List[StrikeNotice] = Field(default_factory=list)
    window_expiry_date: Optional[date] = None
    due_date_statuses: List[DueDateStrikeStatus] = Field(default_factory=list)
    reason: str = ""


class LegalContext(BaseModel):
    citation: str
    requirement: str
    next_step: str


class ComplianceFinding(BaseModel):
    rule_id: str
    rule_title: str
    priority: int
    status: ComplianceState
    termination_basis: Optional[TerminationBasis] = None
    tribunal_deadline: Optional[date] = None
    legal_context: LegalContext
    values: Dict[str, Any] = Field(default_factory=dict)


class ComplianceStatus(BaseModel):
    status: ComplianceState
    days_in_arrears: int
    working_days_overdue: int
    active_strike_count: int
    next_strike_number: Optional[int] = None
    termination_basis: Optional[TerminationBasis] = None

    as_of_date: date
    region: Optional[str] = None
    rule_id: Optional[str] = None
    tribunal_deadline: Optional[date] = None
    can_issue_remedy_notice: bool = False
    legal_context: LegalContext
    balance: BalanceSnapshot
    strikes: StrikeEligibility
    findings: List[ComplianceFinding] = Field(default_factory=list)
    holiday_data_missing_years: List[int] = Field(default_factory=list)


class ServiceDates(BaseModel):
    sent_at: datetime
    official_service_date: date
    remedy_expiry_date: date
    tribunal_deadline: date
    strike_window_expiry_date: date


class RemedyNoticeStatus(BaseModel):
    notice_id: str
    expiry_date: date
    is_expired: bool
    is_remedied: bool
    days_remaining: Optional[int] = None
    days_past_expiry: Optional[int] = None
    amount_required: Decimal
    amount_paid_toward_notice: Decimal
    can_apply_to_tribunal: bool


class StrikeWindowStatus(BaseModel):
    window_expiry_date: Optional[date] = None
    is_expired: bool
    days_remaining: Optional[int] = None
    active_strike_count: int


class TribunalWindowStatus(BaseModel):
    deadline_date: date
    is_open: bool
    days_remaining: Optional[int] = None


class ScheduleChange(BaseModel):
    """New values for the editable schedule parameters; None keeps the current value."""

    model_config = ConfigDict(frozen=True)

    frequency: Optional[Frequency] = None
    rent_amount: Optional[Decimal] = None
    due_anchor: Optional[Union[int, str]] = None

    @field_validator("frequency", mode="before")
    @classmethod
    def _normalize_frequency(cls, value: Any) -> Any:
        return None if value is None else normalize_frequency(value)


class ReconciliationResult(BaseModel):
    policy: str
    effective_date: date
    previous_schedule: RentSchedule
    schedule: RentSchedule
    # Payments to evaluate under the new schedule (a carried credit, if any).
    carried_payments: List[Payment] = Field(default_factory=list)
    absorbed_payment_ids: List[str] = Field(default_factory=list)
    pre_change_balance: BalanceSnapshot
    post_change_balance: BalanceSnapshot
    due_on_effective_date: Decimal
    carried_credit: Decimal
    # Informational: carried arrears expressed in new-rent cycles (from rounded amounts).
    implied_cycles_behind: Decimal


@dataclass(frozen=True)
class StatusOrdering:
    order: Dict[ComplianceState, int]

    @classmethod
    def default(cls) -> "StatusOrdering":
        # Higher wins.
        return cls(
            order={
                ComplianceState.TRIBUNAL_ELIGIBLE: 30,
                ComplianceState.ACTION_REQUIRED: 20,
                ComplianceState.COMPLIANT: 10,
            }
        )

    def worst(self, statuses: List[ComplianceState]) -> ComplianceState:
        if not statuses:
            return ComplianceState.COMPLIANT
        return max(statuses, key=lambda s: self.order.get(s, 0))
