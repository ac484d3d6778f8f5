from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, ValidationError

from common.tenancy_engine.balance import calculate_balance
from common.tenancy_engine.business_days import BusinessDayCalendar
from common.tenancy_engine.compliance import evaluate_compliance
from common.tenancy_engine.errors import (
    CalendarConvergenceError,
    InvalidSchedule,
    ReconciliationMismatch,
)
from common.tenancy_engine.models import (
    BalanceSnapshot,
    ComplianceStatus,
    Payment,
    ReconciliationResult,
    RentSchedule,
    ScheduleChange,
    ServiceDates,
    StrikeNotice,
)
from common.tenancy_engine.reconciliation import reconcile_schedule_change
from common.tenancy_engine.service import service_dates
from common.tenancy_engine.settings import build_calendar, load_engine_settings


router = APIRouter(prefix="/tenancy", tags=["tenancy"])


class BalanceRequest(BaseModel):
    # Kept raw so schedule problems map to a 422 with the engine's message.
    schedule: dict[str, Any]
    payments: list[Payment] = Field(default_factory=list)
    as_of: date


class ComplianceRequest(BalanceRequest):
    notices: list[StrikeNotice] = Field(default_factory=list)
    region: Optional[str] = None


class ServiceDateRequest(BaseModel):
    sent_at: datetime
    region: Optional[str] = None


class ReconcileRequest(BaseModel):
    schedule: dict[str, Any]
    payments: list[Payment] = Field(default_factory=list)
    change: dict[str, Any]
    now: date


def _calendar(region: Optional[str]) -> BusinessDayCalendar:
    return build_calendar(load_engine_settings(), region)


def _schedule(raw: dict[str, Any]) -> RentSchedule:
    try:
        return RentSchedule(**raw)
    except (InvalidSchedule, ValidationError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _change(raw: dict[str, Any]) -> ScheduleChange:
    try:
        return ScheduleChange(**raw)
    except (InvalidSchedule, ValidationError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.post("/balance", response_model=BalanceSnapshot)
def tenancy_balance(payload: BalanceRequest):
    schedule = _schedule(payload.schedule)
    try:
        return calculate_balance(schedule, payload.payments, payload.as_of)
    except CalendarConvergenceError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/compliance", response_model=ComplianceStatus)
def tenancy_compliance(payload: ComplianceRequest):
    schedule = _schedule(payload.schedule)
    calendar = _calendar(payload.region)
    try:
        return evaluate_compliance(
            schedule,
            payload.payments,
            payload.notices,
            payload.as_of,
            region=calendar.region,
            calendar=calendar,
        )
    except CalendarConvergenceError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/service-date", response_model=ServiceDates)
def tenancy_service_date(payload: ServiceDateRequest):
    calendar = _calendar(payload.region)
    return service_dates(payload.sent_at, calendar, calendar.region)


@router.post("/reconcile", response_model=ReconciliationResult)
def tenancy_reconcile(payload: ReconcileRequest):
    schedule = _schedule(payload.schedule)
    change = _change(payload.change)
    try:
        return reconcile_schedule_change(schedule, payload.payments, change, payload.now)
    except InvalidSchedule as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except (CalendarConvergenceError, ReconciliationMismatch) as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
