from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from common.tenancy_engine.models import Payment, RentSchedule, StrikeNotice


@dataclass(frozen=True)
class TenancyInputs:
    tenancy_id: str
    schedule: RentSchedule
    payments: tuple[Payment, ...] = ()
    notices: tuple[StrikeNotice, ...] = ()
    region: Optional[str] = None


def parse_tenancy_document(doc: dict[str, Any]) -> TenancyInputs:
    """Build engine inputs from a tenancy document.

    Expected shape:
      {"tenancy_id": "...", "region": "Auckland",
       "schedule": {...}, "payments": [{...}], "notices": [{...}]}
    """
    if not isinstance(doc, dict):
        raise ValueError("Tenancy document must be a JSON object.")
    raw_schedule = doc.get("schedule")
    if not isinstance(raw_schedule, dict):
        raise ValueError("Tenancy document is missing a 'schedule' object.")

    region = doc.get("region")
    return TenancyInputs(
        tenancy_id=str(doc.get("tenancy_id") or "tenancy"),
        schedule=RentSchedule(**raw_schedule),
        payments=tuple(Payment.model_validate(p) for p in doc.get("payments") or []),
        notices=tuple(StrikeNotice.model_validate(n) for n in doc.get("notices") or []),
        region=str(region).strip() if region else None,
    )


def load_tenancy_inputs(path: Path) -> TenancyInputs:
    with path.open() as handle:
        return parse_tenancy_document(json.load(handle))
