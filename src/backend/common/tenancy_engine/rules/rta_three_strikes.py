from __future__ import annotations

from typing import Optional

from ..context import ComplianceContext
from ..models import ComplianceFinding, ComplianceState, TerminationBasis
from ..notices import tribunal_window_status
from ..registry import register_rule
from ..rule import ComplianceRule


@register_rule
class RTA_S55_1AA_THREE_STRIKES(ComplianceRule):
    rule_id = "RTA-S55-1AA-THREE-STRIKES"
    rule_title = "Three strike notices served within the rolling window"
    citation = "Residential Tenancies Act 1986, Section 55(1)(aa)"
    requirement = "3 strike notices served within 90-day window."
    priority = 20

    def evaluate(self, ctx: ComplianceContext) -> Optional[ComplianceFinding]:
        max_strikes = ctx.config.max_strikes
        if ctx.active_strike_count < max_strikes:
            return None

        final_strike = ctx.nth_active_strike(max_strikes)
        window = tribunal_window_status(final_strike.official_service_date, ctx.as_of, ctx.calendar)
        if not window.is_open:
            return None

        deadline = window.deadline_date.isoformat()
        return self.finding(
            status=ComplianceState.TRIBUNAL_ELIGIBLE,
            termination_basis=TerminationBasis.THREE_STRIKES,
            tribunal_deadline=window.deadline_date,
            next_step=f"Apply to Tenancy Tribunal before {deadline} "
            f"({ctx.config.tribunal_filing_window_days}-day deadline).",
            values={
                "active_strike_count": ctx.active_strike_count,
                "final_strike_notice_id": final_strike.notice_id,
                "final_strike_service_date": final_strike.official_service_date.isoformat(),
                "filing_days_remaining": window.days_remaining,
            },
        )
