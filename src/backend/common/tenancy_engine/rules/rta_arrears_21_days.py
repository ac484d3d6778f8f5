from __future__ import annotations

from typing import Optional

from ..context import ComplianceContext
from ..models import ComplianceFinding, ComplianceState, TerminationBasis
from ..registry import register_rule
from ..rule import ComplianceRule


@register_rule
class RTA_S55_1A_ARREARS_21_DAYS(ComplianceRule):
    rule_id = "RTA-S55-1A-ARREARS-21-DAYS"
    rule_title = "Rent 21 or more calendar days in arrears"
    citation = "Residential Tenancies Act 1986, Section 55(1)(a)"
    requirement = "Rent is 21 or more calendar days in arrears."
    priority = 30

    def evaluate(self, ctx: ComplianceContext) -> Optional[ComplianceFinding]:
        threshold = ctx.config.arrears_termination_days
        if not ctx.balance.is_overdue or ctx.days_in_arrears < threshold:
            return None

        # No notice is required, so the tribunal can be approached today.
        return self.finding(
            status=ComplianceState.TRIBUNAL_ELIGIBLE,
            termination_basis=TerminationBasis.TWENTY_ONE_DAY_RULE,
            tribunal_deadline=ctx.as_of,
            next_step="Apply to Tenancy Tribunal for termination (no notice required).",
            values={
                "days_in_arrears": ctx.days_in_arrears,
                "threshold_days": threshold,
                "oldest_unpaid_due_date": ctx.balance.oldest_unpaid_due_date.isoformat(),
                "current_balance": str(ctx.balance.current_balance),
            },
        )
