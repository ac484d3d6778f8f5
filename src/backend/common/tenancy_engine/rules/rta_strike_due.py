from __future__ import annotations

from typing import Optional

from ..context import ComplianceContext
from ..models import ComplianceFinding, ComplianceState, NoticeType
from ..registry import register_rule
from ..rule import ComplianceRule


@register_rule
class RTA_S55_1AA_STRIKE_DUE(ComplianceRule):
    rule_id = "RTA-S55-1AA-STRIKE-DUE"
    rule_title = "A missed due date is eligible for a strike notice"
    citation = "Residential Tenancies Act 1986, Section 55(1)(aa)"
    requirement = "Rent must be 5 working days overdue for a strike notice."
    priority = 10

    def evaluate(self, ctx: ComplianceContext) -> Optional[ComplianceFinding]:
        strikes = ctx.strikes
        if not strikes.can_issue_strike:
            return None

        due = strikes.next_strikeable_due_date.isoformat()
        next_step = f"Send Strike {strikes.next_strike_number} Notice for rent due {due}."
        if strikes.active_strike_count == 0 and any(n.type == NoticeType.STRIKE for n in ctx.notices):
            next_step += " Earlier strikes have left the window, so this starts a fresh window."
        return self.finding(
            status=ComplianceState.ACTION_REQUIRED,
            next_step=next_step,
            values={
                "next_strike_number": strikes.next_strike_number,
                "due_date_for": due,
                "working_days_overdue": strikes.next_strikeable_working_days,
                "active_strike_count": strikes.active_strike_count,
            },
        )
