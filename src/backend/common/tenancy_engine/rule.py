from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, Optional

from .context import ComplianceContext
from .models import ComplianceFinding, ComplianceState, LegalContext, TerminationBasis


class ComplianceRule(ABC):
    rule_id: str
    rule_title: str
    citation: str
    requirement: str
    # Higher wins when several rules fire.
    priority: int

    def __init__(self):
        if not getattr(self, "rule_id", None):
            raise ValueError("Rule must define rule_id")

    @abstractmethod
    def evaluate(self, ctx: ComplianceContext) -> Optional[ComplianceFinding]:  # pragma: no cover
        """Return a finding when the rule applies, otherwise None."""
        raise NotImplementedError

    def finding(
        self,
        *,
        status: ComplianceState,
        next_step: str,
        termination_basis: Optional[TerminationBasis] = None,
        tribunal_deadline: Optional[date] = None,
        values: Optional[Dict[str, Any]] = None,
    ) -> ComplianceFinding:
        return ComplianceFinding(
            rule_id=self.rule_id,
            rule_title=self.rule_title,
            priority=self.priority,
            status=status,
            termination_basis=termination_basis,
            tribunal_deadline=tribunal_deadline,
            legal_context=LegalContext(
                citation=self.citation,
                requirement=self.requirement,
                next_step=next_step,
            ),
            values=values or {},
        )
