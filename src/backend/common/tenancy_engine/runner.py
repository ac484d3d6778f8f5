from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .context import ComplianceContext
from .models import ComplianceFinding, StatusOrdering
from .registry import registry

logger = logging.getLogger(__name__)


class ComplianceRunner:
    def __init__(self, rules: Optional[Iterable] = None, ordering: Optional[StatusOrdering] = None):
        self._rules = list(rules) if rules is not None else registry.create_all()
        self._ordering = ordering or StatusOrdering.default()

    def run(self, ctx: ComplianceContext, *, rule_ids: Optional[set[str]] = None) -> List[ComplianceFinding]:
        """Evaluate every rule; findings come back most severe first, then by rule priority."""
        findings: List[ComplianceFinding] = []
        for rule in self._rules:
            if rule_ids is not None and rule.rule_id not in rule_ids:
                continue
            finding = rule.evaluate(ctx)
            if finding is not None:
                logger.debug("Rule %s fired: %s", rule.rule_id, finding.status.value)
                findings.append(finding)

        findings.sort(key=lambda f: (self._ordering.order.get(f.status, 0), f.priority), reverse=True)
        return findings
