from __future__ import annotations

from typing import Dict, List, Type

from .rule import ComplianceRule


class RuleRegistry:
    """Statutory compliance rules, kept in precedence order.

    Precedence is the rule's `priority` (higher first). Two rules may not share a
    priority, so the winning finding never depends on import order.
    """

    def __init__(self):
        self._rules: Dict[str, Type[ComplianceRule]] = {}

    def register(self, rule_cls: Type[ComplianceRule]) -> None:
        rule_id = getattr(rule_cls, "rule_id", None)
        if not rule_id:
            raise ValueError("Rule class missing rule_id")
        if rule_id in self._rules:
            raise ValueError(f"Duplicate rule_id registered: {rule_id}")
        if not getattr(rule_cls, "citation", None):
            raise ValueError(f"Rule {rule_id} must cite the provision it applies")
        priority = getattr(rule_cls, "priority", None)
        if not isinstance(priority, int):
            raise ValueError(f"Rule {rule_id} must define an integer priority")
        for other in self._rules.values():
            if other.priority == priority:
                raise ValueError(f"Rule {rule_id} shares priority {priority} with {other.rule_id}")
        self._rules[rule_id] = rule_cls

    def in_precedence_order(self) -> List[Type[ComplianceRule]]:
        return sorted(self._rules.values(), key=lambda cls: cls.priority, reverse=True)

    def create_all(self) -> list[ComplianceRule]:
        return [cls() for cls in self.in_precedence_order()]

    def get(self, rule_id: str) -> Type[ComplianceRule]:
        return self._rules[rule_id]

    def ids(self) -> List[str]:
        return [cls.rule_id for cls in self.in_precedence_order()]


registry = RuleRegistry()


def register_rule(rule_cls: Type[ComplianceRule]) -> Type[ComplianceRule]:
    registry.register(rule_cls)
    return rule_cls
