import json
from datetime import date

import pytest
import yaml

from common.tenancy_engine.catalog import build_catalog, main
from common.tenancy_engine.compliance import evaluate_compliance
from common.tenancy_engine.models import ComplianceState
from common.tenancy_engine.registry import RuleRegistry
from common.tenancy_engine.rule import ComplianceRule
from common.tenancy_engine.rules import RTA_S55_1AA_STRIKE_DUE
from common.tenancy_engine.runner import ComplianceRunner


def test_catalog_lists_rules_in_evaluation_order():
    catalog = build_catalog()

    assert [e.rule_id for e in catalog] == [
        "RTA-S55-1A-ARREARS-21-DAYS",
        "RTA-S55-1AA-THREE-STRIKES",
        "RTA-S55-1AA-STRIKE-DUE",
    ]
    assert catalog[0].citation == "Residential Tenancies Act 1986, Section 55(1)(a)"
    assert catalog[2].class_name == "RTA_S55_1AA_STRIKE_DUE"


def test_catalog_cli_json(capsys):
    main(["--format", "json"])
    payload = json.loads(capsys.readouterr().out)

    assert len(payload) == 3
    assert payload[0]["priority"] == 30


def test_catalog_cli_yaml(capsys):
    main([])
    payload = yaml.safe_load(capsys.readouterr().out)

    assert {e["rule_id"] for e in payload} == {
        "RTA-S55-1A-ARREARS-21-DAYS",
        "RTA-S55-1AA-THREE-STRIKES",
        "RTA-S55-1AA-STRIKE-DUE",
    }


def test_registry_rejects_duplicate_rule_ids():
    local = RuleRegistry()
    local.register(RTA_S55_1AA_STRIKE_DUE)

    with pytest.raises(ValueError, match="Duplicate rule_id"):
        local.register(RTA_S55_1AA_STRIKE_DUE)


def test_runner_can_be_limited_to_selected_rules(thursday_schedule, auckland_calendar):
    runner = ComplianceRunner(rules=[RTA_S55_1AA_STRIKE_DUE()])

    # 21 days in arrears, but only the strike rule is evaluated.
    status = evaluate_compliance(
        thursday_schedule, [], [], date(2026, 2, 5), calendar=auckland_calendar, runner=runner
    )
    assert status.status == ComplianceState.ACTION_REQUIRED
    assert [f.rule_id for f in status.findings] == ["RTA-S55-1AA-STRIKE-DUE"]


def _rule_class(rule_id, priority, citation="Residential Tenancies Act 1986, Section 56"):
    class _LocalRule(ComplianceRule):
        def evaluate(self, ctx):
            return None

    _LocalRule.rule_id = rule_id
    _LocalRule.rule_title = rule_id
    _LocalRule.citation = citation
    _LocalRule.requirement = ""
    _LocalRule.priority = priority
    return _LocalRule


def test_registry_keeps_rules_in_precedence_order():
    local = RuleRegistry()
    local.register(_rule_class("LOW", 5))
    local.register(_rule_class("HIGH", 50))
    local.register(_rule_class("MID", 25))

    assert local.ids() == ["HIGH", "MID", "LOW"]
    assert [rule.rule_id for rule in local.create_all()] == ["HIGH", "MID", "LOW"]


def test_registry_rejects_shared_priority_and_missing_citation():
    local = RuleRegistry()
    local.register(_rule_class("FIRST", 10))

    with pytest.raises(ValueError, match="shares priority 10"):
        local.register(_rule_class("SECOND", 10))
    with pytest.raises(ValueError, match="must cite"):
        local.register(_rule_class("UNCITED", 11, citation=""))
