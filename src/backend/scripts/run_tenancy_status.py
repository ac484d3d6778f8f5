from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def _render_markdown(status, tenancy_id: str) -> str:
    balance = status.balance
    strikes = status.strikes
    lines = [
        f"# Tenancy Status {tenancy_id} as of {status.as_of_date.isoformat()}",
        "",
        f"Status: **{status.status.value}**",
    ]
    if status.termination_basis:
        lines.append(f"Termination basis: {status.termination_basis.value}")
    if status.tribunal_deadline:
        lines.append(f"Tribunal deadline: {status.tribunal_deadline.isoformat()}")
    lines.append("")
    lines.append("## Balance")
    lines.append(f"- Current balance: {balance.current_balance}")
    lines.append(f"- Rent due to date: {balance.total_rent_due} ({balance.cycles_elapsed} cycles)")
    lines.append(f"- Payments: {balance.total_payments}")
    if balance.opening_arrears:
        lines.append(f"- Opening arrears: {balance.opening_arrears}")
    if balance.paid_until_date:
        lines.append(f"- Paid until: {balance.paid_until_date.isoformat()}")
    if balance.oldest_unpaid_due_date:
        lines.append(f"- Oldest unpaid due date: {balance.oldest_unpaid_due_date.isoformat()}")
    lines.append(f"- Days in arrears: {status.days_in_arrears}")
    lines.append(f"- Working days overdue: {status.working_days_overdue}")
    if balance.has_credit:
        lines.append(f"- Credit: {balance.credit_amount}")
    lines.append("")
    lines.append("## Strikes")
    lines.append(f"- Active strikes: {status.active_strike_count}")
    if strikes.window_expiry_date:
        lines.append(f"- Window expires: {strikes.window_expiry_date.isoformat()}")
    lines.append(f"- {strikes.reason}")
    lines.append("")
    lines.append("## Legal context")
    lines.append(f"- Citation: {status.legal_context.citation}")
    lines.append(f"- Requirement: {status.legal_context.requirement}")
    lines.append(f"- Next step: {status.legal_context.next_step}")
    if status.can_issue_remedy_notice:
        lines.append("- A notice to remedy may be issued.")
    if status.holiday_data_missing_years:
        years = ", ".join(str(y) for y in status.holiday_data_missing_years)
        lines.append(f"- Holiday data missing for {years}; nearest year used.")
    return "\n".join(lines) + "\n"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Evaluate rent balance and RTA compliance for one tenancy and write JSON/MD outputs."
    )
    parser.add_argument("--input", required=True, help="Path to a tenancy JSON document.")
    parser.add_argument("--as-of", required=True, help="Evaluation date (YYYY-MM-DD).")
    parser.add_argument("--region", default=None, help="Region for anniversary holidays (overrides the document).")
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Root directory for reports (defaults to the input file's directory).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log engine decisions at DEBUG level.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    _ensure_backend_on_path()
    from common.tenancy_engine.compliance import evaluate_compliance
    from common.tenancy_engine.settings import build_calendar, load_engine_settings
    from pipelines.inputs import load_tenancy_inputs
    from pipelines.reports import LocalReportStore, ReportStore

    try:
        as_of = date.fromisoformat(args.as_of)
    except ValueError:
        raise SystemExit(f"--as-of must be YYYY-MM-DD, got {args.as_of!r}") from None

    input_path = Path(args.input).resolve()
    inputs = load_tenancy_inputs(input_path)
    settings = load_engine_settings()
    region = args.region or inputs.region or settings.default_region
    calendar = build_calendar(settings, region)

    status = evaluate_compliance(
        inputs.schedule,
        inputs.payments,
        inputs.notices,
        as_of,
        region=region,
        calendar=calendar,
    )

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    store: ReportStore = LocalReportStore(output_dir)
    base_name = f"tenancy_status_{as_of.isoformat()}"
    out_json = store.save_json(
        tenancy_id=inputs.tenancy_id,
        as_of=as_of,
        name=base_name,
        payload=status.model_dump(mode="json"),
    )
    out_md = store.save_text(
        tenancy_id=inputs.tenancy_id,
        as_of=as_of,
        name=f"{base_name}.md",
        text=_render_markdown(status, inputs.tenancy_id),
    )

    print(f"Wrote {out_json}")
    print(f"Wrote {out_md}")
    print(json.dumps({"status": status.status.value, "rule_id": status.rule_id}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
