from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Protocol


class ReportStore(Protocol):
    def save_json(
        self,
        *,
        tenancy_id: str,
        as_of: date,
        name: str,
        payload: dict[str, Any],
    ) -> Path:
        ...

    def save_text(self, *, tenancy_id: str, as_of: date, name: str, text: str) -> Path:
        ...


@dataclass(frozen=True)
class LocalReportStore:
    root_dir: Path

    def report_dir(self, *, tenancy_id: str, as_of: date) -> Path:
        out_dir = self.root_dir / tenancy_id / as_of.isoformat()
        out_dir.mkdir(parents=True, exist_ok=True)
        return out_dir

    def save_json(
        self,
        *,
        tenancy_id: str,
        as_of: date,
        name: str,
        payload: dict[str, Any],
    ) -> Path:
        out_path = self.report_dir(tenancy_id=tenancy_id, as_of=as_of) / f"{name}.json"
        out_path.write_text(json.dumps(payload, indent=2))
        return out_path

    def save_text(self, *, tenancy_id: str, as_of: date, name: str, text: str) -> Path:
        out_path = self.report_dir(tenancy_id=tenancy_id, as_of=as_of) / name
        out_path.write_text(text)
        return out_path
