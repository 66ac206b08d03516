from __future__ import annotations

import json
from pathlib import Path
from typing import Dict


def write_validation_report(report: Dict[str, object], outputs_dir: Path) -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / "validation.json"
    with path.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    return path


def format_validation_report(report: Dict[str, object]) -> str:
    lines: list[str] = []
    lines.append(f"sections: {report.get('section_count')}")
    lines.append(
        f"cells: {report.get('cell_count')} "
        f"(sessions {report.get('session_cell_count')}, merged {report.get('merged_cell_count')})"
    )
    issues = report.get("issues_by_kind", {})
    lines.append("issues_by_kind:")
    if isinstance(issues, dict):
        for k, v in issues.items():
            lines.append(f"  - {k}: {len(v)}")
    coverage = report.get("coverage_violations", [])
    lines.append(f"coverage_violations: {len(coverage) if isinstance(coverage, list) else coverage}")
    seps = report.get("separators", {})
    lines.append("separators:")
    if isinstance(seps, dict):
        for k, v in seps.items():
            lines.append(f"  - before {k}: {v}")
    return "\n".join(lines)
