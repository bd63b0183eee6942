"""JSON rendering of the report tree."""

import json
from pathlib import Path

from .models import ScanReport


def render_report(report: ScanReport) -> str:
    """Serialize the report; identical trees always give identical text."""
    return json.dumps(report.to_dict(), indent=2)


def write_report(report: ScanReport, path: Path) -> Path:
    """Write the report as UTF-8 JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(report) + "\n", encoding="utf-8")
    return path
