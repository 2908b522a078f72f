from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader, select_autoescape

from loadreport.config import DEFAULT_DYGRAPH_SOURCE
from loadreport.report import Report
from loadreport.util import json_safe

SUMMARY_TEMPLATE = "summary.html.j2"


def _template_env() -> Environment:
    templates_path = Path(__file__).resolve().parent / "templates"
    env = Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_value"] = _format_value
    return env


def _format_value(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.2f}".rstrip("0").rstrip(".")
    return str(value)


def reports_payload(reports: Iterable[Report]) -> list[dict[str, Any]]:
    return [report.to_dict() for report in reports]


def reports_to_json(reports: Iterable[Report]) -> str:
    return json.dumps(
        json_safe(reports_payload(reports)),
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    )


def render_summary(
    reports: Iterable[Report],
    refresh_period_ms: int,
    dygraph_source: str = DEFAULT_DYGRAPH_SOURCE,
) -> str:
    payload = json_safe(reports_payload(reports))
    template = _template_env().get_template(SUMMARY_TEMPLATE)
    return template.render(
        generated_at=datetime.now(timezone.utc).isoformat(),
        dygraph_source=dygraph_source,
        refresh_period_ms=int(refresh_period_ms),
        reports=payload,
    )
