from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import BaseModel, ConfigDict, Field

from loadreport.util import PROCESS_START

if TYPE_CHECKING:
    from loadreport.report_group import ReportGroup

DEFAULT_DYGRAPH_SOURCE = "https://cdn.jsdelivr.net/npm/dygraphs@2.2.1/dist/dygraph.min.js"
DEFAULT_REFRESH_INTERVAL_MS = 2000


def default_log_name(start: float = PROCESS_START) -> str:
    return f"results-{int(start * 1000)}.html"


class ReportingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    refresh_interval_ms: int = Field(default=DEFAULT_REFRESH_INTERVAL_MS, ge=100)
    logs_enabled: bool = True
    log_file: str | None = None
    dygraph_source: str = DEFAULT_DYGRAPH_SOURCE


class HttpConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)


DEFAULT_CONFIG_PATH = Path("loadreport.yaml")


def _resolve_optional_path(value: str | None, base_dir: Path) -> str | None:
    if not value:
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def load_config(path: Path | None = None) -> AppConfig:
    if path is None or not path.exists():
        config = AppConfig()
        base_dir = Path.cwd()
    else:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        config = AppConfig.model_validate(data)
        base_dir = path.resolve().parent

    config.reporting.log_file = _resolve_optional_path(
        config.reporting.log_file or os.getenv("LOADREPORT_LOG_FILE"),
        base_dir,
    )
    return config


def apply_config(group: ReportGroup, config: AppConfig) -> ReportGroup:
    """Push reporting settings into ``group``; an interval already set on it wins."""
    reporting = config.reporting
    group.refresh_interval_ms = group.refresh_interval_ms or reporting.refresh_interval_ms
    group.dygraph_source = reporting.dygraph_source
    if reporting.log_file:
        group.set_log_file(reporting.log_file)
    group.set_logging_enabled(reporting.logs_enabled)
    return group
