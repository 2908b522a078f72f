from __future__ import annotations

import json
import random
import threading
from pathlib import Path

import typer

from loadreport.config import DEFAULT_CONFIG_PATH, AppConfig, apply_config, load_config
from loadreport.logging import configure_logging
from loadreport.report import Report
from loadreport.report_group import ReportGroup
from loadreport.server import run_server
from loadreport.sources import Monitor

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path | None) -> AppConfig:
    return load_config(config_path)


def _configure_logging(level: str) -> None:
    try:
        configure_logging(level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


def _start_demo_monitor(group: ReportGroup, stop: threading.Event) -> threading.Thread:
    """Feed a synthetic latency monitor into a "demo" report until ``stop`` is set."""
    monitor = Monitor("latency")
    group.add_report("demo").update_from_monitor(monitor)
    period_s = group.refresh_period_ms / 1000.0

    def _run() -> None:
        while not stop.is_set():
            for _ in range(random.randint(20, 60)):
                monitor.record("latency", round(random.lognormvariate(3.0, 0.5), 2))
            monitor.update()
            stop.wait(period_s)

    thread = threading.Thread(target=_run, name="loadreport-demo", daemon=True)
    thread.start()
    return thread


def _load_reports(path: Path) -> list[Report]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise typer.BadParameter(f"{path} must hold a JSON array of reports.")
    try:
        return [Report.from_dict(item) for item in data]
    except (KeyError, TypeError, AttributeError) as exc:
        raise typer.BadParameter(f"{path} contains a malformed report: {exc}") from exc


@app.command()
def serve(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, resolve_path=True),
    host: str | None = typer.Option(None, help="Override http.host from config."),
    port: int | None = typer.Option(None, help="Override http.port from config."),
    logs: bool | None = typer.Option(
        None,
        "--logs/--no-logs",
        help="Write a dashboard snapshot to the log file every refresh interval.",
    ),
    demo: bool = typer.Option(False, help="Chart a synthetic latency monitor."),
    log_level: str = typer.Option("INFO", help="Logging level, for example DEBUG or WARNING."),
) -> None:
    """Serve the live dashboard and JSON export over HTTP."""
    _configure_logging(log_level)
    cfg = _load_app_config(config)
    if logs is not None:
        cfg.reporting.logs_enabled = logs

    group = apply_config(ReportGroup(), cfg)
    stop = threading.Event()
    if demo:
        _start_demo_monitor(group, stop)
    try:
        run_server(group, host=host or cfg.http.host, port=port or cfg.http.port)
    finally:
        stop.set()
        group.close()


@app.command()
def render(
    reports: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("results.html"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, resolve_path=True),
    log_level: str = typer.Option("INFO", help="Logging level, for example DEBUG or WARNING."),
) -> None:
    """Render a saved /reports export as a standalone dashboard page."""
    _configure_logging(log_level)
    cfg = _load_app_config(config)
    group = ReportGroup(
        refresh_interval_ms=cfg.reporting.refresh_interval_ms,
        dygraph_source=cfg.reporting.dygraph_source,
    )
    for report in _load_reports(reports):
        group.add_report(report)

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(group.get_html(), encoding="utf-8")
    typer.echo(f"Rendered {len(group.reports)} report(s) to {out}")


if __name__ == "__main__":
    app()
