from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from loadreport.config import (
    AppConfig,
    ReportingConfig,
    apply_config,
    default_log_name,
    load_config,
)
from loadreport.report_group import ReportGroup


def test_load_config_defaults_when_file_missing(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("LOADREPORT_LOG_FILE", raising=False)

    cfg = load_config(tmp_path / "missing.yaml")

    assert cfg.reporting.refresh_interval_ms == 2000
    assert cfg.reporting.logs_enabled is True
    assert cfg.reporting.log_file is None
    assert cfg.http.port == 8000


def test_load_config_empty_file_gives_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("LOADREPORT_LOG_FILE", raising=False)
    config_path = tmp_path / "loadreport.yaml"
    config_path.write_text("", encoding="utf-8")

    assert load_config(config_path).reporting == ReportingConfig()


def test_load_config_resolves_log_file_relative_to_config(tmp_path: Path) -> None:
    config_path = tmp_path / "conf" / "loadreport.yaml"
    config_path.parent.mkdir()
    config_path.write_text(
        yaml.safe_dump(
            {
                "reporting": {"refresh_interval_ms": 500, "log_file": "logs/run.html"},
                "http": {"host": "0.0.0.0", "port": 9000},
            }
        ),
        encoding="utf-8",
    )

    cfg = load_config(config_path)

    assert cfg.reporting.refresh_interval_ms == 500
    assert Path(cfg.reporting.log_file or "") == (tmp_path / "conf" / "logs" / "run.html").resolve()
    assert cfg.http.host == "0.0.0.0"


def test_load_config_uses_env_log_file(tmp_path: Path, monkeypatch) -> None:
    config_path = tmp_path / "loadreport.yaml"
    config_path.write_text("reporting: {}\n", encoding="utf-8")
    monkeypatch.setenv("LOADREPORT_LOG_FILE", "env.html")

    cfg = load_config(config_path)

    assert cfg.reporting.log_file == str((tmp_path / "env.html").resolve())


def test_load_config_rejects_unknown_keys_and_bad_values(tmp_path: Path) -> None:
    config_path = tmp_path / "loadreport.yaml"
    config_path.write_text("reporting:\n  refresh: 10\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(config_path)

    with pytest.raises(ValidationError):
        AppConfig.model_validate({"reporting": {"refresh_interval_ms": 10}})


def test_default_log_name_uses_epoch_millis() -> None:
    assert default_log_name(1_700_000_000.5) == "results-1700000000500.html"


def test_apply_config_sets_interval_target_and_logging(scheduler, sink_factory) -> None:
    group = ReportGroup(scheduler=scheduler, log_file_factory=sink_factory)
    cfg = AppConfig.model_validate(
        {"reporting": {"refresh_interval_ms": 300, "log_file": "/tmp/run.html"}}
    )

    assert apply_config(group, cfg) is group

    assert group.refresh_interval_ms == 300
    assert group.log_target == "/tmp/run.html"
    assert group.logging_enabled
    assert scheduler.pending[0].delay_s == 0.3
    group.close()


def test_apply_config_keeps_existing_interval(scheduler, sink_factory) -> None:
    group = ReportGroup(scheduler=scheduler, refresh_interval_ms=1000, log_file_factory=sink_factory)
    cfg = AppConfig.model_validate({"reporting": {"logs_enabled": False}})

    apply_config(group, cfg)

    assert group.refresh_interval_ms == 1000
    assert not group.logging_enabled
    assert sink_factory.opened == []
