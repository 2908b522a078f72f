from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Iterable, Protocol, Union

from loadreport.config import (
    DEFAULT_DYGRAPH_SOURCE,
    DEFAULT_REFRESH_INTERVAL_MS,
    default_log_name,
)
from loadreport.logfile import LogFile
from loadreport.render import render_summary, reports_to_json
from loadreport.report import Report
from loadreport.timers import Scheduler, ThreadingScheduler, TimerHandle

LOGGER = logging.getLogger(__name__)


class LogSink(Protocol):
    def clear(self, text: str = "") -> None: ...

    def close(self) -> None: ...


LogTarget = Union[str, "os.PathLike[str]", LogSink]
Renderer = Callable[[Iterable[Report], int, str], str]


class ReportGroup:
    """Ordered reports rendered as one dashboard page.

    While logging is enabled, a snapshot of the dashboard replaces the contents of the
    log sink every ``refresh_interval_ms``. At most one write timer is pending at a time;
    each call to ``set_logging_enabled`` starts a new timer generation and firings from an
    older generation are dropped.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        refresh_interval_ms: int | None = None,
        renderer: Renderer = render_summary,
        log_file_factory: Callable[[str | Path], LogSink] = LogFile,
        dygraph_source: str = DEFAULT_DYGRAPH_SOURCE,
    ) -> None:
        self.reports: list[Report] = []
        self.log_target: LogTarget = default_log_name()
        self.refresh_interval_ms = refresh_interval_ms
        self.dygraph_source = dygraph_source
        self.logger: LogSink | None = None
        self._scheduler = scheduler or ThreadingScheduler()
        self._renderer = renderer
        self._log_file_factory = log_file_factory
        self._timer: TimerHandle | None = None
        self._generation = 0
        self._enabled = False
        self._lock = threading.RLock()

    @property
    def logging_enabled(self) -> bool:
        return self._enabled

    @property
    def refresh_period_ms(self) -> int:
        return int(self.refresh_interval_ms or DEFAULT_REFRESH_INTERVAL_MS)

    def add_report(self, report: Report | str) -> Report:
        if isinstance(report, str):
            report = Report(report)
        with self._lock:
            self.reports.append(report)
        return report

    def get_report(self, name: str) -> Report | None:
        for report in list(self.reports):
            if report.name == name:
                return report
        return None

    def remove_report(self, name: str) -> None:
        with self._lock:
            self.reports[:] = [report for report in self.reports if report.name != name]

    def reset(self) -> None:
        with self._lock:
            self.reports.clear()

    def set_log_file(self, target: LogTarget) -> ReportGroup:
        """Change where snapshots go; an already open sink is kept until logging is disabled."""
        self.log_target = target
        return self

    def set_logging_enabled(self, enabled: bool) -> ReportGroup:
        with self._lock:
            # A sink that fails to open leaves the group disabled.
            if enabled and self.logger is None:
                self.logger = self._open_sink()
            self._cancel_timer()
            self._generation += 1
            self._enabled = bool(enabled)
            if enabled:
                self._schedule(self._generation)
            elif self.logger is not None:
                sink, self.logger = self.logger, None
                sink.close()
        return self

    def close(self) -> None:
        self.set_logging_enabled(False)

    def get_html(self) -> str:
        return self._renderer(list(self.reports), self.refresh_period_ms, self.dygraph_source)

    def reports_json(self) -> str:
        return reports_to_json(list(self.reports))

    def _open_sink(self) -> LogSink:
        target = self.log_target
        if isinstance(target, (str, os.PathLike)):
            LOGGER.info("Writing report snapshots to %s", target)
            return self._log_file_factory(target)
        return target

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule(self, generation: int) -> None:
        self._timer = self._scheduler.call_later(
            self.refresh_period_ms / 1000.0,
            lambda: self._write_to_log(generation),
        )

    def _write_to_log(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or not self._enabled or self.logger is None:
                return
            self._schedule(generation)
            try:
                self.logger.clear(self.get_html())
            except Exception:
                LOGGER.exception("Failed to write report snapshot")
