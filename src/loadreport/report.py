from __future__ import annotations

import threading
from typing import Any, Mapping, Protocol

from loadreport.chart import Chart, Clock
from loadreport.util import json_safe, time_from_start, uid


class Summarizable(Protocol):
    def summary(self) -> Mapping[str, Any]: ...


class MonitorLike(Protocol):
    stats: Mapping[str, Summarizable]
    interval: Mapping[str, Summarizable]

    def on(self, event: str, listener: Any) -> Any: ...


class MonitorGroupLike(Protocol):
    monitors: Mapping[str, MonitorLike]

    def on(self, event: str, listener: Any) -> Any: ...


class Report:
    """A summary mapping plus a set of charts, usually one per test.

    ``update_from_monitor`` / ``update_from_monitor_group`` keep the report current from
    the ``update`` events of a monitor or monitor group. Summary keys have the form
    ``"<report> [<monitor> ]<stat> <field>"``; charts are named ``"[<monitor> ]<stat>"``.
    """

    def __init__(self, name: str, clock: Clock = time_from_start) -> None:
        self.name = name
        self.uid = uid()
        self.summary: dict[str, Any] = {}
        self.charts: dict[str, Chart] = {}
        self._clock = clock
        self._lock = threading.RLock()

    def get_chart(self, name: str) -> Chart:
        with self._lock:
            chart = self.charts.get(name)
            if chart is None:
                chart = Chart(name, clock=self._clock)
                self.charts[name] = chart
            return chart

    def update_from_monitor(self, monitor: MonitorLike) -> Report:
        monitor.on("update", lambda *_: self._update_from_monitor(monitor, ""))
        return self

    def update_from_monitor_group(self, monitor_group: MonitorGroupLike) -> Report:
        def _on_update(*_: Any) -> None:
            with self._lock:
                for monitor_name, monitor in list(monitor_group.monitors.items()):
                    self._update_from_monitor(monitor, monitor_name)

        monitor_group.on("update", _on_update)
        return self

    def _update_from_monitor(self, monitor: MonitorLike, monitor_name: str) -> None:
        prefix = f"{monitor_name} " if monitor_name else ""
        with self._lock:
            for stat_name, stat in list(monitor.stats.items()):
                for field_name, value in stat.summary().items():
                    self.summary[f"{self.name} {prefix}{stat_name} {field_name}"] = value
                interval = monitor.interval.get(stat_name)
                if interval is not None:
                    self.get_chart(prefix + stat_name).put(interval.summary())

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return {
                "name": self.name,
                "uid": self.uid,
                "summary": json_safe(dict(self.summary)),
                "charts": {name: chart.to_dict() for name, chart in self.charts.items()},
            }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], clock: Clock = time_from_start) -> Report:
        report = cls(str(data["name"]), clock=clock)
        report.summary.update(data.get("summary") or {})
        for name, chart_data in (data.get("charts") or {}).items():
            report.charts[str(name)] = Chart.from_dict(chart_data, clock=clock)
        return report
