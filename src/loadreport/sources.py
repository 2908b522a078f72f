from __future__ import annotations

from typing import Any

from loadreport.events import EventEmitter


class Accumulator:
    """Running count/min/max/avg over the values put into it."""

    def __init__(self) -> None:
        self.count = 0
        self.total = 0.0
        self.min: float | None = None
        self.max: float | None = None

    def put(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.min = value if self.min is None else min(self.min, value)
        self.max = value if self.max is None else max(self.max, value)

    def summary(self) -> dict[str, Any]:
        if not self.count:
            return {"count": 0}
        return {
            "count": self.count,
            "min": self.min,
            "max": self.max,
            "avg": round(self.total / self.count, 3),
        }


class Monitor(EventEmitter):
    """Named statistics over the whole run (``stats``) and over the current period
    (``interval``). ``update()`` publishes both, then starts a new period."""

    def __init__(self, *stat_names: str) -> None:
        super().__init__()
        self.stats: dict[str, Accumulator] = {}
        self.interval: dict[str, Accumulator] = {}
        for stat_name in stat_names:
            self._ensure(stat_name)

    def _ensure(self, stat_name: str) -> None:
        if stat_name not in self.stats:
            self.stats[stat_name] = Accumulator()
            self.interval[stat_name] = Accumulator()

    def record(self, stat_name: str, value: float) -> None:
        self._ensure(stat_name)
        self.stats[stat_name].put(value)
        self.interval[stat_name].put(value)

    def roll_interval(self) -> None:
        self.interval = {stat_name: Accumulator() for stat_name in self.stats}

    def update(self) -> None:
        self.emit("update", self)
        self.roll_interval()


class MonitorGroup(EventEmitter):
    def __init__(self) -> None:
        super().__init__()
        self.monitors: dict[str, Monitor] = {}

    def get_monitor(self, name: str) -> Monitor:
        if name not in self.monitors:
            self.monitors[name] = Monitor()
        return self.monitors[name]

    def update(self) -> None:
        self.emit("update", self)
        for monitor in self.monitors.values():
            monitor.roll_interval()
