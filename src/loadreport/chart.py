from __future__ import annotations

import threading
from typing import Any, Callable, Iterable, Mapping

from loadreport.events import EventEmitter
from loadreport.util import json_safe, time_from_start, uid

Clock = Callable[[], float]

# Row slots for columns that got no value in a given put() are left as None.
UNSET = None


class Chart:
    """A collection of lines over a shared time axis.

        columns: ["time", "line 1", "line 2", ...]
        rows:    [[t0, 0, 0, ...],            # baseline
                  [t1, line1[1], line2[1], ...],
                  ...]

    Row 0 is a baseline row holding a zero for every column ever discovered, so every
    line has a value at the start of the chart. Later rows can be shorter than
    ``columns`` when a line was discovered after the row was written.
    """

    def __init__(self, name: str, clock: Clock = time_from_start) -> None:
        self.name = name
        self.uid = uid()
        self.columns: list[str] = ["time"]
        self.rows: list[list[Any]] = [[clock()]]
        self._clock = clock
        self._lock = threading.RLock()

    def put(self, data: Mapping[str, Any]) -> None:
        """Append one row stamped with the current time; unseen keys become new lines."""
        with self._lock:
            row: list[Any] = [self._clock()]
            for column, value in data.items():
                try:
                    index = self.columns.index(column)
                except ValueError:
                    index = len(self.columns)
                    self.columns.append(column)
                    self.rows[0].append(0)
                if len(row) <= index:
                    row.extend([UNSET] * (index + 1 - len(row)))
                row[index] = value
            self.rows.append(row)

    def update_from_event_emitter(
        self,
        emitter: EventEmitter,
        fields: Iterable[str],
        event: str = "data",
    ) -> Chart:
        """Put ``fields`` of every ``event`` payload emitted by ``emitter``.

        Fields missing from a payload are skipped for that row.
        """
        selected = list(fields)

        def _on_event(payload: Mapping[str, Any]) -> None:
            row = {name: payload[name] for name in selected if payload.get(name) is not None}
            self.put(row)

        emitter.on(event, _on_event)
        return self

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return {
                "name": self.name,
                "uid": self.uid,
                "columns": list(self.columns),
                "rows": json_safe([list(row) for row in self.rows]),
            }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], clock: Clock = time_from_start) -> Chart:
        chart = cls(str(data["name"]), clock=clock)
        columns = [str(column) for column in data.get("columns") or ["time"]]
        rows = [list(row) for row in data.get("rows") or []]
        if rows:
            rows[0].extend([0] * (len(columns) - len(rows[0])))
            chart.columns = columns
            chart.rows = rows
        return chart
