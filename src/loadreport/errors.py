from __future__ import annotations


class LoadReportError(Exception):
    """Base class for errors raised by loadreport."""


class LogFileClosedError(LoadReportError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Log file is closed: {path}")
        self.path = path
