from __future__ import annotations

import logging
from pathlib import Path
from typing import IO

from loadreport.errors import LogFileClosedError

LOGGER = logging.getLogger(__name__)


class LogFile:
    """Appendable, clearable text file used as the dashboard snapshot sink."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle: IO[str] | None = self.path.open("a", encoding="utf-8")
        LOGGER.debug("Opened log file %s", self.path)

    @property
    def closed(self) -> bool:
        return self._handle is None

    def _require_handle(self) -> IO[str]:
        if self._handle is None:
            raise LogFileClosedError(str(self.path))
        return self._handle

    def put(self, text: str) -> None:
        handle = self._require_handle()
        handle.write(text)
        handle.flush()

    def clear(self, text: str = "") -> None:
        """Replace the file contents with ``text``."""
        handle = self._require_handle()
        handle.seek(0)
        handle.truncate()
        handle.write(text)
        handle.flush()

    def close(self) -> None:
        if self._handle is None:
            return
        self._handle.close()
        self._handle = None
        LOGGER.debug("Closed log file %s", self.path)
