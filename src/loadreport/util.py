from __future__ import annotations

import itertools
import math
import time
from typing import Any

PROCESS_START = time.time()

_UID_COUNTER = itertools.count(1)


def uid() -> int:
    """Return an id unique within this process."""
    return next(_UID_COUNTER)


def time_from_start(start: float = PROCESS_START, now: float | None = None) -> float:
    """Minutes elapsed since ``start``, truncated to hundredths of a minute."""
    current = time.time() if now is None else now
    elapsed_ms = int(round((current - start) * 1000))
    return (elapsed_ms // 600) / 100


def json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    if hasattr(value, "item"):
        try:
            value = value.item()
        except Exception:
            pass
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (int, str, bool)) or value is None:
        return value
    return str(value)
