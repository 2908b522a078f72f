from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send loadreport logs to stderr; ``level`` is a standard level name such as DEBUG."""
    name = level.upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=name, format=LOG_FORMAT)
