from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def init_logging(level: str = "WARNING", log_file: str | Path | None = None) -> Path | None:
    """Configure the root logger for the console application.

    Messages go to stderr; when ``log_file`` is given they are also written to
    that file. Calling this twice does not add duplicate handlers.
    """

    root = logging.getLogger()
    log_path = Path(log_file).expanduser().resolve() if log_file else None
    handlers: list[logging.Handler] = []

    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        handlers.append(logging.StreamHandler())
    if log_path is not None and not any(
        isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", "") == str(log_path)
        for h in root.handlers
    ):
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level.upper())
    return log_path
