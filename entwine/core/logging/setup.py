# entwine/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers
from pathlib import Path

from .formatters import DevFormatter, JsonFormatter

__all__ = ["NO_PROPAGATE", "configureLogging"]



# Disable propagation from chatty libraries
NO_PROPAGATE = [
    "uvicorn.access", "httpcore.connection", "httpcore.http11",
]



def configureLogging(*, level: str | None = None, logFile: str | Path | None = None) -> None:
    """
    Initiate the global logging configuration.

      - Console pretty logs at `logging.level` (default INFO)
      - Optional JSON file log with rotation at `logging.file`

    Explicit arguments win over settings.
    """
    from entwine.app.settings import settings

    levelName = str(level or settings("logging.level", "INFO")).upper()
    rootLevel = getattr(logging, levelName, logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    for name in NO_PROPAGATE:
        logging.getLogger(name).propagate = False

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(DevFormatter())
    root.addHandler(consoleHandler)

    filePath = logFile if logFile is not None else settings("logging.file", None)
    if filePath:
        Path(filePath).parent.mkdir(parents=True, exist_ok=True)
        fileHandler = logging.handlers.RotatingFileHandler(
            filePath,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8"
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        root.addHandler(fileHandler)

    # Per-logger tweaks (reduce noise)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
