from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional


def configure_logging(
    level: int = logging.INFO,
    log_path: Optional[str] = None,
    also_console: bool = True,
) -> Optional[str]:
    """Configure root logging for a tool run.

    Console output is always on by default. A log file is only added when
    log_path is given; failing to open it is an error, not a silent fallback,
    because the caller asked for that file explicitly.

    Returns the log file path in use, if any.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_exe_to_msi_configured", False):
        return getattr(logger, "_exe_to_msi_log_path", log_path)

    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    if log_path:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(fmt)
        handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_exe_to_msi_configured", True)
    setattr(logger, "_exe_to_msi_log_path", log_path)

    logging.getLogger(__name__).debug("Logging initialized (level=%s, file=%s)", logging.getLevelName(level), log_path)
    return log_path
