from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

LOG_LEVEL_ENV = "JBP_LOG_LEVEL"


def resolve_level(debug: bool = False) -> int:
    """--debug wins; otherwise JBP_LOG_LEVEL (name or number); default INFO."""

    if debug:
        return logging.DEBUG
    name = (os.environ.get(LOG_LEVEL_ENV) or "").strip().upper()
    if not name:
        return logging.INFO
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown {LOG_LEVEL_ENV} value: {name}")
    return level


def configure_logging(
    log_path: str,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure root logging once per process.

    Records go to log_path (normally .java-buildpack.log inside the
    application) and, optionally, to stderr so that stdout stays free for
    detect/release output. Returns the path in use.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    if getattr(logger, "_tomcat_buildpack_configured", False):
        return getattr(logger, "_tomcat_buildpack_log_path", log_path)

    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path)
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_tomcat_buildpack_configured", True)
    setattr(logger, "_tomcat_buildpack_log_path", log_path)

    logging.getLogger(__name__).debug("Logging initialized (path=%s, level=%s)", log_path, logging.getLevelName(level))
    return log_path


@contextmanager
def timed(message: str, log: Optional[logging.Logger] = None) -> Iterator[None]:
    """Log message before the block and its duration after it completes."""

    log = log or logging.getLogger(__name__)
    log.info("%s", message)
    started = time.monotonic()
    yield
    log.info("%s (%.1fs)", message, time.monotonic() - started)
