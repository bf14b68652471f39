from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

LOGGER_NAME = "coinspot"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(log_dir: Path | None = None, *, propagate: bool = False) -> logging.Logger:
    """Attach console and optional rotating file handlers to the ``coinspot`` logger.

    The level comes from ``COINSPOT_LOG_LEVEL`` (default INFO). Only handlers
    previously installed here are replaced; the root logger is not touched.
    With ``propagate`` set, records also reach the application's own handlers.
    """
    level_name = os.environ.get("COINSPOT_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.propagate = propagate

    for handler in package_logger.handlers[:]:
        if getattr(handler, "_coinspot_owned", False):
            package_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        # 10MB per file, 5 backups
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_dir / "coinspot.log", maxBytes=10 * 1024 * 1024, backupCount=5
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler._coinspot_owned = True
        package_logger.addHandler(handler)

    return package_logger
