"""
Logging Configuration Module.

Root logger setup for long-running processes (the API server): a size-capped
rotating log file plus optional console output.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_DIR = "logs"
LOG_FILENAME = "timeline.log"
MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per-request access lines are only useful while debugging
NOISY_LOGGERS = ("uvicorn.access",)


class SafeRotatingFileHandler(RotatingFileHandler):
    """
    Rotating file handler that survives a locked log file on Windows.

    A failed rollover leaves the current file in use; rotation is retried on
    the next record that crosses the size limit.
    """

    def doRollover(self) -> None:
        try:
            super().doRollover()
        except PermissionError:
            if sys.platform != "win32":
                raise


def _file_handler(
    log_dir: str, formatter: logging.Formatter
) -> Optional[logging.Handler]:
    try:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, LOG_FILENAME)
    except OSError as e:
        print(f"Cannot create log directory {log_dir}: {e}. Using current directory.")
        log_path = LOG_FILENAME

    try:
        handler = SafeRotatingFileHandler(
            log_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
        )
    except OSError as e:
        print(f"CRITICAL: File logging disabled: {e}")
        return None
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    debug_mode: bool = False,
    log_to_console: bool = True,
    log_dir: Optional[str] = None,
) -> None:
    """
    Configures the root logger for the timeline server.

    Replaces any handlers already installed, so calling it twice does not
    duplicate output.

    Args:
        debug_mode (bool): DEBUG level when True, INFO otherwise. Also keeps
            uvicorn's per-request access log at INFO.
        log_to_console (bool): Adds a stderr StreamHandler when True.
        log_dir (str): Directory of the rotating log file. Defaults to
            $TIMELINE_LOG_DIR, then "logs".
    """
    log_dir = log_dir or os.getenv("TIMELINE_LOG_DIR") or LOG_DIR
    level = logging.DEBUG if debug_mode else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    handlers = [_file_handler(log_dir, formatter)]
    if log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    for handler in handlers:
        if handler is not None:
            handler.setLevel(level)
            root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        access_level = logging.INFO if debug_mode else logging.WARNING
        logging.getLogger(name).setLevel(access_level)

    logging.info(f"Hangar Timeline session started at {datetime.now().isoformat()}")
    logging.info(f"Log level {logging.getLevelName(level)}, directory {log_dir}")


def shutdown_logging() -> None:
    """
    Flushes and closes all handlers, releasing the log file.
    """
    logging.shutdown()
