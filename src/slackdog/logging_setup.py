# src/slackdog/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Minimum console level per third-party logger prefix; anything unlisted needs ERROR.
_LIBRARY_CONSOLE_LEVELS: dict[str, int] = {
    "slack_bolt": logging.WARNING,
    "slack_sdk": logging.WARNING,
    "redis": logging.WARNING,
    "aiohttp": logging.WARNING,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console filter for a long-running bot.

    Our own loggers always pass. Socket Mode reconnects and Web API retries are
    reported by the Slack libraries at INFO, so those only reach the console as
    WARNING+. Captured `py.warnings` and unknown libraries need ERROR+.
    The file handler is unfiltered.
    """

    def __init__(self, app_logger: str = "slackdog") -> None:
        super().__init__()
        self._app_logger = app_logger

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == self._app_logger or name.startswith(self._app_logger + "."):
            return True

        root = name.split(".", 1)[0]
        return record.levelno >= _LIBRARY_CONSOLE_LEVELS.get(root, logging.ERROR)


def setup_logging(
    *,
    log_dir: str | Path = ".local/slackdog",
    app_name: str = "slackdog",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> Path:
    """
    Configure root logging: a filtered stderr handler plus a rotating
    `<log_dir>/<app_name>.log` with everything. Call once, before the first log
    record. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{app_name}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = RotatingFileHandler(
        str(log_file), maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
