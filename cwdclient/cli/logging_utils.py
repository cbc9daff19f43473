"""Loguru sink setup for the cwdclient CLI."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

# command name -> loguru sink id
_SINK_IDS: dict[str, int] = {}

DEBUG_FORMAT = "<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | <level>{message}</level>"


def get_log_dir() -> Path:
    return Path.home() / ".cwdclient" / "logs"


def ensure_rotating_log_file(name: str, level: str = "INFO") -> Path:
    """Attach a rotating file sink ``~/.cwdclient/logs/<name>.log`` once per process."""
    log_path = get_log_dir() / f"{name}.log"
    if name not in _SINK_IDS:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _SINK_IDS[name] = logger.add(
            str(log_path),
            level=level,
            rotation="10 MB",
            retention="14 days",
            enqueue=True,
            encoding="utf-8",
            backtrace=False,
            diagnose=False,
        )
    return log_path


def configure_cli_logging(*, debug: bool, logs: bool, level: str = "INFO", to_file: bool = True) -> None:
    """
    Route cwdclient logs for one CLI invocation.

    ``debug`` replaces the stderr sink with a DEBUG one; ``logs`` turns the
    package logger on at the configured level; otherwise the package stays quiet.
    """
    if not (debug or logs):
        logger.disable("cwdclient")
        return
    if debug:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG", format=DEBUG_FORMAT)
    logger.enable("cwdclient")
    if to_file:
        ensure_rotating_log_file("cli", level="DEBUG" if debug else level)
