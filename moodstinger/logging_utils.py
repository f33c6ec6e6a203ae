"""
Logging setup for moodstinger.

Library modules log through ``logging.getLogger("moodstinger.<module>")``.
The CLI calls ``configure_logging`` once; unexpected failures are appended
with their traceback to a crash log by ``log_exception``.
"""

from datetime import datetime
import logging
import os
from pathlib import Path
import sys
import traceback
from typing import Optional

_LOGGER = logging.getLogger("moodstinger.logging")
_HOME_ENV = "MOODSTINGER_HOME"
_LOG_DIR_ENV = "MOODSTINGER_LOG_DIR"
_DEBUG_ENV = "MOODSTINGER_DEBUG"
_LOG_FILE = "moodstinger.log"
_ROOT_LOGGER = "moodstinger"


def get_home_dir() -> Path:
    """Directory holding the preset store and logs."""
    configured = os.environ.get(_HOME_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".moodstinger"


def get_log_dir() -> Path:
    configured = os.environ.get(_LOG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return get_home_dir() / "logs"


def get_log_path() -> Path:
    return get_log_dir() / _LOG_FILE


def debug_enabled() -> bool:
    """True when MOODSTINGER_DEBUG is set to a non-empty, non-zero value."""
    return os.environ.get(_DEBUG_ENV, "") not in ("", "0")


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Send moodstinger log records to stderr.

    Installs the handler only once; later calls just adjust the level.

    Args:
        verbose: Log at DEBUG instead of INFO.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose or debug_enabled() else logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger


def log_exception(context: str, exc: BaseException) -> Optional[Path]:
    """
    Append a timestamped traceback to the crash log.

    Never raises; returns the log path, or None if it could not be written.
    """
    try:
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        path = get_log_path()
        timestamp = datetime.now().isoformat()
        with path.open("a", encoding="utf-8") as handle:
            handle.write(f"[{timestamp}] {context} failed: {type(exc).__name__}: {exc}\n")
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=handle)
            handle.write("\n")
        return path
    except Exception as log_exc:
        _LOGGER.warning("Failed to write log file: %s", log_exc, exc_info=True)
        return None
