"""loguru setup for the featured manager and helpers behind the Log menu."""

from __future__ import annotations

import os
from pathlib import Path
import subprocess

from loguru import logger

from infrastructure.settings import APP_DATA_DIR

LOG_FILE_PREFIX = "featured_"
DEFAULT_LOG_LEVEL = "INFO"


def get_log_directory() -> Path:
    return APP_DATA_DIR / "logs"


def init_logging(log_dir: str | Path | None = None, level: str = DEFAULT_LOG_LEVEL) -> Path:
    """Route all loguru output to a daily, size-rotated file in `log_dir`.

    Returns the directory actually used.
    """
    target = Path(log_dir) if log_dir else get_log_directory()
    target.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(target / (LOG_FILE_PREFIX + "{time:YYYYMMDD}.log")),
        level=level.upper(),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )
    logger.info("Logging to {} at level {}", target, level.upper())
    return target


def find_latest_log_file(log_dir: str | Path | None = None) -> Path | None:
    """Most recently modified log file, or None when there is none."""
    target = Path(log_dir) if log_dir else get_log_directory()
    try:
        candidates = [p for p in target.glob(f"{LOG_FILE_PREFIX}*.log") if p.is_file()]
        return max(candidates, key=lambda p: p.stat().st_mtime, default=None)
    except OSError as ex:
        logger.warning("Cannot scan log directory {}: {}", target, ex)
        return None


def open_in_default_app(path: str | Path) -> bool:
    """Hand `path` to the desktop's default handler; False if that fails."""
    try:
        if os.name == "nt":
            os.startfile(str(path))  # type: ignore[attr-defined]  # pylint: disable=no-member
        else:
            opener = "open" if os.uname().sysname == "Darwin" else "xdg-open"
            subprocess.run([opener, str(path)], check=True)
    except (OSError, subprocess.CalledProcessError) as ex:
        logger.warning("Could not open {}: {}", path, ex)
        return False
    return True


def open_latest_log() -> bool:
    log_file = find_latest_log_file()
    return open_in_default_app(log_file) if log_file else False


def open_log_directory() -> bool:
    return open_in_default_app(get_log_directory())
