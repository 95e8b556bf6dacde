"""Loguru sinks for the polaroid maker (rotating file, optional console)."""

from __future__ import annotations

from pathlib import Path
import sys

from loguru import logger

LOG_FILE_PREFIX = "polaroid_"
CONSOLE_FORMAT = "{time:HH:mm:ss} | {level: <8} | {message}"


def get_log_directory() -> str:
    """Per-user directory holding the rotating log files."""
    return str(Path.home() / ".polaroid-maker" / "logs")


def init_logging(log_dir: str | None = None, console_level: str | None = None) -> None:
    """Replace loguru's default sink with a daily rotating file under `log_dir`.

    With `console_level` set, records at that level and above are also echoed
    to stderr; the batch command line uses this for progress output.
    """
    target = Path(log_dir or get_log_directory())
    target.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(target / f"{LOG_FILE_PREFIX}{{time:YYYYMMDD}}.log"),
        level="DEBUG",
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )
    if console_level:
        logger.add(sys.stderr, level=console_level, format=CONSOLE_FORMAT)
    logger.debug("Logging to {}", target)


def find_latest_log_file(log_dir: str | None = None) -> Path | None:
    """Most recently modified log file in `log_dir`, or None."""
    target = Path(log_dir or get_log_directory())
    try:
        candidates = [p for p in target.glob(f"{LOG_FILE_PREFIX}*.log") if p.is_file()]
        return max(candidates, key=lambda p: p.stat().st_mtime) if candidates else None
    except OSError:
        return None
