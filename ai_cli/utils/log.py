"""Log file setup for the CLI."""

import logging
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILENAME = "ai-cli.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def init_logger(log_dir: Path, level: str = "WARNING") -> None:
    """Send log records to a rotating file inside *log_dir*.

    Max of 3 backups, max size of 1MB. Terminal output is handled separately
    by the rich consoles so nothing is logged to the screen. Does nothing
    when the root logger already has handlers.
    """
    if logging.getLogger().handlers:
        return
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILENAME, maxBytes=1_000_000, backupCount=3, encoding="utf-8", delay=True
    )
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
    )


def log_exception(e: BaseException, context: str = "") -> None:
    """Write the full traceback of *e* to the log file."""
    tb = "".join(traceback.format_exception(type(e), e, e.__traceback__))
    msg = f"{context}\n{tb}" if context else tb
    logging.getLogger("ai_cli").error(msg)
