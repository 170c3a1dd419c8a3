"""Logging setup: brief console output plus a detailed rotating session file"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

SESSION_LOGS_KEPT = 5
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'


def _prune_session_logs(log_path: Path, keep: int) -> None:
    """Delete old session files so that, with the new one, `keep` remain."""
    sessions = sorted(log_path.parent.glob(f"{log_path.stem}_*.log"), reverse=True)
    for old_log in sessions[max(keep - 1, 0):]:
        try:
            old_log.unlink()
        except OSError:
            pass


def setup_logging(
    log_file: Optional[str] = "logs/prompt-search.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Optional[Path]:
    """
    Configure root logging.

    - Console: `console_level` (INFO by default), short format
    - File: `file_level` (DEBUG by default), one timestamped file per
      process start, rotated at 10MB, last 5 sessions kept

    Args:
        log_file: Base log path; None disables the file handler
        console_level: Console logging level
        file_level: File logging level

    Returns:
        Path of the session log file, or None when file logging is off
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    session_log = None
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _prune_session_logs(log_path, SESSION_LOGS_KEPT)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        session_log = log_path.parent / f"{log_path.stem}_{timestamp}.log"

        file_handler = RotatingFileHandler(
            session_log,
            mode='a',
            maxBytes=MAX_LOG_BYTES,
            backupCount=10,
            encoding='utf-8'
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        root_logger.addHandler(file_handler)

    # Keep per-request noise out of the console
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.info(
        f"Logging configured: console={logging.getLevelName(console_level)}, "
        f"file={session_log or 'disabled'}"
    )
    return session_log
