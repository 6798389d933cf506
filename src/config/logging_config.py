# src/config/logging_config.py

"""Per-run timestamped logging configuration for catalog_client.

Every launch writes to its own file inside ``logs/``
(e.g. ``logs/run_20260214_153045.log``) and every ``catalog_client.*``
logger propagates into it.  While the Textual TUI owns the terminal the
stderr handler is left off, since console output would tear the screen.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "catalog_client"

# Old run logs kept on disk; older ones are pruned at startup
MAX_LOG_FILES = 20


def _prune_old_logs(logs_dir: Path, keep: int) -> int:
    """Delete the oldest ``run_*.log`` files beyond *keep*.

    Returns the number of files removed.
    """
    runs = sorted(logs_dir.glob("run_*.log"))
    stale = runs[:-keep] if keep > 0 else runs
    for path in stale:
        path.unlink(missing_ok=True)
    return len(stale)


def setup_logging(
    console: bool = True,
    logs_dir: Path | None = None,
) -> Path:
    """Initialise the ``catalog_client`` logger for the current run.

    Args:
        console: Attach a WARNING+ stderr handler.  Pass ``False`` when
            launching the TUI.
        logs_dir: Override for :attr:`Settings.LOGS_DIR`.

    Returns:
        The path of the log file used for this run.
    """
    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, CLI after TUI) reuse the live handler
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)

    pruned = _prune_old_logs(target_dir, MAX_LOG_FILES - 1)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = target_dir / f"run_{timestamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )
    root_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(
            logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
        )
        root_logger.addHandler(console_handler)

    root_logger.info(
        "Logging initialised (log file: %s, pruned %d old runs)",
        log_file,
        pruned,
    )
    return log_file
