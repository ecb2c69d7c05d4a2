"""
Logging setup for the agent process.

- Console: everything at the configured level
- <log_dir>/activity.log: everything at the configured level
- <log_dir>/swap.log: swap audit trail only (trailswap.swaps logger)
"""

import logging
import sys
from pathlib import Path

from trailswap.constants import SWAP_LOGGER_NAME

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SWAP_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(log_dir: str = "logs", level: str = "INFO") -> Path:
    """
    Install root and swap-audit handlers. Safe to call more than once.

    Returns:
        The resolved log directory
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    activity = logging.FileHandler(log_path / "activity.log", encoding="utf-8")
    activity.setFormatter(formatter)
    root.addHandler(activity)

    swap_logger = logging.getLogger(SWAP_LOGGER_NAME)
    for handler in list(swap_logger.handlers):
        swap_logger.removeHandler(handler)
        handler.close()
    swap_file = logging.FileHandler(log_path / "swap.log", encoding="utf-8")
    swap_file.setFormatter(logging.Formatter(SWAP_LOG_FORMAT))
    swap_logger.addHandler(swap_file)
    swap_logger.setLevel(logging.INFO)
    # Audit lines also reach console/activity through the root logger

    # Quiet chatty HTTP client loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return log_path
