# src/config/logging_config.py

"""Per-session logging configuration for campuskart.

Each client launch writes a dedicated log file inside ``logs/`` named
after the launch timestamp (e.g. ``logs/session_20261019_153045.log``).
Every ``campuskart.*`` logger propagates to that file, so status
transitions, refresh-token bumps and failed message sends from one app
session can be read back in order.

The Textual UI owns the terminal while it runs, so the console handler
only carries warnings unless the CLI asks for more with ``--verbose``.
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


def setup_logging(console_level: int = logging.WARNING) -> Path:
    """Initialise the root ``campuskart`` logger for the current session.

    Args:
        console_level: Minimum level echoed to stderr.

    Returns:
        The :class:`~pathlib.Path` of this session's log file.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"session_{timestamp}.log"

    root_logger = logging.getLogger("campuskart")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, sign-out/sign-in) keep the first handlers
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised: %s", log_file)
    return log_file
