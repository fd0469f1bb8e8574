"""Logging for the sandbox with session-separated log files.

Provides both file and console logging. The console handler is bound to the
process stdout at setup time, so log lines never end up in a run's captured
output even while ``sys.stdout`` is redirected.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from config import LOG_FILE


class ColoredFormatter(logging.Formatter):
    """Formatter with color coded level names for terminal output."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def format(self, record):
        """Format log record with colors for terminal."""
        # Color a copy so the file handler keeps the plain level name
        record = logging.makeLogRecord(record.__dict__)
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{self.BOLD}{levelname}{self.RESET}"
        return super().format(record)


def setup_logger(name: str = "sandbox", log_file: str = LOG_FILE) -> logging.Logger:
    """Set up logger with file and console handlers.

    Appends a session separator to the log file and configures detailed
    file output plus a shorter colored console output.

    Args:
        name: Logger name (default: "sandbox").
        log_file: Path to log file (default: config.LOG_FILE).

    Returns:
        logging.Logger: Configured logger instance.

    Example:
        >>> logger = setup_logger()
        >>> logger.info("Runtime ready")
        2024-01-15 10:30:45 - INFO - Runtime ready
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    session_time = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    session_separator = f"\n{'=' * 80}\nSANDBOX STARTED: {session_time}\n{'=' * 80}\n"
    with open(log_path, "a") as f:
        f.write(session_separator)

    # File handler - detailed logs
    file_handler = logging.FileHandler(log_path, mode="a")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    # Console handler - bound to the real stdout, not whatever sys.stdout is later
    console_handler = logging.StreamHandler(sys.__stdout__ or sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(
        ColoredFormatter(
            "%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


# Global logger instance
logger = setup_logger()


def get_logger(name: str = None) -> logging.Logger:
    """Get logger instance.

    Args:
        name: Optional component name (returns main logger if None).

    Returns:
        logging.Logger: Logger instance.
    """
    if name:
        return logging.getLogger(f"sandbox.{name}")
    return logger
