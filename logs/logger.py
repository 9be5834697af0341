"""
This module sets up logging for the application. Messages go to the console,
and error messages are additionally appended to a log file.
"""
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_dir: str = "logs") -> None:
    """
    Configures the root logger with a console handler and an error log file.

    Args:
        level (str): Name of the console log level (e.g. "INFO", "DEBUG").
        log_dir (str): Directory where 'errors.log' is written. Created if missing.
    """
    os.makedirs(log_dir, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Only ERROR and above are persisted; 'a' appends to earlier runs.
    file_handler = logging.FileHandler(os.path.join(log_dir, "errors.log"), mode="a", encoding="utf-8")
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.ERROR)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)


def log_error(message: str) -> None:
    """
    Logs an error message to the configured error log file.

    Args:
        message (str): The error message string to be logged.
    """
    logging.error(message)
