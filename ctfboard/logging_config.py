"""Centralized logging configuration for the CTF leaderboard."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Libraries that log every pooled connection; four per poll cycle adds up
HTTP_LOGGERS = ('urllib3', 'requests')


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    quiet_http: bool = True,
) -> logging.Logger:
    """
    Configure the ``ctfboard`` logger for a long-running poll.

    Poll cycles run for hours, so the file handler gets the detailed
    format with thread names and source locations (cycles overlap when
    CTFd is slow) while the console stays short. With ``quiet_http`` the
    HTTP stack only reports warnings, so a debug-level poll isn't buried
    under connection-pool chatter.

    Args:
        log_dir: Directory for log files (default: ./logs)
        level: Logging level for ctfboard (default: INFO)
        log_to_file: Whether to log to file (default: True)
        log_to_console: Whether to log to console (default: True)
        quiet_http: Raise urllib3/requests to WARNING (default: True)

    Returns:
        Configured logger instance

    Example:
        from ctfboard.logging_config import setup_logging
        logger = setup_logging(log_to_file=False)
        logger.info("Polling scoreboard")
    """
    logger = logging.getLogger('ctfboard')
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers = []

    for name in HTTP_LOGGERS:
        http_logger = logging.getLogger(name)
        if quiet_http:
            http_logger.setLevel(max(level, logging.WARNING))
        else:
            http_logger.setLevel(logging.NOTSET)

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s %(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    simple_formatter = logging.Formatter('%(asctime)s %(levelname)s: %(message)s', datefmt='%H:%M:%S')

    if log_to_file:
        if log_dir is None:
            log_dir = Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f'ctfboard_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(simple_formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str = 'ctfboard') -> logging.Logger:
    """Get a logger under the ``ctfboard`` namespace."""
    return logging.getLogger(name)
