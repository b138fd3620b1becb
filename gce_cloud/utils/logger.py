"""
GCE Cloud - Logging Setup

All library output goes through the 'gce_cloud' logger. The library never
configures logging on import; applications (or the gce-cloud CLI) call
setup_logging() once.

Levels used:
- INFO: what the example program and CLI report to users
- DEBUG: every API call, operation poll and wait time
- WARNING/ERROR: shown with a prefix in the console
"""

import logging
import sys
import time
from pathlib import Path
from typing import Any

LOGGER_NAME = 'gce_cloud'

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# [2025-11-02 10:30:45] DEBUG [get:92]: API call: addresses.get(...)
DEBUG_FORMAT = '[%(asctime)s] %(levelname)s [%(funcName)s:%(lineno)d]: %(message)s'

# Files always get the logger name and location
FILE_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s'


class CleanFormatter(logging.Formatter):
    """
    Console formatter for normal (non-debug) runs.

    INFO records are printed bare; other levels get a short prefix.
    """

    PREFIXES = {
        logging.DEBUG: '[DEBUG] ',
        logging.WARNING: '[!]  WARNING: ',
        logging.ERROR: '[X] ERROR: ',
        logging.CRITICAL: '[!!] CRITICAL: ',
    }

    def format(self, record):
        prefix = self.PREFIXES.get(record.levelno, '')
        return f"{prefix}{record.getMessage()}"


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(level='INFO', log_file=None, debug=False):
    """
    Configure the 'gce_cloud' logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that receives the same records in a
            detailed format; parent directories are created
        debug: Force DEBUG level and the detailed console format

    Returns:
        logging.Logger: The configured logger

    Example:
        logger = setup_logging('INFO', log_file='/tmp/gce-cloud.log')
        logger.info("Listing firewalls")
    """
    if debug:
        level = 'DEBUG'
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    if debug:
        console_format = logging.Formatter(DEBUG_FORMAT, datefmt=DATE_FORMAT)
    else:
        console_format = CleanFormatter()
    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), numeric_level, console_format))

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_format = logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT)
        logger.addHandler(_handler(logging.FileHandler(log_file), numeric_level, file_format))
        logger.debug(f"Logging to file: {log_file}")

    return logger


def get_logger():
    """The 'gce_cloud' logger (configured or not)."""
    return logging.getLogger(LOGGER_NAME)


def log_api_call(logger, method_name: str, **params):
    """
    Log a Compute API request at DEBUG level. Request bodies are omitted.

    Example:
        log_api_call(logger, 'instances.get', project='p', zone='us-central1-b', instance='vm')
        # API call: instances.get(project=p, zone=us-central1-b, instance=vm)
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    param_str = ', '.join(f'{k}={v}' for k, v in params.items() if k != 'body')
    logger.debug(f"API call: {method_name}({param_str})")


def log_api_response(logger, response: Any, truncate: int = 200):
    """Log an API response at DEBUG level, cut to `truncate` characters."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    text = str(response)
    if len(text) > truncate:
        text = text[:truncate] + '...'
    logger.debug(f"API response: {text}")


def log_operation_start(logger, operation_name: str) -> float:
    """
    Note that a wait on a Compute operation began.

    Returns:
        float: Monotonic start time for log_operation_end()
    """
    logger.debug(f"Waiting on operation: {operation_name}")
    return time.monotonic()


def log_operation_end(logger, operation_name: str, start_time: float):
    """
    Log how long an operation wait took.

    Example:
        start = log_operation_start(logger, 'operation-123')
        ...
        log_operation_end(logger, 'operation-123', start)
        # Operation completed: operation-123 (took 10.50s)
    """
    duration = time.monotonic() - start_time
    logger.debug(f"Operation completed: {operation_name} (took {duration:.2f}s)")


def print_header(logger, title: str, char='=', length=60):
    """Log `title` between two rules at INFO level."""
    rule = char * length
    logger.info(rule)
    logger.info(title)
    logger.info(rule)
