"""
SRM Cmdlets - Logging Setup

All modules log through the 'srm_cmdlets' logger.

Levels:
- INFO (default): progress of state-changing commands
- DEBUG (--verbosity=debug): every SRM API call and task poll
- WARNING: recoverable issues (a VM view that could not be refreshed,
  an item dropped from a listing)
- ERROR: a failed operation or a failed item of a batch
- CRITICAL: reserved for conditions needing manual intervention

Console output goes to stderr; stdout is reserved for command output.
"""

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any

LOGGER_NAME = 'srm_cmdlets'

DEBUG_FORMAT = '[%(asctime)s] %(levelname)s [%(funcName)s:%(lineno)d]: %(message)s'
FILE_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class CleanFormatter(logging.Formatter):
    """
    Console formatter for end users.

    INFO lines are printed as-is; other levels get a short marker.
    """

    PREFIXES = {
        logging.DEBUG: "[DEBUG] ",
        logging.WARNING: "[!]  WARNING: ",
        logging.ERROR: "[X] ERROR: ",
        logging.CRITICAL: "[!!] CRITICAL: ",
    }

    def format(self, record):
        return self.PREFIXES.get(record.levelno, "") + record.getMessage()


def setup_logging(level='INFO', log_file=None, debug=False):
    """
    Configure the SRM Cmdlets logger.

    Safe to call more than once; earlier handlers are replaced.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that receives a detailed copy of the log
        debug: Force DEBUG level with source locations on the console

    Returns:
        logging.Logger

    Example:
        logger = setup_logging('INFO', log_file='srm.log')
    """
    if debug:
        level = 'DEBUG'
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    if debug:
        console.setFormatter(logging.Formatter(DEBUG_FORMAT, datefmt=DATE_FORMAT))
    else:
        console.setFormatter(CleanFormatter())
    logger.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_file}")

    return logger


def get_logger():
    """Get the SRM Cmdlets logger."""
    return logging.getLogger(LOGGER_NAME)


def log_api_call(logger, method_name: str, *args, **params):
    """
    Log an SRM API call (DEBUG level).

    Example:
        log_api_call(logger, 'ProtectionGroup.AssociateVms', 'vm-42')
        # API call: ProtectionGroup.AssociateVms(vm-42)
    """
    parts = [str(a) for a in args] + [f'{k}={v}' for k, v in params.items()]
    logger.debug(f"API call: {method_name}({', '.join(parts)})")


def log_api_response(logger, response: Any, truncate: int = 200):
    """Log an API response (DEBUG level), cut to `truncate` characters."""
    text = str(response)
    if len(text) > truncate:
        text = text[:truncate] + '...'
    logger.debug(f"API response: {text}")


@contextmanager
def log_duration(logger, operation_name: str):
    """
    Log start and duration of a block (DEBUG level).

    Example:
        with log_duration(logger, 'wait for Protect VM'):
            ...
        # Operation completed: wait for Protect VM (took 10.50s)
    """
    logger.debug(f"Starting operation: {operation_name}")
    started = time.monotonic()
    yield
    logger.debug(f"Operation completed: {operation_name} (took {time.monotonic() - started:.2f}s)")


def print_header(logger, title: str, char='=', length=60):
    """Log a title framed by separator lines (INFO level)."""
    logger.info(char * length)
    logger.info(title)
    logger.info(char * length)
