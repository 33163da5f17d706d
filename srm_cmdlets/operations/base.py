"""
SRM Cmdlets - Base Operation

This module provides the base class for all operations that change state
on the SRM server, and the helper that waits for SRM tasks.

Key concept: SRM mutation calls (ProtectVms, UnprotectVms) return a task
handle. We poll task.IsComplete() at a fixed interval until it reports
completion, then fetch task.GetResult(). The wait can be bounded by a
deadline and interrupted through a cancellation event.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from srm_cmdlets.core.config import SrmConfig
from srm_cmdlets.core.exceptions import (
    OperationFailedError,
    TaskCancelledError,
    TaskTimeoutError,
)
from srm_cmdlets.utils.logger import (
    get_logger,
    log_api_call,
    log_api_response,
    log_duration,
)


@dataclass
class OperationResult:
    """
    Result from an operation.

    Attributes:
        operation_name: Name of the operation (for display)
        success: True if the operation ran, False if it was skipped
        message: Human-readable message about the result
        result: Task result or other value returned by SRM
        error: Optional error details
    """
    operation_name: str
    success: bool
    message: str
    result: Any = None
    error: Optional[str] = None

    def __str__(self):
        """String representation."""
        status = "[OK]" if self.success else "[X]"
        return f"{status} {self.operation_name}: {self.message}"


def wait_for_task(task, operation_name: str = 'Task', poll_interval: float = 1.0,
                  timeout: Optional[float] = None,
                  cancel_event: Optional[threading.Event] = None,
                  logger=None):
    """
    Wait for an SRM task to complete and return its result.

    Args:
        task: Task handle exposing IsComplete() and GetResult()
        operation_name: Name used in log messages and errors
        poll_interval: Seconds between IsComplete() checks
        timeout: Maximum seconds to wait, None to wait without a deadline
        cancel_event: Event that stops the wait when set
        logger: Logger for debug output

    Returns:
        Result of task.GetResult()

    Raises:
        TaskTimeoutError: If the deadline passes first
        TaskCancelledError: If cancel_event is set first
    """
    logger = logger or get_logger()
    deadline = time.monotonic() + timeout if timeout is not None else None

    with log_duration(logger, f"wait for {operation_name}"):
        while True:
            if cancel_event is not None and cancel_event.is_set():
                logger.debug(f"Wait for {operation_name} cancelled")
                raise TaskCancelledError(operation_name)

            log_api_call(logger, 'Task.IsComplete')
            if task.IsComplete():
                break

            if deadline is not None and time.monotonic() >= deadline:
                logger.error(f"Timeout waiting for {operation_name} (>{timeout:g}s)")
                raise TaskTimeoutError(operation_name, timeout)

            logger.debug(f"{operation_name} not complete yet, checking again in {poll_interval:g}s")

            # A set cancel_event ends the pause early
            if cancel_event is not None:
                cancel_event.wait(poll_interval)
            else:
                time.sleep(poll_interval)

        log_api_call(logger, 'Task.GetResult')
        result = task.GetResult()
        log_api_response(logger, result)

    return result


class BaseOperation(ABC):
    """
    Base class for all operations.

    Every operation must:
    1. Inherit from this class
    2. Implement the execute() method
    3. Implement the name property

    Remote failures are raised as OperationFailedError; they are never
    retried.

    Example usage:
        operation = ProtectVMOperation(protection_group, config, logger)
        result = operation.execute(vm=vm)
        print(result)
    """

    def __init__(self, config: SrmConfig = None, logger=None,
                 cancel_event: Optional[threading.Event] = None):
        """
        Initialize operation.

        Args:
            config: Optional configuration (poll interval, timeout, confirmation)
            logger: Optional logger for debug output
            cancel_event: Optional event that cancels task waits
        """
        self.config = config or SrmConfig()
        self.logger = logger or get_logger()
        self.cancel_event = cancel_event
        self.result: Optional[OperationResult] = None

    @abstractmethod
    def execute(self, **kwargs) -> OperationResult:
        """
        Execute the operation.

        Returns:
            OperationResult
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Human-readable name of this operation.

        Used for display and logging.
        """
        pass

    def _log_debug(self, message: str):
        self.logger.debug(message)

    def _log_info(self, message: str):
        self.logger.info(message)

    def _log_error(self, message: str):
        self.logger.error(message)

    def _call(self, method_name: str, method, *args):
        """
        Make one remote call, turning failures into OperationFailedError.

        Args:
            method_name: Name for logging (e.g. 'ProtectionGroup.ProtectVms')
            method: Bound method of the remote object
            *args: Arguments for the call
        """
        log_api_call(self.logger, method_name, *args)
        try:
            return method(*args)
        except Exception as e:
            self._log_error(f"{method_name} failed: {e}")
            raise OperationFailedError(self.name, f"{method_name}: {e}") from e

    def _wait(self, task):
        """Wait for a task using the configured interval, deadline and cancel event."""
        return wait_for_task(
            task,
            operation_name=self.name,
            poll_interval=self.config.task_poll_interval,
            timeout=self.config.task_timeout,
            cancel_event=self.cancel_event,
            logger=self.logger
        )
