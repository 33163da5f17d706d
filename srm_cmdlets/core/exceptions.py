"""
SRM Cmdlets - Custom Exception Classes

This module defines all custom exceptions used in SRM Cmdlets.
Each exception provides a clear error message and, where it helps,
a suggested fix.
"""


class SrmError(Exception):
    """
    Base exception for all SRM Cmdlets errors.

    All custom exceptions inherit from this, making it easy to catch
    any SRM Cmdlets-specific error with a single except clause.
    """
    pass


class SessionNotFoundError(SrmError):
    """
    Raised when an explicit server address does not match any
    registered SRM session.
    """

    def __init__(self, address: str, known_addresses: list = None):
        """
        Args:
            address: Address that was requested
            known_addresses: Addresses of the sessions that are registered
        """
        self.address = address
        self.known_addresses = known_addresses or []

        message = f"SRM server '{address}' not found among the active sessions"
        if self.known_addresses:
            message += f"\n\nActive sessions:"
            for known in self.known_addresses:
                message += f"\n  - {known}"
        else:
            message += f"\n\nNo sessions are registered."

        super().__init__(message)


class NoActiveSessionError(SrmError):
    """
    Raised when no server is specified and no SRM session is registered.
    """

    def __init__(self):
        message = "No active SRM session"
        message += "\n\nFix: connect to an SRM server before running commands"
        super().__init__(message)


class RecoveryPlanStateError(SrmError):
    """
    Raised when a recovery plan is in a state that does not allow
    the requested action.

    Example:
    - Starting a plan that is in the Protecting state. That plan has
      to be driven from the peer SRM server.
    """

    def __init__(self, plan_name: str, current_state: str, action: str = 'start', fix: str = None):
        """
        Args:
            plan_name: Name of the recovery plan
            current_state: State reported by the plan (e.g., 'Protecting')
            action: Action that was refused
            fix: Suggested fix
        """
        self.plan_name = plan_name
        self.current_state = current_state
        self.action = action
        self.fix = fix

        message = f"Cannot {action} recovery plan '{plan_name}' in state: {current_state}"
        if fix:
            message += f"\n\nFix: {fix}"

        super().__init__(message)


class VmReferenceError(SrmError):
    """
    Raised when a VM reference key cannot be extracted from the input.

    Accepted inputs are a VM managed object, a VM view (property
    collector object content) or a protected VM record.
    """

    def __init__(self, target):
        self.target = target

        message = f"Cannot resolve a VM reference from {type(target).__name__}: {target!r}"
        message += "\n\nExpected one of:"
        message += "\n  - a VM managed object"
        message += "\n  - a VM view (object content with .obj)"
        message += "\n  - a protected VM record (with .vm)"

        super().__init__(message)


class TaskTimeoutError(SrmError):
    """
    Raised when a remote task did not complete before its deadline.
    """

    def __init__(self, operation_name: str, timeout: float):
        self.operation_name = operation_name
        self.timeout = timeout

        message = f"Operation '{operation_name}' did not complete within {timeout:g}s"
        message += "\n\nThe task may still be running on the SRM server."

        super().__init__(message)


class TaskCancelledError(SrmError):
    """
    Raised when waiting for a remote task was cancelled by the caller.
    """

    def __init__(self, operation_name: str):
        self.operation_name = operation_name

        message = f"Wait for operation '{operation_name}' was cancelled"
        message += "\n\nThe task may still be running on the SRM server."

        super().__init__(message)


class OperationFailedError(SrmError):
    """
    Raised when a remote SRM call fails.
    """

    def __init__(self, operation_name: str, reason: str):
        """
        Args:
            operation_name: Name of the operation (e.g., 'Protect VM')
            reason: Why it failed
        """
        self.operation_name = operation_name
        self.reason = reason

        message = f"Operation '{operation_name}' failed: {reason}"
        super().__init__(message)


class ValidationError(SrmError):
    """
    Raised when validation of input or configuration fails.
    """

    def __init__(self, validator_name: str, message: str, fix: str = None):
        """
        Args:
            validator_name: Name of the validator that failed
            message: What failed
            fix: Suggested fix
        """
        self.validator_name = validator_name
        self.fix = fix

        full_message = f"Validation failed: {validator_name}\n{message}"
        if fix:
            full_message += f"\n\nFix: {fix}"

        super().__init__(full_message)


class ConnectorError(SrmError):
    """
    Raised when the SRM binding connector cannot be loaded or called.

    Common causes:
    - No connector configured
    - Module or callable not importable
    - Login rejected by the SRM server
    """

    def __init__(self, message: str, fix: str = None):
        """
        Args:
            message: Error description
            fix: Suggested fix
        """
        self.fix = fix
        full_message = f"{message}"
        if fix:
            full_message += f"\n\nFix: {fix}"
        super().__init__(full_message)
