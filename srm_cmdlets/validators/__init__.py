"""
SRM Cmdlets - Validators Module

This module provides validators for pre-flight checks before an operation
changes anything on the SRM server.

Usage:
    from srm_cmdlets.validators import ValidationRunner, RecoveryPlanStateValidator

    runner = ValidationRunner()
    runner.add(RecoveryPlanStateValidator(plan))

    results = runner.run_all(logger)
    if not results.all_passed():
        results.log_failures(logger)
"""

from srm_cmdlets.validators.base import (
    BaseValidator,
    ValidationResult,
    ValidationResults,
    ValidationRunner
)
from srm_cmdlets.validators.plan_state import RecoveryPlanStateValidator

__all__ = [
    # Base classes
    'BaseValidator',
    'ValidationResult',
    'ValidationResults',
    'ValidationRunner',

    # Validators
    'RecoveryPlanStateValidator',
]
