"""
SRM Cmdlets - Operations Module

This module provides the operations that change state on the SRM server.
Each operation does ONE thing and raises on remote failure.

Usage:
    from srm_cmdlets.operations import protect_vm, start_recovery_plan

    task_result = protect_vm(protection_group, vm)

    result = start_recovery_plan(plan, mode='test')
    if not result.success:
        print(f"[X] {result.message}")
"""

from srm_cmdlets.operations.base import BaseOperation, OperationResult, wait_for_task
from srm_cmdlets.operations.protect_vm import ProtectVMOperation, protect_vm
from srm_cmdlets.operations.unprotect_vm import UnprotectVMOperation, unprotect_vm
from srm_cmdlets.operations.recovery_plan import (
    StartRecoveryPlanOperation,
    StopRecoveryPlanOperation,
    start_recovery_plan,
    stop_recovery_plan,
)
from srm_cmdlets.operations.add_protection_group import (
    AddProtectionGroupOperation,
    add_protection_groups_to_plan,
)
from srm_cmdlets.operations.recovery_settings import (
    add_callout,
    add_post_power_on_command,
    add_pre_power_on_command,
    get_callouts,
    get_recovery_settings,
    new_command,
    remove_callout,
    set_recovery_settings,
)

__all__ = [
    # Base classes
    'BaseOperation',
    'OperationResult',
    'wait_for_task',

    # Operations
    'ProtectVMOperation',
    'UnprotectVMOperation',
    'StartRecoveryPlanOperation',
    'StopRecoveryPlanOperation',
    'AddProtectionGroupOperation',

    # Commands
    'protect_vm',
    'unprotect_vm',
    'start_recovery_plan',
    'stop_recovery_plan',
    'add_protection_groups_to_plan',
    'get_recovery_settings',
    'set_recovery_settings',
    'new_command',
    'add_callout',
    'add_pre_power_on_command',
    'add_post_power_on_command',
    'get_callouts',
    'remove_callout',
]
