"""
SRM Cmdlets - Unprotect VM Operation

Removes protection from a VM.

Sequence:
1. Unprotect the VM (UnprotectVms) - returns a task
2. Wait for the task
3. vr groups only: unassociate the VM from the group (UnassociateVms)

This is the mirror image of Protect VM: the association has to outlive
the protection, so it is removed last.
"""

from srm_cmdlets.core.references import resolve_vm_reference
from srm_cmdlets.core.types import GroupType
from srm_cmdlets.operations.base import BaseOperation, OperationResult
from srm_cmdlets.operations.protect_vm import group_type_of


class UnprotectVMOperation(BaseOperation):
    """
    Unprotects a VM in a protection group.

    Example:
        operation = UnprotectVMOperation(protection_group, config, logger)
        result = operation.execute(vm=record)
    """

    def __init__(self, protection_group, config=None, logger=None, cancel_event=None):
        super().__init__(config, logger, cancel_event)
        self.protection_group = protection_group

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Unprotect VM"

    def execute(self, vm) -> OperationResult:
        """
        Unprotect the VM.

        Args:
            vm: VM managed object, VM view or protected VM record

        Returns:
            OperationResult holding the task result
        """
        reference = resolve_vm_reference(vm)
        group = self.protection_group
        group_type = group_type_of(group)

        self._log_debug(f"Executing {self.name} for {reference.moref} (group type: {group_type})")

        # Step 1: Unprotect
        task = self._call('ProtectionGroup.UnprotectVms', group.UnprotectVms, [reference.vm])

        # Step 2: Wait for the task
        self._log_debug("Waiting for unprotect task...")
        task_result = self._wait(task)

        # Step 3: vr groups drop the association as well
        if group_type == GroupType.VR.value:
            self._log_debug("Unassociating VM from vSphere Replication group...")
            self._call('ProtectionGroup.UnassociateVms', group.UnassociateVms, [reference.vm])

        self.result = OperationResult(
            operation_name=self.name,
            success=True,
            message=f"VM {reference.moref} unprotected",
            result=task_result
        )
        return self.result


def unprotect_vm(protection_group, vm, config=None, logger=None, cancel_event=None):
    """
    Unprotect a VM in a protection group and return the SRM task result.

    Args:
        protection_group: Protection group handle
        vm: VM managed object, VM view or protected VM record
        config: Optional SrmConfig (poll interval, timeout)
        logger: Optional logger
        cancel_event: Optional threading.Event that cancels the wait
    """
    operation = UnprotectVMOperation(protection_group, config, logger, cancel_event)
    return operation.execute(vm=vm).result
