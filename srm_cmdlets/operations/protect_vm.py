"""
SRM Cmdlets - Protect VM Operation

Protects a VM in a protection group.

Sequence:
1. vr groups only: associate the VM with the group (AssociateVms)
2. Protect the VM (ProtectVms) - returns a task
3. Wait for the task and return its result

SRM requires a vSphere Replication VM to be associated with the group
before it can be protected.
"""

from srm_cmdlets.core.references import resolve_vm_reference
from srm_cmdlets.core.types import GroupType, VmProtectionSpec
from srm_cmdlets.operations.base import BaseOperation, OperationResult


def group_type_of(protection_group) -> str:
    """Lower-case type tag ('vr', 'san', ...) of a protection group."""
    group_type = protection_group.GetInfo().type
    if isinstance(group_type, GroupType):
        return group_type.value
    return str(group_type).lower()


class ProtectVMOperation(BaseOperation):
    """
    Protects a VM in a protection group.

    Example:
        operation = ProtectVMOperation(protection_group, config, logger)
        result = operation.execute(vm=vm)
        print(result.result)  # task result from SRM
    """

    def __init__(self, protection_group, config=None, logger=None, cancel_event=None):
        super().__init__(config, logger, cancel_event)
        self.protection_group = protection_group

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Protect VM"

    def execute(self, vm) -> OperationResult:
        """
        Protect the VM.

        Args:
            vm: VM managed object, VM view or protected VM record

        Returns:
            OperationResult holding the task result

        Raises:
            VmReferenceError: If the VM cannot be resolved
            OperationFailedError: If an SRM call fails
            TaskTimeoutError / TaskCancelledError: If the wait is cut short
        """
        reference = resolve_vm_reference(vm)
        group = self.protection_group
        group_type = group_type_of(group)

        self._log_debug(f"Executing {self.name} for {reference.moref} (group type: {group_type})")

        # Step 1: vr groups need the VM associated first
        if group_type == GroupType.VR.value:
            self._log_debug("Associating VM with vSphere Replication group...")
            self._call('ProtectionGroup.AssociateVms', group.AssociateVms, [reference.vm])

        # Step 2: Protect
        spec = VmProtectionSpec(vm=reference.vm)
        task = self._call('ProtectionGroup.ProtectVms', group.ProtectVms, [spec])

        # Step 3: Wait for the task
        self._log_debug("Waiting for protect task...")
        task_result = self._wait(task)

        self.result = OperationResult(
            operation_name=self.name,
            success=True,
            message=f"VM {reference.moref} protected",
            result=task_result
        )
        return self.result


def protect_vm(protection_group, vm, config=None, logger=None, cancel_event=None):
    """
    Protect a VM in a protection group and return the SRM task result.

    Args:
        protection_group: Protection group handle
        vm: VM managed object, VM view or protected VM record
        config: Optional SrmConfig (poll interval, timeout)
        logger: Optional logger
        cancel_event: Optional threading.Event that cancels the wait
    """
    operation = ProtectVMOperation(protection_group, config, logger, cancel_event)
    return operation.execute(vm=vm).result
