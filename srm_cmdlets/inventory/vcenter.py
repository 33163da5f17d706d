"""
SRM Cmdlets - vCenter Lookups

Find VM managed objects in the paired vCenter with pyVmomi, so they can
be passed to protect_vm(), unprotect_vm() and the recovery settings
helpers.
"""

from pyVmomi import vim

from srm_cmdlets.core.exceptions import VmReferenceError
from srm_cmdlets.utils.logger import get_logger, log_api_call


def get_all_vms(si) -> list:
    """
    List every VM in a vCenter inventory.

    Args:
        si: pyVmomi ServiceInstance
    """
    content = si.RetrieveContent()
    log_api_call(get_logger(), 'ViewManager.CreateContainerView', 'VirtualMachine')
    container = content.viewManager.CreateContainerView(
        content.rootFolder, [vim.VirtualMachine], True
    )
    try:
        return list(container.view)
    finally:
        container.Destroy()


def find_vm_by_name(si, name: str):
    """
    Find a VM by name.

    Raises:
        VmReferenceError: If no VM has that name
    """
    for vm in get_all_vms(si):
        if vm.name == name:
            return vm
    raise VmReferenceError(name)
