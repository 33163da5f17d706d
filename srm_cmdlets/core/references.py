"""
SRM Cmdlets - VM Reference Resolution

Commands that take a VM accept it in one of three shapes:

1. A VM managed object (e.g. pyVmomi vim.VirtualMachine), carrying _moId
2. A VM view: property collector object content, carrying the object in .obj
3. A protected VM record (ProtectedVmRecord or the SRM ProtectedVm data
   object), carrying the VM in .vm

resolve_vm_reference() tries the shapes in that order and returns the
first one that yields a reference key.
"""

from dataclasses import dataclass
from typing import Any

from srm_cmdlets.core.exceptions import VmReferenceError
from srm_cmdlets.utils.unique import moref_of


@dataclass(frozen=True)
class VmReference:
    """
    A resolved VM.

    Attributes:
        moref: Reference key of the VM
        vm: VM managed object to pass to the SRM API
    """
    moref: str
    vm: Any


def _from_managed_object(target):
    if moref_of(target):
        return target
    return None


def _from_view(target):
    return _from_managed_object(getattr(target, 'obj', None))


def _from_record(target):
    return _from_managed_object(getattr(target, 'vm', None))


_SHAPES = (_from_managed_object, _from_view, _from_record)


def resolve_vm_reference(target) -> VmReference:
    """
    Resolve a VM in any accepted shape to its reference.

    Args:
        target: VM managed object, VM view or protected VM record

    Returns:
        VmReference for the VM

    Raises:
        VmReferenceError: If no shape yields a reference key
    """
    if target is None:
        raise VmReferenceError(target)

    for extract in _SHAPES:
        vm = extract(target)
        if vm is not None:
            return VmReference(moref=moref_of(vm), vm=vm)

    raise VmReferenceError(target)
