"""
SRM Cmdlets - Protected and Unprotected VM Listing

Protected VMs are reported per protection group as ProtectedVmRecord
objects. Unprotected VMs are the VMs associated with a group (replicated
by vSphere Replication, or living on a datastore the group protects)
that are not yet protected in it.
"""

from srm_cmdlets.core.references import resolve_vm_reference
from srm_cmdlets.core.types import GroupType, ProtectedVmRecord
from srm_cmdlets.inventory.protection_groups import get_protection_groups
from srm_cmdlets.utils.filters import FieldFilter, as_list
from srm_cmdlets.utils.logger import get_logger, log_api_call
from srm_cmdlets.utils.unique import moref_of, unique_by_key


def _vm_key(item):
    return moref_of(getattr(item, 'vm', None))


def _resolve_groups(protection_groups, recovery_plans, server, registry):
    if protection_groups is not None:
        return unique_by_key(as_list(protection_groups))
    return get_protection_groups(recovery_plans=recovery_plans, server=server,
                                 registry=registry)


def _refresh_vm_name(vm, logger):
    """
    Read the VM name, which refreshes the view of the VM.

    Returns:
        The name, or None if the view could not be refreshed
    """
    try:
        return vm.name
    except Exception as e:
        logger.warning(f"Could not refresh VM {moref_of(vm)}: {e}")
        return None


def get_protected_vms(protection_groups=None, recovery_plans=None,
                      protection_group_name=None, state=None, peer_state=None,
                      needs_configuration=None, vm=None,
                      server=None, registry=None) -> list:
    """
    List protected VMs.

    Args:
        protection_groups: Optional group or groups to list
        recovery_plans: Optional plan or plans whose groups are listed
            (ignored when protection_groups is given)
        protection_group_name: Only groups with this name
        state: Only VMs in this protection state
        peer_state: Only VMs whose peer is in this state
        needs_configuration: Only VMs with this needsConfiguration flag
        vm: Only this VM (managed object, view or record)
        server: Session or address (default: first active session)
        registry: Session registry (default: process-wide registry)

    Returns:
        List of ProtectedVmRecord, one per (VM, protection group) pairing

    Example:
        for record in get_protected_vms(needs_configuration=True):
            print(record.vm_name)
    """
    logger = get_logger()
    groups = _resolve_groups(protection_groups, recovery_plans, server, registry)

    if protection_group_name is not None:
        group_filter = FieldFilter.build(name=protection_group_name)
        groups = [pg for pg in groups if group_filter.matches(pg.GetInfo())]

    criteria = FieldFilter.build(
        state=state,
        peerState=peer_state,
        needsConfiguration=needs_configuration
    )
    wanted = resolve_vm_reference(vm).moref if vm is not None else None

    records = []
    for pg in groups:
        log_api_call(logger, 'ProtectionGroup.ListProtectedVms')
        for protected_vm in pg.ListProtectedVms() or []:
            if not criteria.matches(protected_vm):
                continue
            if wanted is not None and moref_of(protected_vm.vm) != wanted:
                continue

            records.append(ProtectedVmRecord(
                protected_vm=protected_vm,
                vm=protected_vm.vm,
                vm_name=_refresh_vm_name(protected_vm.vm, logger),
                needs_configuration=protected_vm.needsConfiguration,
                state=protected_vm.state,
                peer_state=protected_vm.peerState,
                protection_group=pg
            ))

    return records


def get_associated_vms(protection_group) -> list:
    """
    List the VMs associated with a protection group.

    vr groups report their associated VMs directly; for san groups these
    are the VMs on the group's protected datastores.

    Returns:
        List of VM managed objects, without duplicates
    """
    logger = get_logger()
    info = protection_group.GetInfo()
    group_type = str(getattr(info.type, 'value', info.type)).lower()

    if group_type == GroupType.VR.value:
        log_api_call(logger, 'ProtectionGroup.ListAssociatedVms', info.name)
        return unique_by_key(protection_group.ListAssociatedVms() or [])

    if group_type == GroupType.SAN.value:
        log_api_call(logger, 'ProtectionGroup.ListProtectedDatastores', info.name)
        vms = []
        for datastore in protection_group.ListProtectedDatastores() or []:
            vms.extend(datastore.vm or [])
        return unique_by_key(vms)

    logger.warning(f"Protection group '{info.name}' has unsupported type '{info.type}'")
    return []


def get_unprotected_vms(protection_groups=None, recovery_plans=None,
                        server=None, registry=None) -> list:
    """
    List VMs associated with protection groups but not protected in them.

    Args:
        protection_groups: Optional group or groups (default: all groups)
        recovery_plans: Optional plan or plans whose groups are checked
        server: Session or address (default: first active session)
        registry: Session registry (default: process-wide registry)

    Returns:
        List of VM managed objects, group by group. A VM left unprotected
        in two groups is listed once for each.
    """
    groups = _resolve_groups(protection_groups, recovery_plans, server, registry)

    unprotected = []
    for pg in groups:
        protected = {_vm_key(r) for r in get_protected_vms(protection_groups=[pg])}
        unprotected.extend(
            vm for vm in get_associated_vms(pg) if moref_of(vm) not in protected
        )

    return unprotected
