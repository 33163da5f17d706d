"""
SRM Cmdlets - Inventory Module

Read-only listings of protection groups, recovery plans, protected and
unprotected VMs, protected datastores and recovery history.
"""

from srm_cmdlets.inventory.protection_groups import (
    find_protection_group,
    get_protected_datastores,
    get_protection_groups,
)
from srm_cmdlets.inventory.recovery_plans import find_recovery_plan, get_recovery_plans
from srm_cmdlets.inventory.protected_vms import (
    get_associated_vms,
    get_protected_vms,
    get_unprotected_vms,
)
from srm_cmdlets.inventory.results import (
    export_recovery_result,
    get_recovery_results,
    result_to_dict,
)
from srm_cmdlets.inventory.vcenter import find_vm_by_name, get_all_vms

__all__ = [
    'get_protection_groups',
    'find_protection_group',
    'get_protected_datastores',
    'get_recovery_plans',
    'find_recovery_plan',
    'get_protected_vms',
    'get_associated_vms',
    'get_unprotected_vms',
    'get_recovery_results',
    'export_recovery_result',
    'result_to_dict',
    'get_all_vms',
    'find_vm_by_name',
]
