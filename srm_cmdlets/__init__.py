"""SRM Cmdlets - Python helpers for VMware Site Recovery Manager.

Thin helpers over an SRM API binding:
- Sessions: track connected SRM servers and pick the one a command uses
- Inventory: list protection groups, recovery plans, protected and
  unprotected VMs, protected datastores and recovery history
- Operations: protect/unprotect VMs, start/stop recovery plans, edit
  per-VM recovery settings and callouts

Example usage:
    >>> from srm_cmdlets import default_registry, get_protected_vms, start_recovery_plan
    >>> default_registry.connect('srm-a.example.com', service, 'admin', 'secret')
    >>> records = get_protected_vms(needs_configuration=True)
    >>> start_recovery_plan(plan, mode='test')
"""

from srm_cmdlets.core.config import VERSION, SrmConfig, create_config, load_config
from srm_cmdlets.core.session import (
    Session,
    SessionRegistry,
    connect_vcenter,
    default_registry,
    disconnect_vcenter,
    get_server_version,
    get_srm_server,
)
from srm_cmdlets.core.types import Command, GroupType, ProtectedVmRecord, RecoveryMode
from srm_cmdlets.inventory import (
    export_recovery_result,
    find_protection_group,
    find_recovery_plan,
    find_vm_by_name,
    get_associated_vms,
    get_protected_datastores,
    get_protected_vms,
    get_protection_groups,
    get_recovery_plans,
    get_recovery_results,
    get_unprotected_vms,
)
from srm_cmdlets.operations import (
    add_post_power_on_command,
    add_pre_power_on_command,
    add_protection_groups_to_plan,
    get_recovery_settings,
    new_command,
    protect_vm,
    set_recovery_settings,
    start_recovery_plan,
    stop_recovery_plan,
    unprotect_vm,
)

__version__ = VERSION

__all__ = [
    'SrmConfig',
    'create_config',
    'load_config',
    'Session',
    'SessionRegistry',
    'default_registry',
    'get_srm_server',
    'get_server_version',
    'connect_vcenter',
    'disconnect_vcenter',
    'Command',
    'GroupType',
    'ProtectedVmRecord',
    'RecoveryMode',
    'get_protection_groups',
    'find_protection_group',
    'get_recovery_plans',
    'find_recovery_plan',
    'get_protected_vms',
    'get_associated_vms',
    'get_unprotected_vms',
    'get_protected_datastores',
    'get_recovery_results',
    'export_recovery_result',
    'find_vm_by_name',
    'protect_vm',
    'unprotect_vm',
    'start_recovery_plan',
    'stop_recovery_plan',
    'add_protection_groups_to_plan',
    'get_recovery_settings',
    'set_recovery_settings',
    'new_command',
    'add_pre_power_on_command',
    'add_post_power_on_command',
]
