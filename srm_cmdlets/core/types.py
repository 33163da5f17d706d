"""
SRM Cmdlets - Value Objects

Small value objects handed to the SRM API, plus the records this package
returns. Remote entities themselves (protection groups, recovery plans,
VMs) are never modelled here; they stay opaque handles owned by the
SRM binding.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class GroupType(str, Enum):
    """Replication mechanism of a protection group."""
    SAN = 'san'
    VR = 'vr'


class RecoveryMode(str, Enum):
    """Run modes accepted by RecoveryPlan.Start()."""
    TEST = 'test'
    CLEANUP = 'cleanup'
    FAILOVER = 'failover'
    MIGRATE = 'migrate'
    REPROTECT = 'reprotect'
    REVERT = 'revert'


# Plan state reported while the peer site drives the plan
PROTECTING = 'protecting'


@dataclass
class VmProtectionSpec:
    """Protection spec passed to ProtectionGroup.ProtectVms()."""
    vm: Any


@dataclass
class RecoveryOptions:
    """Options passed to RecoveryPlan.Start()."""
    sync_data: bool = False


@dataclass
class Command:
    """
    A callout command run before or after a VM powers on during recovery.

    Attributes:
        command: Command line to execute
        description: Human-readable description
        timeout: Seconds SRM waits for the command
        run_in_recovered_vm: True to run inside the recovered VM,
            False to run on the SRM server
        uuid: Identifier generated for every new command
    """
    command: str
    description: str
    timeout: int = 300
    run_in_recovered_vm: bool = False
    uuid: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class ProtectedVmRecord:
    """
    One protected VM as returned by get_protected_vms().

    `vm` is the VM managed object, so a record can be passed anywhere a VM
    is expected. `vm_name` is None when the VM view could not be refreshed.
    """
    protected_vm: Any
    vm: Any
    vm_name: Optional[str]
    needs_configuration: bool
    state: Any
    peer_state: Any
    protection_group: Any = None

    def to_dict(self) -> dict:
        """Flat representation for output formatting."""
        return {
            'vmName': self.vm_name,
            'moRef': getattr(self.vm, '_moId', None),
            'state': plain_value(self.state),
            'peerState': plain_value(self.peer_state),
            'needsConfiguration': self.needs_configuration,
        }


def plain_value(value):
    """Enum-like values as plain strings."""
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
