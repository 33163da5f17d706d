"""
SRM Cmdlets - Recovery Settings and Callouts

Read and write the per-VM recovery settings of a recovery plan, and edit
their callout lists.

Callout lists are never changed in place: every edit builds a new list
and assigns it to the settings object, so the binding registers the
change when the settings are written back with set_recovery_settings().

Example:
    settings = get_recovery_settings(plan, vm)
    command = new_command('/usr/local/bin/warmup.sh', 'Warm caches', timeout=600,
                          run_in_recovered_vm=True)
    add_post_power_on_command(settings, command)
    set_recovery_settings(plan, vm, settings)
"""

from srm_cmdlets.core.references import resolve_vm_reference
from srm_cmdlets.core.types import Command
from srm_cmdlets.utils.logger import get_logger, log_api_call

PRE_POWER_ON = 'prePowerOnCallouts'
POST_POWER_ON = 'postPowerOnCallouts'


def get_recovery_settings(recovery_plan, vm):
    """
    Get the recovery settings of a VM in a recovery plan.

    Args:
        recovery_plan: Recovery plan handle
        vm: VM managed object, VM view or protected VM record

    Raises:
        VmReferenceError: If the VM cannot be resolved
    """
    reference = resolve_vm_reference(vm)
    log_api_call(get_logger(), 'RecoveryPlan.GetRecoverySettings', reference.moref)
    return recovery_plan.GetRecoverySettings(reference.vm)


def set_recovery_settings(recovery_plan, vm, settings):
    """
    Write the recovery settings of a VM in a recovery plan.

    Args:
        recovery_plan: Recovery plan handle
        vm: VM managed object, VM view or protected VM record
        settings: Settings object, usually from get_recovery_settings()
    """
    reference = resolve_vm_reference(vm)
    log_api_call(get_logger(), 'RecoveryPlan.SetRecoverySettings', reference.moref)
    recovery_plan.SetRecoverySettings(reference.vm, settings)


def new_command(command: str, description: str, timeout: int = 300,
                run_in_recovered_vm: bool = False) -> Command:
    """
    Create a callout command with a fresh identifier.

    Args:
        command: Command line to execute
        description: Human-readable description
        timeout: Seconds SRM waits for the command (default: 300)
        run_in_recovered_vm: Run inside the recovered VM instead of on
            the SRM server
    """
    return Command(
        command=command,
        description=description,
        timeout=timeout,
        run_in_recovered_vm=run_in_recovered_vm
    )


def _callout_attribute(pre_power_on: bool) -> str:
    return PRE_POWER_ON if pre_power_on else POST_POWER_ON


def add_callout(settings, command, pre_power_on: bool = False):
    """
    Append a command to the pre- or post-power-on callouts.

    The list is created on first use.

    Returns:
        The settings object
    """
    attribute = _callout_attribute(pre_power_on)
    callouts = list(getattr(settings, attribute, None) or [])
    callouts.append(command)
    setattr(settings, attribute, callouts)

    get_logger().debug(f"Added callout to {attribute} ({len(callouts)} total)")
    return settings


def add_pre_power_on_command(settings, command):
    """Append a command to the pre-power-on callouts."""
    return add_callout(settings, command, pre_power_on=True)


def add_post_power_on_command(settings, command):
    """Append a command to the post-power-on callouts."""
    return add_callout(settings, command, pre_power_on=False)


def get_callouts(settings, pre_power_on: bool = False) -> list:
    """Commands of the pre- or post-power-on callouts (empty if unset)."""
    return list(getattr(settings, _callout_attribute(pre_power_on), None) or [])


def remove_callout(settings, uuid: str, pre_power_on: bool = False):
    """
    Remove the command with the given uuid from a callout list.

    Returns:
        The settings object
    """
    attribute = _callout_attribute(pre_power_on)
    callouts = [c for c in get_callouts(settings, pre_power_on)
                if getattr(c, 'uuid', None) != uuid]
    setattr(settings, attribute, callouts)
    return settings
