"""
SRM Cmdlets - Main Entry Points

Simple entry points for protecting VMs and running recovery plans.
Each sets up logging, runs the operation(s) and returns True or False.

Usage:
    from srm_cmdlets.main import protect_vms, start_plan

    # Protect two VMs
    success = protect_vms(protection_group, [vm1, vm2])

    # Test a recovery plan without asking for confirmation
    success = start_plan(plan, mode='test', config=SrmConfig(confirm=False))
"""

from srm_cmdlets.core.config import SrmConfig
from srm_cmdlets.core.exceptions import SrmError, TaskCancelledError
from srm_cmdlets.core.references import resolve_vm_reference
from srm_cmdlets.core.types import RecoveryMode
from srm_cmdlets.operations import (
    ProtectVMOperation,
    StartRecoveryPlanOperation,
    StopRecoveryPlanOperation,
    UnprotectVMOperation,
)
from srm_cmdlets.orchestration import StateTracker
from srm_cmdlets.utils.logger import print_header, setup_logging
from srm_cmdlets.utils.progress import create_progress_tracker


def _setup(config: SrmConfig, debug: bool):
    config = config or SrmConfig()
    logger = setup_logging(level=config.log_level, log_file=config.log_file, debug=debug)
    return config, logger


def _name_of(entity) -> str:
    try:
        return entity.GetInfo().name
    except Exception:
        return str(getattr(entity, '_moId', entity))


def _vm_label(vm) -> str:
    try:
        return resolve_vm_reference(vm).moref
    except SrmError:
        return str(vm)


def _run_vm_batch(operation_class, action: str, protection_group, vms,
                  config: SrmConfig, debug: bool, cancel_event=None) -> bool:
    """Run a per-VM operation over several VMs, recording each outcome."""
    config, logger = _setup(config, debug)
    vms = list(vms)

    print_header(logger, f"SRM Cmdlets - {action} VMs")
    logger.info(f"Protection group: {_name_of(protection_group)}")
    logger.info(f"VMs: {len(vms)}")
    logger.info("")

    tracker = StateTracker()
    progress = create_progress_tracker(
        len(vms),
        desc=f"{action} VMs",
        enabled=config.show_progress and len(vms) > 1
    )

    with progress:
        for vm in vms:
            label = _vm_label(vm)
            progress.update_step(label)
            operation = operation_class(protection_group, config, logger, cancel_event)
            try:
                result = operation.execute(vm=vm)
                tracker.add_operation(f"{action} {label}", result.success, result.message)
                logger.info(f"[OK] {result.message}")
            except TaskCancelledError as e:
                tracker.add_operation(f"{action} {label}", False, "Cancelled", error=str(e))
                logger.error(str(e))
                break
            except Exception as e:
                tracker.add_operation(f"{action} {label}", False, "Failed", error=str(e))
                logger.error(f"{action} {label} failed: {e}")
                if debug:
                    logger.exception("Full traceback:")
            progress.advance()

    logger.info("")
    logger.info(tracker.get_summary())
    return tracker.all_succeeded()


def protect_vms(protection_group, vms, config: SrmConfig = None,
                debug: bool = False, cancel_event=None) -> bool:
    """
    Protect VMs in a protection group.

    A VM that fails to protect is logged and the remaining VMs are still
    processed.

    Args:
        protection_group: Protection group handle
        vms: VM managed objects, views or protected VM records
        config: Optional SrmConfig (poll interval, timeout, progress)
        debug: Enable debug logging (default: False)
        cancel_event: Optional threading.Event that stops the batch

    Returns:
        True if every VM was protected, False otherwise

    Example:
        >>> protect_vms(pg, [vm1, vm2])
        True
    """
    return _run_vm_batch(ProtectVMOperation, "Protect", protection_group, vms,
                         config, debug, cancel_event)


def unprotect_vms(protection_group, vms, config: SrmConfig = None,
                  debug: bool = False, cancel_event=None) -> bool:
    """
    Unprotect VMs in a protection group.

    Returns:
        True if every VM was unprotected, False otherwise
    """
    return _run_vm_batch(UnprotectVMOperation, "Unprotect", protection_group, vms,
                         config, debug, cancel_event)


def start_plan(recovery_plan, mode=RecoveryMode.TEST, sync_data: bool = False,
               config: SrmConfig = None, debug: bool = False, prompt=None) -> bool:
    """
    Start a recovery plan.

    Args:
        recovery_plan: Recovery plan handle
        mode: RecoveryMode or its value ('test', 'failover', ...)
        sync_data: Replicate recent changes before recovery
        config: Optional SrmConfig (confirm=False skips the question)
        debug: Enable debug logging (default: False)
        prompt: Optional input function for the confirmation question

    Returns:
        True if the plan was started, False if it failed or was declined
    """
    config, logger = _setup(config, debug)

    print_header(logger, "SRM Cmdlets - Start Recovery Plan")
    logger.info(f"Plan: {_name_of(recovery_plan)}")
    logger.info(f"Mode: {getattr(mode, 'value', mode)}")
    logger.info("")

    try:
        operation = StartRecoveryPlanOperation(recovery_plan, config, logger, prompt)
        result = operation.execute(mode=mode, sync_data=sync_data)
    except SrmError as e:
        logger.error(str(e))
        return False
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}")
        if debug:
            logger.exception("Full traceback:")
        return False

    if not result.success:
        logger.warning(result.message)
        return False

    logger.info(f"[OK] {result.message}")
    return True


def stop_plan(recovery_plan, config: SrmConfig = None, debug: bool = False,
              prompt=None) -> bool:
    """
    Stop (cancel) a running recovery plan.

    Returns:
        True if the plan was cancelled, False if it failed or was declined
    """
    config, logger = _setup(config, debug)

    print_header(logger, "SRM Cmdlets - Stop Recovery Plan")
    logger.info(f"Plan: {_name_of(recovery_plan)}")
    logger.info("")

    try:
        result = StopRecoveryPlanOperation(recovery_plan, config, logger, prompt).execute()
    except SrmError as e:
        logger.error(str(e))
        return False
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}")
        if debug:
            logger.exception("Full traceback:")
        return False

    if not result.success:
        logger.warning(result.message)
        return False

    logger.info(f"[OK] {result.message}")
    return True
