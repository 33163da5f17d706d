"""
SRM Cmdlets - Add Protection Group Operation

Adds protection groups to a recovery plan.

Each group is added with its own AddProtectionGroup call. When several
groups are given, a failure is recorded for that group and the remaining
groups are still added.
"""

from srm_cmdlets.operations.base import BaseOperation, OperationResult
from srm_cmdlets.orchestration.state import StateTracker
from srm_cmdlets.utils.progress import create_progress_tracker


def _group_name(protection_group) -> str:
    try:
        return protection_group.GetInfo().name
    except Exception:
        return str(getattr(protection_group, '_moId', protection_group))


class AddProtectionGroupOperation(BaseOperation):
    """
    Adds one protection group to a recovery plan.

    Example:
        operation = AddProtectionGroupOperation(plan, config, logger)
        result = operation.execute(protection_group=pg)
    """

    def __init__(self, recovery_plan, config=None, logger=None):
        super().__init__(config, logger)
        self.recovery_plan = recovery_plan

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Add Protection Group"

    def execute(self, protection_group) -> OperationResult:
        """
        Add the protection group.

        Raises:
            OperationFailedError: If SRM rejects the group
        """
        self._call('RecoveryPlan.AddProtectionGroup',
                   self.recovery_plan.AddProtectionGroup, protection_group)

        self.result = OperationResult(
            operation_name=self.name,
            success=True,
            message=f"Protection group '{_group_name(protection_group)}' added"
        )
        return self.result


def add_protection_groups_to_plan(recovery_plan, protection_groups, config=None,
                                  logger=None) -> StateTracker:
    """
    Add protection groups to a recovery plan, isolating per-group failures.

    Args:
        recovery_plan: Recovery plan handle
        protection_groups: Protection group handles to add
        config: Optional SrmConfig
        logger: Optional logger

    Returns:
        StateTracker with one entry per group
    """
    operation = AddProtectionGroupOperation(recovery_plan, config, logger)
    tracker = StateTracker()
    protection_groups = list(protection_groups)

    progress = create_progress_tracker(
        total_steps=len(protection_groups),
        desc="Add protection groups",
        enabled=operation.config.show_progress and len(protection_groups) > 1
    )
    progress.start()

    try:
        for pg in protection_groups:
            group_name = _group_name(pg)
            progress.update_step(group_name)
            item = f"Add {group_name}"
            try:
                result = operation.execute(protection_group=pg)
                tracker.add_operation(item, True, result.message)
            except Exception as e:
                operation.logger.error(f"Failed to add protection group '{group_name}': {e}")
                tracker.add_operation(item, False, "Failed", error=str(e))
            progress.advance()
    finally:
        progress.finish()

    operation.logger.debug(tracker.get_summary())
    return tracker
