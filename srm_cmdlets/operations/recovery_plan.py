"""
SRM Cmdlets - Recovery Plan Operations

Start and stop (cancel) a recovery plan.

Both are high-impact: a failover or a cancelled recovery cannot be undone
from here, so each asks for confirmation unless confirmation is
suppressed (SrmConfig.confirm = False, CLI --quiet).
"""

from srm_cmdlets.core.exceptions import RecoveryPlanStateError, ValidationError
from srm_cmdlets.core.types import RecoveryMode, RecoveryOptions
from srm_cmdlets.operations.base import BaseOperation, OperationResult
from srm_cmdlets.utils.prompt import confirm_action
from srm_cmdlets.validators import RecoveryPlanStateValidator, ValidationRunner


class StartRecoveryPlanOperation(BaseOperation):
    """
    Starts a recovery plan in a given mode.

    Checks before anything is sent to SRM:
    1. Plan state (a Protecting plan must be run from the peer site)
    2. User confirmation

    Example:
        operation = StartRecoveryPlanOperation(plan, config, logger)
        result = operation.execute(mode=RecoveryMode.TEST)
    """

    def __init__(self, recovery_plan, config=None, logger=None, prompt=None):
        """
        Args:
            recovery_plan: Recovery plan handle
            config: Optional SrmConfig
            logger: Optional logger
            prompt: Optional input function for the confirmation question
        """
        super().__init__(config, logger)
        self.recovery_plan = recovery_plan
        self.prompt = prompt

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Start Recovery Plan"

    def validate(self):
        """
        Run pre-flight validation.

        Raises:
            RecoveryPlanStateError: If the plan may not be started here
        """
        results = (ValidationRunner()
                   .add(RecoveryPlanStateValidator(self.recovery_plan))
                   .run_all(self.logger, stop_on_failure=True))

        failure = results.first_failure()
        if failure is not None:
            results.log_failures(self.logger)
            raise RecoveryPlanStateError(
                failure.details.get('plan_name', '?'),
                failure.details.get('current_state', '?'),
                action='start',
                fix=failure.fix
            )

    def execute(self, mode=RecoveryMode.TEST, sync_data: bool = False) -> OperationResult:
        """
        Start the recovery plan.

        Args:
            mode: RecoveryMode (or its string value)
            sync_data: Replicate recent changes before recovery

        Returns:
            OperationResult; success is False if the user declined
        """
        try:
            mode = RecoveryMode(str(getattr(mode, 'value', mode)).lower())
        except ValueError:
            raise ValidationError(
                "Recovery Mode",
                f"Unknown recovery mode: {mode}",
                fix=f"Use one of: {', '.join(m.value for m in RecoveryMode)}"
            )

        self.validate()

        plan_name = self.recovery_plan.GetInfo().name
        if not confirm_action(
            f"Start recovery plan '{plan_name}' in {mode.value} mode.",
            confirm=self.config.confirm,
            prompt=self.prompt
        ):
            self._log_info(f"Start of recovery plan '{plan_name}' declined")
            self.result = OperationResult(
                operation_name=self.name,
                success=False,
                message="Declined by user"
            )
            return self.result

        options = RecoveryOptions(sync_data=sync_data)
        self._call('RecoveryPlan.Start', self.recovery_plan.Start, mode.value, options)

        self.result = OperationResult(
            operation_name=self.name,
            success=True,
            message=f"Recovery plan '{plan_name}' started ({mode.value})"
        )
        return self.result


class StopRecoveryPlanOperation(BaseOperation):
    """
    Stops (cancels) a running recovery plan.

    Example:
        operation = StopRecoveryPlanOperation(plan, config, logger)
        result = operation.execute()
    """

    def __init__(self, recovery_plan, config=None, logger=None, prompt=None):
        super().__init__(config, logger)
        self.recovery_plan = recovery_plan
        self.prompt = prompt

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Stop Recovery Plan"

    def execute(self) -> OperationResult:
        """
        Cancel the recovery plan.

        Returns:
            OperationResult; success is False if the user declined
        """
        plan_name = self.recovery_plan.GetInfo().name
        if not confirm_action(
            f"Stop recovery plan '{plan_name}'.",
            confirm=self.config.confirm,
            prompt=self.prompt
        ):
            self._log_info(f"Stop of recovery plan '{plan_name}' declined")
            self.result = OperationResult(
                operation_name=self.name,
                success=False,
                message="Declined by user"
            )
            return self.result

        self._call('RecoveryPlan.Cancel', self.recovery_plan.Cancel)

        self.result = OperationResult(
            operation_name=self.name,
            success=True,
            message=f"Recovery plan '{plan_name}' stopped"
        )
        return self.result


def start_recovery_plan(recovery_plan, mode=RecoveryMode.TEST, sync_data=False,
                        config=None, logger=None, prompt=None) -> OperationResult:
    """
    Start a recovery plan.

    Raises:
        RecoveryPlanStateError: If the plan is Protecting
        OperationFailedError: If SRM rejects the start
    """
    operation = StartRecoveryPlanOperation(recovery_plan, config, logger, prompt)
    return operation.execute(mode=mode, sync_data=sync_data)


def stop_recovery_plan(recovery_plan, config=None, logger=None, prompt=None) -> OperationResult:
    """
    Stop (cancel) a recovery plan.

    Raises:
        OperationFailedError: If SRM rejects the cancel
    """
    operation = StopRecoveryPlanOperation(recovery_plan, config, logger, prompt)
    return operation.execute()
