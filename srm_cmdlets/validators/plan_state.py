"""
SRM Cmdlets - Recovery Plan State Validator

Validates that a recovery plan is in a state that allows it to be started
from this SRM server.
"""

from srm_cmdlets.core.types import PROTECTING
from srm_cmdlets.validators.base import BaseValidator, ValidationResult


def plan_state_of(info) -> str:
    """Plan state from a plan info snapshot, as a plain string."""
    state = getattr(info, 'state', None)
    return getattr(state, 'value', state) if state is not None else 'unknown'


class RecoveryPlanStateValidator(BaseValidator):
    """
    Validates the state of a recovery plan.

    A plan in the Protecting state belongs to the protected site. It can
    only be run from the peer SRM server, so starting it here is refused.

    Example:
        validator = RecoveryPlanStateValidator(plan)
        result = validator.validate()

        if not result.passed:
            print(f"Plan state: {result.details['current_state']}")
    """

    def __init__(self, recovery_plan, disallowed_states=(PROTECTING,)):
        """
        Args:
            recovery_plan: Recovery plan handle
            disallowed_states: States (any case) that fail the check
        """
        super().__init__(recovery_plan)
        self.disallowed_states = {str(s).lower() for s in disallowed_states}

    @property
    def name(self) -> str:
        """Display name for this validator."""
        return "Recovery Plan State"

    def validate(self) -> ValidationResult:
        """
        Check the plan state.

        Returns:
            ValidationResult with pass/fail
        """
        info = self.subject.GetInfo()
        current_state = str(plan_state_of(info))

        if current_state.lower() in self.disallowed_states:
            return ValidationResult(
                validator_name=self.name,
                passed=False,
                message=f"Recovery plan '{info.name}' is in state: {current_state}",
                details={
                    "plan_name": info.name,
                    "current_state": current_state,
                    "fix": "Run this recovery plan from the peer SRM server"
                }
            )

        return ValidationResult(
            validator_name=self.name,
            passed=True,
            message=f"Recovery plan '{info.name}' is {current_state}",
            details={
                "plan_name": info.name,
                "current_state": current_state
            }
        )
