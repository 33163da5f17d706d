"""
SRM Cmdlets - Recovery Plan Listing
"""

from srm_cmdlets.core.exceptions import ValidationError
from srm_cmdlets.core.session import get_srm_server
from srm_cmdlets.utils.filters import FieldFilter, as_list
from srm_cmdlets.utils.logger import get_logger, log_api_call
from srm_cmdlets.utils.unique import unique_by_key


def get_recovery_plans(protection_groups=None, name=None, state=None,
                       server=None, registry=None) -> list:
    """
    List recovery plans.

    Args:
        protection_groups: Optional group or groups; only plans that
            contain them are listed
        name: Only plans with this name
        state: Only plans in this state (e.g. 'Ready', 'Protecting')
        server: Session or address (default: first active session)
        registry: Session registry (default: process-wide registry)

    Returns:
        List of recovery plan handles
    """
    logger = get_logger()

    if protection_groups is not None:
        plans = []
        for pg in as_list(protection_groups):
            log_api_call(logger, 'ProtectionGroup.ListRecoveryPlans')
            plans.extend(pg.ListRecoveryPlans() or [])
        plans = unique_by_key(plans)
    else:
        session = get_srm_server(server, registry)
        log_api_call(logger, 'Recovery.ListPlans')
        plans = list(session.recovery.ListPlans() or [])

    criteria = FieldFilter.build(name=name, state=state)
    if criteria.is_empty:
        return plans

    return [plan for plan in plans if criteria.matches(plan.GetInfo())]


def find_recovery_plan(name: str, server=None, registry=None):
    """
    Get the single recovery plan with a given name.

    Raises:
        ValidationError: If no plan has that name
    """
    plans = get_recovery_plans(name=name, server=server, registry=registry)
    if not plans:
        raise ValidationError(
            "Recovery Plan",
            f"Recovery plan '{name}' not found",
            fix="List recovery plans with: srm-cmdlets plans"
        )
    return plans[0]
