"""
SRM Cmdlets - Protection Group Listing

List protection groups, optionally scoped to recovery plans, and the
datastores protected by array-based (san) groups.
"""

from srm_cmdlets.core.exceptions import ValidationError
from srm_cmdlets.core.session import get_srm_server
from srm_cmdlets.core.types import GroupType
from srm_cmdlets.utils.filters import FieldFilter, as_list
from srm_cmdlets.utils.logger import get_logger, log_api_call
from srm_cmdlets.utils.unique import unique_by_key


def _groups_of_plans(recovery_plans, logger):
    """Union of the protection groups of several recovery plans."""
    groups = []
    for plan in as_list(recovery_plans):
        log_api_call(logger, 'RecoveryPlan.GetInfo')
        groups.extend(plan.GetInfo().protectionGroups or [])
    return unique_by_key(groups)


def get_protection_groups(recovery_plans=None, name=None, type=None,
                          server=None, registry=None) -> list:
    """
    List protection groups.

    Args:
        recovery_plans: Optional plan or plans; only their groups are listed
        name: Only groups with this name
        type: Only groups of this type ('san', 'vr' or GroupType)
        server: Session or address (default: first active session)
        registry: Session registry (default: process-wide registry)

    Returns:
        List of protection group handles

    Example:
        vr_groups = get_protection_groups(type='vr')
    """
    logger = get_logger()

    if recovery_plans is not None:
        groups = _groups_of_plans(recovery_plans, logger)
    else:
        session = get_srm_server(server, registry)
        log_api_call(logger, 'Protection.ListProtectionGroups')
        groups = list(session.protection.ListProtectionGroups() or [])

    criteria = FieldFilter.build(name=name, type=type)
    if criteria.is_empty:
        return groups

    return [pg for pg in groups if criteria.matches(pg.GetInfo())]


def find_protection_group(name: str, server=None, registry=None):
    """
    Get the single protection group with a given name.

    Raises:
        ValidationError: If no group has that name
    """
    groups = get_protection_groups(name=name, server=server, registry=registry)
    if not groups:
        raise ValidationError(
            "Protection Group",
            f"Protection group '{name}' not found",
            fix="List protection groups with: srm-cmdlets groups"
        )
    return groups[0]


def get_protected_datastores(protection_groups=None, server=None, registry=None) -> list:
    """
    List the datastores protected by san protection groups.

    Groups of other types have no protected datastores and are skipped.

    Args:
        protection_groups: Optional group or groups (default: all groups)
        server: Session or address (default: first active session)
        registry: Session registry (default: process-wide registry)

    Returns:
        List of datastore managed objects, without duplicates
    """
    logger = get_logger()

    if protection_groups is not None:
        groups = as_list(protection_groups)
    else:
        groups = get_protection_groups(server=server, registry=registry)

    datastores = []
    for pg in groups:
        info = pg.GetInfo()
        if FieldFilter.build(type=GroupType.SAN).matches(info):
            log_api_call(logger, 'ProtectionGroup.ListProtectedDatastores', info.name)
            datastores.extend(pg.ListProtectedDatastores() or [])
        else:
            logger.debug(f"Skipping protection group '{info.name}' of type {info.type}")

    return unique_by_key(datastores)
