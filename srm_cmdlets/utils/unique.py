"""
SRM Cmdlets - Unique-by-key Filter

Merges result sets of remote objects without duplicates, keyed by the
managed object reference (MoRef) of each item.
"""

from typing import Any, Callable, Iterable, List, Optional

from srm_cmdlets.utils.logger import get_logger


def moref_of(obj) -> Optional[str]:
    """
    Get the reference key of a managed object.

    pyVmomi managed objects carry it in _moId. Returns None for anything
    without a usable key.
    """
    if obj is None:
        return None
    key = getattr(obj, '_moId', None)
    if key is None or key == '':
        return None
    return str(key)


def unique_by_key(items: Iterable[Any],
                  key: Callable[[Any], Optional[str]] = moref_of) -> List[Any]:
    """
    Deduplicate items by reference key.

    Input order is preserved and the first occurrence of each key wins.
    Items that share a key with an earlier item are expected (the same
    entity reached through two parents) and are dropped. Items without
    a key cannot be compared and are dropped with a warning.

    Args:
        items: Items to deduplicate
        key: Function returning the reference key of an item

    Returns:
        List with at most one item per key

    Example:
        vms = unique_by_key(plan_vms + group_vms)
    """
    logger = get_logger()
    seen = set()
    unique = []

    for item in items:
        item_key = key(item)

        if item_key is None:
            logger.warning(f"Dropping item without a reference key: {item!r}")
            continue

        if item_key in seen:
            logger.debug(f"Dropping duplicate of {item_key}")
            continue

        seen.add(item_key)
        unique.append(item)

    return unique
