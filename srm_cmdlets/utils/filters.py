"""
SRM Cmdlets - Equality Filters

Listing commands accept optional filters (name, type, state, ...).
A FieldFilter keeps only the filters that were set and checks all of
them against each candidate.

String and enum values compare case-insensitively, the way PowerCLI
compares them; everything else uses ==.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


def as_list(value) -> list:
    """
    Normalize a parent argument that may be one object or many.

    None becomes an empty list; strings and single objects are wrapped.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, (str, bytes, dict)) or not hasattr(value, '__iter__'):
        return [value]
    return list(value)


def _normalize(value):
    """Comparable form of a filter value."""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return value.lower()
    return value


@dataclass
class FieldFilter:
    """
    Conjunction of optional equality checks.

    Example:
        criteria = FieldFilter.build(name='Web', type=None)
        matching = [pg for pg in groups if criteria.matches(pg.GetInfo())]
    """
    criteria: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def build(cls, **criteria) -> 'FieldFilter':
        """Create a filter from keyword criteria, skipping unset (None) ones."""
        return cls({k: v for k, v in criteria.items() if v is not None})

    @property
    def is_empty(self) -> bool:
        return not self.criteria

    def matches(self, candidate) -> bool:
        """
        Check a candidate against every criterion.

        Args:
            candidate: Object (or dict) exposing the filtered attributes

        Returns:
            True if every criterion matches (always True when empty)
        """
        for attribute, expected in self.criteria.items():
            if isinstance(candidate, dict):
                actual = candidate.get(attribute)
            else:
                actual = getattr(candidate, attribute, None)

            if _normalize(actual) != _normalize(expected):
                return False
        return True
