"""
SRM Cmdlets - Orchestration Module

Tracks per-item outcomes of batch work.
"""

from srm_cmdlets.orchestration.state import StateTracker, OperationState

__all__ = [
    'StateTracker',
    'OperationState',
]
