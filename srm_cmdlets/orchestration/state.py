"""
SRM Cmdlets - Batch State Tracking

Records the outcome of each item of a batch (protection groups added to
a plan, VMs protected in one command). A failed item is recorded and the
batch carries on with the next one.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class OperationState:
    """Outcome of one item of a batch."""
    operation_name: str
    success: bool
    message: str
    error: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_row(self) -> dict:
        return {
            'operation': self.operation_name,
            'success': self.success,
            'message': self.message,
            'error': self.error or '',
        }


class StateTracker:
    """
    Collects the outcomes of a batch.

    Example:
        tracker = StateTracker()
        tracker.add_operation("Add Web-PG", success=True, message="Added")
        tracker.add_operation("Add DB-PG", success=False, message="Failed", error="...")

        if not tracker.all_succeeded():
            logger.error(tracker.get_summary())
    """

    def __init__(self):
        self.operations: List[OperationState] = []
        self._started = time.monotonic()

    def __len__(self):
        return len(self.operations)

    def __iter__(self):
        return iter(self.operations)

    def add_operation(self, operation_name: str, success: bool,
                      message: str, error: str = None) -> OperationState:
        state = OperationState(operation_name, success, message, error)
        self.operations.append(state)
        return state

    def get_successful_operations(self) -> List[OperationState]:
        return [op for op in self.operations if op.success]

    def get_failed_operations(self) -> List[OperationState]:
        return [op for op in self.operations if not op.success]

    def all_succeeded(self) -> bool:
        """True when every item succeeded (and for an empty batch)."""
        return not self.get_failed_operations()

    def get_summary(self) -> str:
        """One-line summary, e.g. 'Operations: 2/3 succeeded, 1 failed (took 4.2s)'."""
        failed = len(self.get_failed_operations())
        summary = f"Operations: {len(self) - failed}/{len(self)} succeeded"
        if failed:
            summary += f", {failed} failed"
        return summary + f" (took {time.monotonic() - self._started:.1f}s)"

    def to_rows(self) -> List[dict]:
        """One row per item, for output formatting."""
        return [op.to_row() for op in self.operations]
