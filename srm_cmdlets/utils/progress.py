"""
SRM Cmdlets - Progress Tracking

Progress bar for batches (several VMs or protection groups in one
command). Drawn on stderr so listings on stdout stay machine-readable.
"""

import sys

from tqdm import tqdm

BAR_FORMAT = '{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} [{elapsed}]'


class ProgressTracker:
    """
    Step counter over a tqdm bar.

    A disabled tracker keeps count but draws nothing.

    Example:
        with create_progress_tracker(len(vms), "Protect VMs") as progress:
            for vm in vms:
                progress.update_step(vm.name)
                ...
                progress.advance()
    """

    def __init__(self, total_steps: int, desc: str = "Operation", enabled: bool = True):
        self.total_steps = total_steps
        self.desc = desc
        self.enabled = enabled
        self.current_step = 0
        self.bar = None

    def start(self):
        self.current_step = 0
        self.bar = tqdm(
            total=self.total_steps,
            desc=self.desc,
            bar_format=BAR_FORMAT,
            ncols=80,
            file=sys.stderr,
            disable=not self.enabled
        )

    def update_step(self, step_name: str):
        """Show the item being worked on next to the description."""
        if self.bar is not None:
            self.bar.set_description(f"{self.desc} - {step_name}")

    def advance(self, steps: int = 1):
        self.current_step += steps
        if self.bar is not None:
            self.bar.update(steps)

    def finish(self):
        if self.bar is not None:
            self.bar.close()
            self.bar = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()
        return False


def create_progress_tracker(total_steps: int, desc: str = "Operation",
                            enabled: bool = True) -> ProgressTracker:
    """
    Create a progress tracker.

    Args:
        total_steps: Number of items in the batch
        desc: Description shown before the bar
        enabled: False to track silently (single items, --quiet)
    """
    return ProgressTracker(total_steps, desc, enabled)
