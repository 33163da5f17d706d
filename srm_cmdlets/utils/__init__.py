"""Utils package."""

from srm_cmdlets.utils.logger import setup_logging, get_logger
from srm_cmdlets.utils.progress import ProgressTracker, create_progress_tracker

__all__ = [
    'setup_logging',
    'get_logger',
    'ProgressTracker',
    'create_progress_tracker'
]
