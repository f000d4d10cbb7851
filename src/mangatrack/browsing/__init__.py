"""Page-viewer coordination: navigation, extraction timing and progress."""

from .progress import ProgressTracker
from .session import BrowserSession, ExtractionOutcome, ManualExtractionResult, NavigationState, PageHost
from .timers import ResettableTimer

__all__ = [
    "BrowserSession",
    "ExtractionOutcome",
    "ManualExtractionResult",
    "NavigationState",
    "PageHost",
    "ProgressTracker",
    "ResettableTimer",
]
