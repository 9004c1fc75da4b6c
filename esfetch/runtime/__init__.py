"""Runtime orchestration components."""

from .orchestrator import SliceOrchestrator
from .pages import PageFetcher
from .query import augment_query
from .scroll import ProgressCounters, ScrollCursor, ScrollDriver

__all__ = [
    "PageFetcher",
    "ProgressCounters",
    "ScrollCursor",
    "ScrollDriver",
    "SliceOrchestrator",
    "augment_query",
]
