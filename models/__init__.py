"""
Models package for search specs and dataset API responses.
"""

from .job import JobStatus, ProgressResponse, TriggerResponse
from .search_spec import SAMPLE_SEARCHES, SearchEngine, SearchSpec, create_search

__all__ = [
    "JobStatus",
    "ProgressResponse",
    "SAMPLE_SEARCHES",
    "SearchEngine",
    "SearchSpec",
    "TriggerResponse",
    "create_search",
]
