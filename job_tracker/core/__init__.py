"""Core models and errors shared by every part of the tracker.

The pipeline, dispatcher and job service are imported from their own
modules (job_tracker.core.pipeline, .dispatcher, .job_service).
"""

from .models import (
    JobRecord,
    JobStatus,
    JobPriority,
    MatchResult,
    MatchScoreCategory,
)
from .errors import MatchScoreError

__all__ = [
    "JobRecord",
    "JobStatus",
    "JobPriority",
    "MatchResult",
    "MatchScoreCategory",
    "MatchScoreError",
]
