"""
Core data models for the job tracking system.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid


class JobStatus(Enum):
    """Board column a job application sits in."""
    DISCOVERED = "discovered"
    APPLIED = "applied"
    SCREENING = "screening"
    TECHNICAL = "technical"
    FINAL_ROUND = "final_round"
    OFFER = "offer"
    REJECTED = "rejected"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def order(self) -> int:
        return list(JobStatus).index(self)


class JobPriority(Enum):
    """Urgency of a job application."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    DESPERATE = "desperate"

    @property
    def order(self) -> int:
        return list(JobPriority).index(self)


class MatchScoreCategory(Enum):
    """Bucket of an AI match score."""
    LOW = "low"  # 1-3
    MID = "mid"  # 4-6
    HIGH = "high"  # 7-10


MIN_MATCH_SCORE = 1
MAX_MATCH_SCORE = 10


def _parse_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class JobRecord:
    """A tracked job application."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    company_name: str = ""
    job_title: str = ""
    status: JobStatus = JobStatus.APPLIED
    priority: JobPriority = JobPriority.MEDIUM
    platform: Optional[str] = None
    city: Optional[str] = None
    application_link: Optional[str] = None
    salary_range: Optional[str] = None
    notes: Optional[str] = None
    date_applied: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.now)
    last_activity_at: datetime = field(default_factory=datetime.now)
    match_score: Optional[int] = None  # 1-10, None until computed
    resume_file_path: Optional[str] = None

    @property
    def is_desperate(self) -> bool:
        return self.priority == JobPriority.DESPERATE

    @property
    def can_be_scored(self) -> bool:
        """Whether the record has everything the match-score pipeline needs."""
        return bool(self.resume_file_path and self.application_link)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "company_name": self.company_name,
            "job_title": self.job_title,
            "status": self.status.value,
            "priority": self.priority.value,
            "platform": self.platform,
            "city": self.city,
            "application_link": self.application_link,
            "salary_range": self.salary_range,
            "notes": self.notes,
            "date_applied": self.date_applied.isoformat() if self.date_applied else None,
            "created_at": self.created_at.isoformat(),
            "last_activity_at": self.last_activity_at.isoformat(),
            "match_score": self.match_score,
            "resume_file_path": self.resume_file_path,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JobRecord":
        return cls(
            id=data.get("id") or str(uuid.uuid4()),
            company_name=data.get("company_name", ""),
            job_title=data.get("job_title", ""),
            status=JobStatus(data.get("status", JobStatus.APPLIED.value)),
            priority=JobPriority(data.get("priority", JobPriority.MEDIUM.value)),
            platform=data.get("platform"),
            city=data.get("city"),
            application_link=data.get("application_link"),
            salary_range=data.get("salary_range"),
            notes=data.get("notes"),
            date_applied=_parse_datetime(data.get("date_applied")),
            created_at=_parse_datetime(data.get("created_at")) or datetime.now(),
            last_activity_at=_parse_datetime(data.get("last_activity_at")) or datetime.now(),
            match_score=data.get("match_score"),
            resume_file_path=data.get("resume_file_path"),
        )


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a successful match-score pipeline run."""
    job_id: str
    score: int

    def to_dict(self) -> dict:
        return {"job_id": self.job_id, "score": self.score}
