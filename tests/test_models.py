"""
Tests for job records and pipeline errors
"""

from datetime import datetime

from job_tracker.core.errors import (
    FetchTimeoutError,
    InvalidModelResponseError,
    MissingResumeError,
    ScorePersistError,
)
from job_tracker.core.models import JobPriority, JobRecord, JobStatus


class TestJobRecord:
    """Test the job record model"""

    def test_dict_round_trip(self):
        job = JobRecord(
            company_name="Acme",
            job_title="Engineer",
            status=JobStatus.FINAL_ROUND,
            priority=JobPriority.DESPERATE,
            date_applied=datetime(2024, 1, 15),
            match_score=9,
            resume_file_path="abc/resume.pdf",
        )

        assert JobRecord.from_dict(job.to_dict()) == job

    def test_from_dict_defaults(self):
        job = JobRecord.from_dict({"company_name": "Acme", "job_title": "Engineer"})

        assert job.id
        assert job.status == JobStatus.APPLIED
        assert job.priority == JobPriority.MEDIUM
        assert job.match_score is None

    def test_can_be_scored(self):
        assert not JobRecord().can_be_scored
        assert not JobRecord(application_link="https://example.com").can_be_scored
        assert JobRecord(
            application_link="https://example.com",
            resume_file_path="abc/resume.pdf",
        ).can_be_scored

    def test_status_labels_and_order(self):
        assert JobStatus.FINAL_ROUND.label == "Final Round"
        assert JobStatus.DISCOVERED.order < JobStatus.OFFER.order
        assert JobPriority.DESPERATE.order > JobPriority.HIGH.order


class TestErrors:
    """Test error metadata"""

    def test_to_dict(self):
        error = MissingResumeError("job-1", stage="check_resume")

        assert error.to_dict() == {
            "kind": "MissingResume",
            "category": "precondition",
            "stage": "check_resume",
            "message": "No resume file found for job job-1",
        }

    def test_transient_categories(self):
        assert FetchTimeoutError("https://example.com", 10).transient
        assert not InvalidModelResponseError("eleven").transient
        assert not MissingResumeError("job-1").transient

    def test_persist_error_keeps_score(self):
        error = ScorePersistError("job-1", 7, "disk full")

        assert error.score == 7
        assert error.category == "persistence"
        assert "10s" in str(FetchTimeoutError("https://example.com", 10))
