"""
Job Store - Persists job application records, one JSON file per job.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional
import csv
import json
import logging
import os
import threading

from job_tracker.core.errors import JobNotFoundError, JobStoreError
from job_tracker.core.models import JobRecord, JobStatus


class JobStore:
    """Reads and writes job records for the board."""

    # Fields a caller may change through update()
    UPDATABLE_FIELDS = {
        "company_name",
        "job_title",
        "status",
        "priority",
        "platform",
        "city",
        "application_link",
        "salary_range",
        "notes",
        "date_applied",
        "last_activity_at",
        "match_score",
        "resume_file_path",
    }

    def __init__(self, storage_path: str = "./job_tracker_data/jobs"):
        """
        Initialize the job store.

        Args:
            storage_path: Directory for storing job records
        """
        self.storage_path = Path(storage_path)
        self.storage_path.mkdir(parents=True, exist_ok=True)

        self.jobs: dict[str, JobRecord] = {}
        self.logger = logging.getLogger(self.__class__.__name__)
        self._lock = threading.RLock()

        # Load existing jobs
        self._load_jobs()

    def create(self, job: JobRecord) -> JobRecord:
        """
        Add a new job record.

        Args:
            job: Job to store

        Returns:
            The stored job
        """
        with self._lock:
            if job.id in self.jobs:
                raise JobStoreError(f"Job already exists: {job.id}")
            self._save_job(job)
            self.jobs[job.id] = JobRecord.from_dict(job.to_dict())

        self.logger.info(f"Added job: {job.job_title} at {job.company_name}")
        return job

    def get(self, job_id: str) -> Optional[JobRecord]:
        """Get a copy of a job by ID, or None if it does not exist."""
        with self._lock:
            job = self.jobs.get(job_id)
            return JobRecord.from_dict(job.to_dict()) if job else None

    def update(self, job_id: str, fields: dict) -> JobRecord:
        """
        Update some fields of a job.

        The record on disk is replaced in a single write; if the write
        fails the in-memory record is left untouched.

        Args:
            job_id: ID of the job
            fields: Field name to new value

        Returns:
            Updated job

        Raises:
            JobNotFoundError: No job with this ID
            JobStoreError: Unknown field or the write failed
        """
        unknown = set(fields) - self.UPDATABLE_FIELDS
        if unknown:
            raise JobStoreError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with self._lock:
            current = self.jobs.get(job_id)
            if current is None:
                raise JobNotFoundError(job_id)

            data = current.to_dict()
            for key, value in fields.items():
                if isinstance(value, Enum):
                    value = value.value
                elif isinstance(value, datetime):
                    value = value.isoformat()
                data[key] = value

            try:
                updated = JobRecord.from_dict(data)
            except (TypeError, ValueError) as e:
                raise JobStoreError(f"Invalid value for job {job_id}: {e}") from e

            self._save_job(updated)
            self.jobs[job_id] = updated

        self.logger.debug(f"Updated job {job_id}: {', '.join(sorted(fields))}")
        return JobRecord.from_dict(updated.to_dict())

    def delete(self, job_id: str) -> bool:
        """
        Remove a job.

        Returns:
            True if removed, False if not found
        """
        with self._lock:
            if job_id not in self.jobs:
                return False

            filepath = self.storage_path / f"{job_id}.json"
            try:
                if filepath.exists():
                    filepath.unlink()
            except OSError as e:
                raise JobStoreError(f"Failed to delete job {job_id}: {e}") from e

            del self.jobs[job_id]

        self.logger.info(f"Deleted job {job_id}")
        return True

    def list_jobs(self) -> list[JobRecord]:
        """Get all jobs, most recent activity first."""
        with self._lock:
            jobs = [JobRecord.from_dict(job.to_dict()) for job in self.jobs.values()]
        return sorted(jobs, key=lambda j: j.last_activity_at, reverse=True)

    def get_jobs_by_status(self, status: JobStatus) -> list[JobRecord]:
        """Get all jobs in a board column, most recent activity first."""
        return [job for job in self.list_jobs() if job.status == status]

    def search_jobs(self, query: str) -> list[JobRecord]:
        """Find jobs whose company name or title contains the query (case-insensitive)."""
        query_lower = query.lower()
        return [
            job for job in self.list_jobs()
            if query_lower in job.company_name.lower() or query_lower in job.job_title.lower()
        ]

    def get_statistics(self) -> dict:
        """Get statistics about tracked jobs."""
        jobs = self.list_jobs()
        total = len(jobs)

        if total == 0:
            return {
                "total": 0,
                "by_status": {},
                "scored": 0,
                "average_match_score": 0,
            }

        by_status = {}
        for status in JobStatus:
            count = len([job for job in jobs if job.status == status])
            if count > 0:
                by_status[status.value] = count

        scores = [job.match_score for job in jobs if job.match_score is not None]

        return {
            "total": total,
            "by_status": by_status,
            "scored": len(scores),
            "average_match_score": sum(scores) / len(scores) if scores else 0,
        }

    def _save_job(self, job: JobRecord) -> None:
        """Write a job to disk atomically."""
        filepath = self.storage_path / f"{job.id}.json"
        tmp_path = filepath.with_name(f"{job.id}.json.{threading.get_ident()}.tmp")

        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(job.to_dict(), f, indent=2)
            os.replace(tmp_path, filepath)
        except OSError as e:
            self.logger.error(f"Error saving job {job.id}: {e}")
            if tmp_path.exists():
                tmp_path.unlink()
            raise JobStoreError(f"Failed to save job {job.id}: {e}") from e

    def _load_jobs(self) -> None:
        """Load all saved jobs from disk."""
        for filepath in self.storage_path.glob("*.json"):
            try:
                with open(filepath, 'r', encoding='utf-8') as f:
                    data = json.load(f)

                job = JobRecord.from_dict(data)
                self.jobs[job.id] = job

            except Exception as e:
                self.logger.error(f"Error loading {filepath}: {e}")

        self.logger.info(f"Loaded {len(self.jobs)} jobs")

    def export_to_csv(self, filepath: Optional[str] = None) -> str:
        """
        Export all jobs to CSV format.

        Args:
            filepath: Optional custom path for the CSV file

        Returns:
            Path to the exported CSV file
        """
        if filepath is None:
            filepath = str(self.storage_path / "jobs_export.csv")

        jobs = self.list_jobs()

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)

            writer.writerow([
                "ID", "Company", "Title", "Status", "Priority", "Platform",
                "City", "Salary Range", "Match Score", "Date Applied",
                "Last Activity", "Application Link", "Resume",
            ])

            for job in jobs:
                writer.writerow([
                    job.id,
                    job.company_name,
                    job.job_title,
                    job.status.value,
                    job.priority.value,
                    job.platform or "",
                    job.city or "",
                    job.salary_range or "",
                    job.match_score if job.match_score is not None else "",
                    job.date_applied.isoformat() if job.date_applied else "",
                    job.last_activity_at.isoformat(),
                    job.application_link or "",
                    job.resume_file_path or "",
                ])

        self.logger.info(f"Exported {len(jobs)} jobs to {filepath}")
        return filepath
