"""
Job Service - Create, edit, move and delete jobs on the board.

Whenever a job ends up with both a resume and an application link, a
match-score run is dispatched in the background. The create/update itself
succeeds regardless of how that run turns out.
"""

from datetime import datetime
from typing import Optional
import logging

from job_tracker.core.dispatcher import ScoreDispatcher
from job_tracker.core.errors import (
    JobNotFoundError,
    JobStoreError,
    JobValidationError,
    StorageError,
)
from job_tracker.core.models import (
    MAX_MATCH_SCORE,
    MIN_MATCH_SCORE,
    JobPriority,
    JobRecord,
    JobStatus,
    MatchResult,
)
from job_tracker.core.pipeline import MatchScorePipeline
from job_tracker.integrations.job_scraper import is_valid_url
from job_tracker.matching.text_extraction import EXTRACTORS, get_extension
from job_tracker.storage.resume_storage import ResumeStorage
from job_tracker.tracker.job_store import JobStore
from job_tracker.utils.config import Config


class JobService:
    """Board operations on job records."""

    MAX_RESUME_BYTES = 10 * 1024 * 1024

    # Fields a user may set when creating or editing a job
    EDITABLE_FIELDS = (
        "company_name",
        "job_title",
        "status",
        "priority",
        "platform",
        "city",
        "application_link",
        "salary_range",
        "date_applied",
        "notes",
    )

    # Optional text fields where an empty string means "clear it"
    NULLABLE_FIELDS = {
        "platform",
        "city",
        "application_link",
        "salary_range",
        "date_applied",
        "notes",
    }

    def __init__(
        self,
        store: JobStore,
        storage: ResumeStorage,
        pipeline: MatchScorePipeline,
        dispatcher: Optional[ScoreDispatcher] = None,
    ):
        """
        Initialize the job service.

        Args:
            store: Job record store
            storage: Resume file storage
            pipeline: Match-score pipeline, used for synchronous recalculation
            dispatcher: Background runner; without one no automatic scoring happens
        """
        self.store = store
        self.storage = storage
        self.pipeline = pipeline
        self.dispatcher = dispatcher
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_config(cls, config: Config) -> "JobService":
        """Wire up the store, storage, pipeline and dispatcher from configuration."""
        settings = config.pipeline_settings()
        store = JobStore(config.get_data_dir())
        storage = ResumeStorage(settings.storage)
        pipeline = MatchScorePipeline.from_settings(settings, store, storage)
        dispatcher = ScoreDispatcher(pipeline, max_workers=settings.max_workers)
        return cls(store, storage, pipeline, dispatcher)

    def close(self) -> None:
        """Wait for background score runs to finish."""
        if self.dispatcher is not None:
            self.dispatcher.shutdown(wait=True)

    # Reads

    def get_job(self, job_id: str) -> JobRecord:
        job = self.store.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def list_jobs(self, status: Optional[JobStatus] = None) -> list[JobRecord]:
        if status is not None:
            return self.store.get_jobs_by_status(status)
        return self.store.list_jobs()

    def search_jobs(self, query: str) -> list[JobRecord]:
        return self.store.search_jobs(query)

    # Writes

    def create_job(
        self,
        fields: dict,
        resume: Optional[tuple[bytes, str]] = None,
    ) -> JobRecord:
        """
        Create a job, optionally with a resume file.

        Args:
            fields: Job fields; company_name and job_title are required
            resume: Optional (file content, file name)

        Returns:
            The created job

        Raises:
            JobValidationError: Missing or invalid fields, or an unacceptable resume
        """
        allowed = set(self.EDITABLE_FIELDS) | {"match_score", "resume_file_path"}
        values = self._clean_fields(fields, allowed)

        if not values.get("company_name") or not values.get("job_title"):
            raise JobValidationError("Company name and job title are required")

        if resume is not None:
            self._validate_resume(*resume)

        now = datetime.now()
        job = JobRecord(
            company_name=values["company_name"],
            job_title=values["job_title"],
            status=values.get("status") or JobStatus.APPLIED,
            priority=values.get("priority") or JobPriority.MEDIUM,
            platform=values.get("platform"),
            city=values.get("city"),
            application_link=values.get("application_link"),
            salary_range=values.get("salary_range"),
            date_applied=values.get("date_applied"),
            notes=values.get("notes"),
            match_score=values.get("match_score"),
            resume_file_path=values.get("resume_file_path"),
            created_at=now,
            last_activity_at=now,
        )
        job = self.store.create(job)

        if resume is not None:
            # A failed upload does not undo the job
            try:
                job = self._store_resume(job.id, *resume)
            except StorageError as e:
                self.logger.error(f"Error uploading resume for job {job.id}: {e}")

        self._schedule_scoring(job)
        return job

    def update_job(self, job_id: str, fields: dict) -> JobRecord:
        """
        Edit a job.

        Args:
            job_id: ID of the job
            fields: Fields to change; unknown fields are rejected

        Returns:
            Updated job

        Raises:
            JobNotFoundError: No job with this ID
            JobValidationError: Invalid field values
        """
        values = self._clean_fields(fields, set(self.EDITABLE_FIELDS))

        for required in ("company_name", "job_title"):
            if required in values and not values[required]:
                label = required.replace("_", " ").capitalize()
                raise JobValidationError(f"{label} cannot be empty")

        if self.store.get(job_id) is None:
            raise JobNotFoundError(job_id)

        values["last_activity_at"] = datetime.now()
        job = self.store.update(job_id, values)

        self._schedule_scoring(job)
        return job

    def move_job(self, job_id: str, status) -> JobRecord:
        """
        Move a job to another board column.

        Only the status and last activity change, so no score run is started.

        Raises:
            JobNotFoundError: No job with this ID
            JobValidationError: Unknown status
        """
        status = self._parse_enum(JobStatus, status, "status")
        return self.store.update(job_id, {"status": status, "last_activity_at": datetime.now()})

    def attach_resume(self, job_id: str, data: bytes, file_name: str) -> JobRecord:
        """
        Store (or replace) the resume of a job and rescore it.

        Raises:
            JobNotFoundError: No job with this ID
            JobValidationError: Unacceptable resume file
            StorageError: The file could not be stored
        """
        self._validate_resume(data, file_name)

        if self.store.get(job_id) is None:
            raise JobNotFoundError(job_id)

        job = self._store_resume(job_id, data, file_name)
        self._schedule_scoring(job)
        return job

    def delete_job(self, job_id: str) -> bool:
        """
        Delete a job and its stored resume.

        Returns:
            True if deleted, False if not found
        """
        job = self.store.get(job_id)
        if job is None:
            return False

        self.store.delete(job_id)

        if job.resume_file_path:
            try:
                self.storage.delete(job.resume_file_path)
            except StorageError as e:
                self.logger.error(f"Error deleting resume for job {job_id}: {e}")

        return True

    def recalculate_match_score(self, job_id: str) -> MatchResult:
        """
        Recompute a job's match score and wait for the result.

        Raises:
            MatchScoreError: Typed failure of the pipeline run
        """
        return self.pipeline.run(job_id)

    # Helpers

    def _schedule_scoring(self, job: JobRecord) -> None:
        if not job.can_be_scored:
            return
        if self.dispatcher is None:
            self.logger.debug(f"No dispatcher configured, not scoring job {job.id}")
            return
        # The write already succeeded; a scheduling failure only costs the score
        try:
            self.dispatcher.dispatch(job.id)
        except Exception as e:
            self.logger.error(f"Error scheduling match score for job {job.id}: {e}")

    def _store_resume(self, job_id: str, data: bytes, file_name: str) -> JobRecord:
        """Upload the file, point the record at it, then drop older versions."""
        previous = self.store.get(job_id)
        previous_path = previous.resume_file_path if previous else None

        file_path = self.storage.upload(data, job_id, file_name, prune=False)
        try:
            job = self.store.update(
                job_id,
                {"resume_file_path": file_path, "last_activity_at": datetime.now()},
            )
        except (JobNotFoundError, JobStoreError):
            if file_path != previous_path:
                self.storage.delete(file_path)
            raise

        try:
            self.storage.prune_stale(file_path)
        except StorageError as e:
            self.logger.warning(f"Old resume files for job {job_id} were not removed: {e}")
        return job

    def _validate_resume(self, data: bytes, file_name: str) -> None:
        extension = get_extension(file_name)
        if extension not in EXTRACTORS:
            accepted = ", ".join(f".{ext}" for ext in EXTRACTORS)
            raise JobValidationError(f"Only {accepted} files are allowed")
        if len(data) > self.MAX_RESUME_BYTES:
            limit_mb = self.MAX_RESUME_BYTES // (1024 * 1024)
            raise JobValidationError(f"File size must be less than {limit_mb}MB")

    def _clean_fields(self, fields: dict, allowed: set) -> dict:
        """Validate and normalize user-supplied job fields."""
        unknown = set(fields) - allowed
        if unknown:
            raise JobValidationError(f"Unknown job fields: {', '.join(sorted(unknown))}")

        values = {}
        for key, value in fields.items():
            if isinstance(value, str):
                value = value.strip()
                if not value and key in self.NULLABLE_FIELDS:
                    value = None
            values[key] = value

        if values.get("status") is not None:
            values["status"] = self._parse_enum(JobStatus, values["status"], "status")
        if values.get("priority") is not None:
            values["priority"] = self._parse_enum(JobPriority, values["priority"], "priority")

        link = values.get("application_link")
        if link is not None and not is_valid_url(link):
            raise JobValidationError("Application link must be a valid URL")

        date_applied = values.get("date_applied")
        if isinstance(date_applied, str):
            try:
                values["date_applied"] = datetime.fromisoformat(date_applied)
            except ValueError as e:
                raise JobValidationError(f"Invalid date applied: {date_applied}") from e

        score = values.get("match_score")
        if score is not None and (
            not isinstance(score, int) or not MIN_MATCH_SCORE <= score <= MAX_MATCH_SCORE
        ):
            raise JobValidationError(
                f"Match score must be an integer from {MIN_MATCH_SCORE} to {MAX_MATCH_SCORE}"
            )

        return values

    @staticmethod
    def _parse_enum(enum_cls, value, label: str):
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError as e:
            valid = ", ".join(member.value for member in enum_cls)
            raise JobValidationError(f"Invalid {label}: {value} (valid: {valid})") from e
