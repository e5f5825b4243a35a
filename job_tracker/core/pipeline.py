"""
Match-Score Pipeline - Computes and saves the resume match score of a job.

Stages, each a fast-fail before the next (more expensive) one:

    load job -> check resume -> check application link
      -> download resume -> extract resume text
      -> fetch job description -> score -> persist match_score

Nothing is cached between runs and nothing is retried. The job record is
only written in the last stage, and only the match_score field.
"""

from contextlib import contextmanager
from typing import Callable, Optional
import logging

from job_tracker.core.errors import (
    InsufficientContentError,
    InsufficientResumeTextError,
    JobNotFoundError,
    MatchScoreError,
    MissingApplicationLinkError,
    MissingResumeError,
    ScorePersistError,
    StorageError,
    StorageUnavailableError,
)
from job_tracker.core.models import JobRecord, MatchResult
from job_tracker.integrations.job_scraper import JobDescriptionFetcher
from job_tracker.matching.match_scorer import MatchScorer
from job_tracker.matching.text_extraction import extract_text
from job_tracker.storage.resume_storage import ResumeStorage
from job_tracker.tracker.job_store import JobStore
from job_tracker.utils.config import PipelineSettings


class Stage:
    """Names of the pipeline stages, attached to every failure."""
    LOAD_JOB = "load_job"
    CHECK_RESUME = "check_resume"
    CHECK_APPLICATION_LINK = "check_application_link"
    DOWNLOAD_RESUME = "download_resume"
    EXTRACT_RESUME_TEXT = "extract_resume_text"
    FETCH_JOB_DESCRIPTION = "fetch_job_description"
    SCORE = "score"
    PERSIST_SCORE = "persist_score"


class MatchScorePipeline:
    """Runs the match-score pipeline for one job at a time."""

    MIN_TEXT_LENGTH = 50

    def __init__(
        self,
        store: JobStore,
        storage: ResumeStorage,
        fetcher: JobDescriptionFetcher,
        scorer: MatchScorer,
        extractor: Callable[[bytes, str], str] = extract_text,
        min_resume_length: int = MIN_TEXT_LENGTH,
        min_description_length: int = MIN_TEXT_LENGTH,
    ):
        """
        Initialize the pipeline with its collaborators.

        Args:
            store: Job record store
            storage: Resume file storage
            fetcher: Job description fetcher
            scorer: AI match scorer
            extractor: Resume text extractor (bytes, file name) -> text
            min_resume_length: Shortest usable resume text
            min_description_length: Shortest usable job description
        """
        self.store = store
        self.storage = storage
        self.fetcher = fetcher
        self.scorer = scorer
        self.extractor = extractor
        self.min_resume_length = min_resume_length
        self.min_description_length = min_description_length
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_settings(
        cls,
        settings: PipelineSettings,
        store: JobStore,
        storage: Optional[ResumeStorage] = None,
    ) -> "MatchScorePipeline":
        """Build a pipeline with default collaborators configured from settings."""
        return cls(
            store=store,
            storage=storage or ResumeStorage(settings.storage),
            fetcher=JobDescriptionFetcher(settings.fetcher),
            scorer=MatchScorer(settings.scorer),
            min_resume_length=settings.min_resume_length,
            min_description_length=settings.fetcher.min_content_length,
        )

    @contextmanager
    def _stage(self, job_id: str, stage: str):
        """Tag failures raised inside a stage with the stage name and log them."""
        try:
            yield
        except MatchScoreError as e:
            e.stage = stage
            self.logger.warning(f"Match score for job {job_id} failed at {stage}: [{e.kind}] {e}")
            raise

    def run(self, job_id: str) -> MatchResult:
        """
        Compute and save the match score of a job.

        Args:
            job_id: ID of the job to score

        Returns:
            MatchResult with the saved score

        Raises:
            MatchScoreError: The subclass names what failed; .stage says where
        """
        self.logger.info(f"Calculating match score for job {job_id}")

        with self._stage(job_id, Stage.LOAD_JOB):
            job = self.store.get(job_id)
            if job is None:
                raise JobNotFoundError(job_id)

        with self._stage(job_id, Stage.CHECK_RESUME):
            if not job.resume_file_path:
                raise MissingResumeError(job_id)

        with self._stage(job_id, Stage.CHECK_APPLICATION_LINK):
            if not job.application_link:
                raise MissingApplicationLinkError(job_id)

        resume_text = self._read_resume(job)

        with self._stage(job_id, Stage.FETCH_JOB_DESCRIPTION):
            job_description = self.fetcher.fetch_description(job.application_link)
            if len(job_description) < self.min_description_length:
                raise InsufficientContentError(len(job_description), self.min_description_length)

        with self._stage(job_id, Stage.SCORE):
            score = self.scorer.score(resume_text, job_description)

        with self._stage(job_id, Stage.PERSIST_SCORE):
            try:
                self.store.update(job_id, {"match_score": score})
            except Exception as e:
                raise ScorePersistError(job_id, score, str(e)) from e

        self.logger.info(f"Saved match score {score}/10 for job {job_id}")
        return MatchResult(job_id=job_id, score=score)

    def _read_resume(self, job: JobRecord) -> str:
        """Download the job's resume and extract usable text from it."""
        with self._stage(job.id, Stage.DOWNLOAD_RESUME):
            try:
                data = self.storage.download(job.resume_file_path)
            except (StorageError, OSError) as e:
                raise StorageUnavailableError(str(e)) from e

        with self._stage(job.id, Stage.EXTRACT_RESUME_TEXT):
            resume_text = self.extractor(data, job.resume_file_path)
            if not resume_text or len(resume_text) < self.min_resume_length:
                raise InsufficientResumeTextError(len(resume_text or ""), self.min_resume_length)

        return resume_text
