"""
Score Dispatcher - Runs match-score pipelines in the background.

Creating or editing a job must not wait for (or fail because of) its match
score. The dispatcher hands each run to a thread pool and reports the
outcome through logging only.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional
import logging

from job_tracker.core.errors import MatchScoreError
from job_tracker.core.models import MatchResult
from job_tracker.core.pipeline import MatchScorePipeline


class ScoreDispatcher:
    """Fire-and-forget execution of match-score runs."""

    def __init__(
        self,
        pipeline: MatchScorePipeline,
        max_workers: int = 4,
        on_complete: Optional[Callable[[str, Optional[MatchResult], Optional[Exception]], None]] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            pipeline: Pipeline to run for each job
            max_workers: Maximum runs in flight at once
            on_complete: Optional observer called as (job_id, result, error)
        """
        self.pipeline = pipeline
        self.on_complete = on_complete
        self.logger = logging.getLogger(self.__class__.__name__)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="match-score",
        )

    def dispatch(self, job_id: str) -> Future:
        """
        Start a match-score run for a job without waiting for it.

        Returns:
            Future of the run; callers are not expected to wait on it
        """
        self.logger.debug(f"Dispatching match score run for job {job_id}")
        future = self._executor.submit(self.pipeline.run, job_id)
        future.add_done_callback(lambda f: self._report(job_id, f))
        return future

    def _report(self, job_id: str, future: Future) -> None:
        """Log the outcome of a finished run."""
        result = None
        error = future.exception()

        if error is None:
            result = future.result()
            self.logger.info(f"Background match score for job {job_id}: {result.score}/10")
        elif isinstance(error, MatchScoreError):
            self.logger.warning(
                f"Background match score for job {job_id} failed "
                f"[{error.kind} at {error.stage}]: {error}"
            )
        else:
            self.logger.error(
                f"Background match score for job {job_id} crashed: {error}",
                exc_info=error,
            )

        if self.on_complete is not None:
            try:
                self.on_complete(job_id, result, error)
            except Exception as e:
                self.logger.error(f"Match score observer failed for job {job_id}: {e}")

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting runs; by default wait for the ones in flight."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ScoreDispatcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)
