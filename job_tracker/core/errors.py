"""
Error taxonomy for the job tracker and the match-score pipeline.

Every pipeline failure is a MatchScoreError subclass carrying:
- kind: stable name callers can switch on
- category: precondition, infrastructure, content or persistence
- stage: pipeline stage the failure originated from (set by the orchestrator)
"""

from typing import Optional


PRECONDITION = "precondition"
INFRASTRUCTURE = "infrastructure"
CONTENT = "content"
PERSISTENCE = "persistence"


class MatchScoreError(Exception):
    """Base exception for match-score pipeline failures."""

    kind = "MatchScoreError"
    category = INFRASTRUCTURE

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    @property
    def transient(self) -> bool:
        """Whether retrying later with the same input may succeed."""
        return self.category == INFRASTRUCTURE

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "category": self.category,
            "stage": self.stage,
            "message": self.message,
        }


# Precondition failures (user-correctable)

class JobNotFoundError(MatchScoreError):
    kind = "JobNotFound"
    category = PRECONDITION

    def __init__(self, job_id: str, stage: Optional[str] = None):
        super().__init__(f"Job not found: {job_id}", stage)
        self.job_id = job_id


class MissingResumeError(MatchScoreError):
    kind = "MissingResume"
    category = PRECONDITION

    def __init__(self, job_id: str, stage: Optional[str] = None):
        super().__init__(f"No resume file found for job {job_id}", stage)
        self.job_id = job_id


class MissingApplicationLinkError(MatchScoreError):
    kind = "MissingApplicationLink"
    category = PRECONDITION

    def __init__(self, job_id: str, stage: Optional[str] = None):
        super().__init__(f"No application link found for job {job_id}", stage)
        self.job_id = job_id


# Collaborator / infrastructure failures (potentially transient)

class StorageUnavailableError(MatchScoreError):
    kind = "StorageUnavailable"


class FetchTimeoutError(MatchScoreError):
    kind = "FetchTimeout"

    def __init__(self, url: str, timeout: float, stage: Optional[str] = None):
        super().__init__(
            f"Request timeout: could not fetch job description from {url} "
            f"within {timeout:g}s",
            stage,
        )
        self.url = url
        self.timeout = timeout


class FetchFailedError(MatchScoreError):
    kind = "FetchFailed"

    def __init__(
        self,
        url: str,
        status_code: Optional[int] = None,
        reason: str = "",
        stage: Optional[str] = None,
    ):
        if status_code is not None:
            message = f"Failed to fetch URL: {status_code} {reason}".rstrip()
        else:
            message = f"Failed to fetch URL {url}: {reason}"
        super().__init__(message, stage)
        self.url = url
        self.status_code = status_code


class ScorerUnavailableError(MatchScoreError):
    kind = "ScorerUnavailable"


class AuthError(MatchScoreError):
    kind = "AuthError"


class RateLimitedError(MatchScoreError):
    kind = "RateLimited"


class NotConfiguredError(MatchScoreError):
    kind = "NotConfigured"


# Content-quality failures (retrying with the same input will not help)

class UnsupportedFormatError(MatchScoreError):
    kind = "UnsupportedFormat"
    category = CONTENT

    def __init__(self, extension: str, stage: Optional[str] = None):
        super().__init__(f"Unsupported file type: {extension or '(none)'}", stage)
        self.extension = extension


class ExtractionError(MatchScoreError):
    kind = "ExtractionFailure"
    category = CONTENT

    def __init__(self, file_format: str, parser_message: str, stage: Optional[str] = None):
        super().__init__(
            f"Failed to extract text from {file_format.upper()}: {parser_message}",
            stage,
        )
        self.file_format = file_format
        self.parser_message = parser_message


class InsufficientResumeTextError(MatchScoreError):
    kind = "InsufficientResumeText"
    category = CONTENT

    def __init__(self, length: int, minimum: int, stage: Optional[str] = None):
        super().__init__(
            f"Could not extract sufficient text from resume "
            f"({length} characters, need {minimum})",
            stage,
        )
        self.length = length
        self.minimum = minimum


class InsufficientContentError(MatchScoreError):
    kind = "InsufficientContent"
    category = CONTENT

    def __init__(self, length: int, minimum: int, stage: Optional[str] = None):
        super().__init__(
            f"Could not extract sufficient job description from the URL "
            f"({length} characters, need {minimum})",
            stage,
        )
        self.length = length
        self.minimum = minimum


class InvalidModelResponseError(MatchScoreError):
    kind = "InvalidModelResponse"
    category = CONTENT

    def __init__(self, response_text: str, stage: Optional[str] = None):
        super().__init__(f"Invalid score returned from AI model: {response_text!r}", stage)
        self.response_text = response_text


class InvalidUrlError(MatchScoreError):
    kind = "InvalidUrl"
    category = CONTENT

    def __init__(self, url: str, stage: Optional[str] = None):
        super().__init__(f"Invalid URL provided: {url!r}", stage)
        self.url = url


# Post-success write failure

class ScorePersistError(MatchScoreError):
    """The score was computed but could not be saved on the job record."""

    kind = "ScorePersistFailure"
    category = PERSISTENCE

    def __init__(self, job_id: str, score: int, reason: str, stage: Optional[str] = None):
        super().__init__(
            f"Computed match score {score} for job {job_id} but failed to save it: {reason}",
            stage,
        )
        self.job_id = job_id
        self.score = score


# Record-layer errors

class JobStoreError(Exception):
    """Raised when the job record store cannot read or write a record."""
    pass


class JobValidationError(Exception):
    """Raised when job fields fail validation."""
    pass


class StorageError(Exception):
    """Raised when the resume storage cannot read or write a file."""
    pass
