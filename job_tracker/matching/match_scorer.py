"""
Match Scorer - Asks an AI model how well a resume fits a job description.

The model is instructed to answer with a single integer from 1 to 10:
- 1-3: Poor match (major gaps in skills, experience, or qualifications)
- 4-6: Moderate match (some alignment, missing key requirements)
- 7-10: Strong match (good alignment with most or all requirements)
"""

from typing import Optional
import logging
import re

import anthropic

from job_tracker.core.errors import (
    AuthError,
    InvalidModelResponseError,
    NotConfiguredError,
    RateLimitedError,
    ScorerUnavailableError,
)
from job_tracker.core.models import MAX_MATCH_SCORE, MIN_MATCH_SCORE
from job_tracker.utils.config import ScorerSettings


SYSTEM_INSTRUCTION = (
    "You are an expert recruiter. Analyze resumes and job descriptions to provide "
    "accurate match scores. Always respond with a single integer between 1 and 10."
)

PROMPT_TEMPLATE = """You are an expert recruiter analyzing the match between a resume and a job description.

Analyze the following resume and job description, then provide a relevancy score from 1 to 10.

Consider these factors:
1. Skills alignment (how well the candidate's skills match the required skills)
2. Experience relevance (how relevant the candidate's experience is to the role)
3. Education match (if education requirements are specified)
4. Overall fit (how well the candidate fits the role overall)

Scoring guidelines:
- 1-3 (Low): Poor match - major gaps in skills, experience, or qualifications
- 4-6 (Mid): Moderate match - some alignment but missing key requirements
- 7-10 (High): Strong match - good alignment with most or all requirements

RESUME:
{resume}

JOB DESCRIPTION:
{job_description}

Provide ONLY a single integer score from 1 to 10. Do not include any explanation, just the number."""

TRUNCATION_MARKER = "..."

_LEADING_INT_RE = re.compile(r"^[+-]?\d+")


def truncate(text: str, limit: int) -> str:
    """Cut text to its first `limit` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def parse_score(response_text: str) -> int:
    """
    Parse the model's reply into a score.

    The leading integer of the reply is used ("7", " 7\\n" and "7." all give 7).

    Raises:
        InvalidModelResponseError: No leading integer, or it is outside 1-10
    """
    match = _LEADING_INT_RE.match(response_text.strip())
    if not match:
        raise InvalidModelResponseError(response_text)

    score = int(match.group(0))
    if score < MIN_MATCH_SCORE or score > MAX_MATCH_SCORE:
        raise InvalidModelResponseError(response_text)

    return score


class MatchScorer:
    """Scores resume / job description fit with the Anthropic Messages API."""

    def __init__(
        self,
        settings: ScorerSettings,
        client: Optional[anthropic.Anthropic] = None,
    ):
        """
        Initialize the scorer.

        Args:
            settings: Model, credential and limits
            client: Pre-built client (mainly for tests); built lazily otherwise
        """
        self.settings = settings
        self._client = client
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def is_configured(self) -> bool:
        return self._client is not None or bool(self.settings.api_key)

    def _get_client(self) -> anthropic.Anthropic:
        if self._client is None:
            self._client = anthropic.Anthropic(
                api_key=self.settings.api_key,
                timeout=self.settings.timeout_seconds,
                max_retries=0,
            )
        return self._client

    def build_prompt(self, resume_text: str, job_description: str) -> str:
        """Build the user prompt, truncating each input independently."""
        limit = self.settings.max_input_chars
        return PROMPT_TEMPLATE.format(
            resume=truncate(resume_text, limit),
            job_description=truncate(job_description, limit),
        )

    def score(self, resume_text: str, job_description: str) -> int:
        """
        Score how well a resume matches a job description.

        Args:
            resume_text: Plain resume text
            job_description: Plain job description text

        Returns:
            Integer score from 1 to 10

        Raises:
            NotConfiguredError: No API key is configured
            AuthError: The API key was rejected
            RateLimitedError: The model provider is rate limiting us
            ScorerUnavailableError: Any other failure calling the model
            InvalidModelResponseError: The reply is not an integer from 1 to 10
        """
        if not self.is_configured:
            raise NotConfiguredError("Anthropic API key is not configured")

        prompt = self.build_prompt(resume_text, job_description)
        client = self._get_client()

        try:
            response = client.messages.create(
                model=self.settings.model,
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
                system=SYSTEM_INSTRUCTION,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AuthenticationError as e:
            self.logger.error(f"Anthropic authentication failed: {e}")
            raise AuthError("Anthropic API key is invalid or not configured") from e
        except anthropic.RateLimitError as e:
            self.logger.warning(f"Anthropic rate limit hit: {e}")
            raise RateLimitedError(
                "Anthropic API rate limit exceeded. Please try again later."
            ) from e
        except Exception as e:
            self.logger.error(f"Anthropic API error: {e}")
            raise ScorerUnavailableError(f"Failed to calculate match score: {e}") from e

        response_text = "".join(
            getattr(block, "text", "") for block in (response.content or [])
        ).strip()

        try:
            score = parse_score(response_text)
        except InvalidModelResponseError:
            self.logger.error(f"Invalid score returned from model: {response_text!r}")
            raise

        self.logger.debug(f"Model returned score {score}")
        return score
