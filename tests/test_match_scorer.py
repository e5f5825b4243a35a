"""
Unit tests for AI match scoring
"""

from unittest import mock

import anthropic
import httpx
import pytest

from conftest import model_reply
from job_tracker.core.errors import (
    AuthError,
    InvalidModelResponseError,
    NotConfiguredError,
    RateLimitedError,
    ScorerUnavailableError,
)
from job_tracker.matching.match_scorer import (
    SYSTEM_INSTRUCTION,
    MatchScorer,
    parse_score,
    truncate,
)
from job_tracker.utils.config import ScorerSettings


API_URL = "https://api.anthropic.com/v1/messages"

RESUME = "Python engineer with seven years of backend experience. " * 2
JOB = "Hiring a backend engineer to build Python services on AWS. " * 2


def _status_error(error_cls, status_code):
    request = httpx.Request("POST", API_URL)
    response = httpx.Response(status_code, request=request)
    return error_cls(f"HTTP {status_code}", response=response, body=None)


class TestParseScore:
    """Test parsing of the model reply"""

    @pytest.mark.parametrize("reply, expected", [
        ("7", 7),
        ("1", 1),
        ("10", 10),
        (" 8\n", 8),
        ("6.", 6),
        ("9/10", 9),
    ])
    def test_valid_replies(self, reply, expected):
        assert parse_score(reply) == expected

    @pytest.mark.parametrize("reply", ["0", "11", "-3", "abc", "", "Score: 7"])
    def test_invalid_replies(self, reply):
        with pytest.raises(InvalidModelResponseError):
            parse_score(reply)


class TestTruncate:
    """Test input truncation"""

    def test_short_text_unchanged(self):
        assert truncate("abc", 8000) == "abc"

    def test_exact_limit_unchanged(self):
        text = "x" * 8000
        assert truncate(text, 8000) == text

    def test_long_text_cut_with_marker(self):
        text = "x" * 9000

        result = truncate(text, 8000)

        assert result == "x" * 8000 + "..."
        assert len(result) == 8003


class TestMatchScorer:
    """Test calls to the Anthropic Messages API"""

    def test_returns_score(self, scorer, anthropic_client):
        assert scorer.score(RESUME, JOB) == 7

        _, kwargs = anthropic_client.messages.create.call_args
        assert kwargs["model"] == "claude-sonnet-4-20250514"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 10
        assert kwargs["system"] == SYSTEM_INSTRUCTION
        prompt = kwargs["messages"][0]["content"]
        assert RESUME in prompt
        assert JOB in prompt

    def test_inputs_are_truncated_independently(self, scorer, anthropic_client):
        resume = "r" * 9000
        job = "j" * 100

        scorer.score(resume, job)

        prompt = anthropic_client.messages.create.call_args[1]["messages"][0]["content"]
        assert "r" * 8000 + "..." in prompt
        assert "r" * 8001 not in prompt
        assert "j" * 100 in prompt

    def test_not_configured_makes_no_call(self):
        scorer = MatchScorer(ScorerSettings(api_key=""))

        with mock.patch("job_tracker.matching.match_scorer.anthropic.Anthropic") as client_cls:
            with pytest.raises(NotConfiguredError) as exc_info:
                scorer.score(RESUME, JOB)

        client_cls.assert_not_called()
        assert exc_info.value.kind == "NotConfigured"

    def test_client_built_lazily_without_retries(self, scorer_settings):
        scorer = MatchScorer(scorer_settings)

        with mock.patch("job_tracker.matching.match_scorer.anthropic.Anthropic") as client_cls:
            client_cls.return_value.messages.create.return_value = model_reply("4")
            assert scorer.score(RESUME, JOB) == 4

        client_cls.assert_called_once_with(
            api_key="test-api-key",
            timeout=30.0,
            max_retries=0,
        )

    def test_authentication_error(self, scorer, anthropic_client):
        anthropic_client.messages.create.side_effect = _status_error(anthropic.AuthenticationError, 401)

        with pytest.raises(AuthError):
            scorer.score(RESUME, JOB)

    def test_rate_limit_error(self, scorer, anthropic_client):
        anthropic_client.messages.create.side_effect = _status_error(anthropic.RateLimitError, 429)

        with pytest.raises(RateLimitedError) as exc_info:
            scorer.score(RESUME, JOB)

        assert exc_info.value.transient

    @pytest.mark.parametrize("error", [
        anthropic.APIConnectionError(request=httpx.Request("POST", API_URL)),
        anthropic.APITimeoutError(request=httpx.Request("POST", API_URL)),
        RuntimeError("unexpected"),
    ])
    def test_other_errors_are_unavailable(self, scorer, anthropic_client, error):
        anthropic_client.messages.create.side_effect = error

        with pytest.raises(ScorerUnavailableError) as exc_info:
            scorer.score(RESUME, JOB)

        assert exc_info.value.__cause__ is error

    def test_server_error_is_unavailable(self, scorer, anthropic_client):
        anthropic_client.messages.create.side_effect = _status_error(
            anthropic.InternalServerError, 500
        )

        with pytest.raises(ScorerUnavailableError):
            scorer.score(RESUME, JOB)

    @pytest.mark.parametrize("reply", ["eleven", "0", "11"])
    def test_invalid_reply(self, scorer, anthropic_client, reply):
        anthropic_client.messages.create.return_value = model_reply(reply)

        with pytest.raises(InvalidModelResponseError) as exc_info:
            scorer.score(RESUME, JOB)

        assert exc_info.value.response_text == reply

    def test_empty_reply(self, scorer, anthropic_client):
        anthropic_client.messages.create.return_value = model_reply("")

        with pytest.raises(InvalidModelResponseError):
            scorer.score(RESUME, JOB)
