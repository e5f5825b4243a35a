"""
Tests for the kanban board view
"""

from datetime import datetime, timedelta

import pytest

from job_tracker.core.models import JobPriority, JobRecord, JobStatus, MatchScoreCategory
from job_tracker.tracker.board import (
    BOARD_COLUMNS,
    format_match_score,
    group_by_column,
    group_by_status,
    render_board,
    score_category,
)


NOW = datetime(2024, 6, 1, 12, 0)


def _job(company, status=JobStatus.APPLIED, priority=JobPriority.MEDIUM, days_ago=0, **fields):
    return JobRecord(
        company_name=company,
        job_title="Engineer",
        status=status,
        priority=priority,
        last_activity_at=NOW - timedelta(days=days_ago),
        **fields,
    )


class TestScoreCategory:
    """Test match score buckets"""

    @pytest.mark.parametrize("score, category", [
        (1, MatchScoreCategory.LOW),
        (3, MatchScoreCategory.LOW),
        (4, MatchScoreCategory.MID),
        (6, MatchScoreCategory.MID),
        (7, MatchScoreCategory.HIGH),
        (10, MatchScoreCategory.HIGH),
    ])
    def test_boundaries(self, score, category):
        assert score_category(score) == category

    def test_format(self):
        assert format_match_score(None) == "N/A"
        assert format_match_score(7) == "7/10"


class TestGrouping:
    """Test column grouping and ordering"""

    def test_every_status_has_a_column(self):
        grouped = group_by_status([_job("Acme", status=JobStatus.OFFER)])

        assert list(grouped) == list(JobStatus)
        assert grouped[JobStatus.DISCOVERED] == []
        assert [j.company_name for j in grouped[JobStatus.OFFER]] == ["Acme"]

    def test_priority_then_recent_activity(self):
        jobs = [
            _job("Low", priority=JobPriority.LOW),
            _job("High stale", priority=JobPriority.HIGH, days_ago=10),
            _job("Desperate", priority=JobPriority.DESPERATE, days_ago=30),
            _job("High fresh", priority=JobPriority.HIGH, days_ago=1),
        ]

        column = group_by_status(jobs)[JobStatus.APPLIED]

        assert [j.company_name for j in column] == ["Desperate", "High fresh", "High stale", "Low"]

    def test_five_board_columns(self):
        grouped = group_by_column([])

        assert [column.title for column in grouped] == [
            "Discovered", "Applied", "Interviewing", "Offer", "Rejected",
        ]
        assert all(members == [] for members in grouped.values())

    def test_interview_stages_share_a_column(self):
        jobs = [
            _job("Screen", status=JobStatus.SCREENING, days_ago=3),
            _job("Tech", status=JobStatus.TECHNICAL, priority=JobPriority.HIGH),
            _job("Final", status=JobStatus.FINAL_ROUND, days_ago=1),
            _job("Offered", status=JobStatus.OFFER),
        ]

        grouped = {column.id: members for column, members in group_by_column(jobs).items()}

        assert [j.company_name for j in grouped["interviewing"]] == ["Tech", "Final", "Screen"]
        assert [j.company_name for j in grouped["offer"]] == ["Offered"]

    def test_every_status_maps_to_one_column(self):
        statuses = [status for column in BOARD_COLUMNS for status in column.statuses]

        assert sorted(statuses, key=lambda s: s.value) == sorted(JobStatus, key=lambda s: s.value)


class TestRender:
    """Test markdown rendering"""

    def test_render_board(self):
        jobs = [
            _job("Acme", match_score=8, days_ago=2),
            _job("Globex", status=JobStatus.REJECTED, priority=JobPriority.DESPERATE),
        ]

        content = render_board(jobs, now=NOW)

        assert content.startswith("# Job Board")
        assert "## Applied (1)" in content
        assert "## Interviewing (0)" in content
        assert "## Final Round" not in content
        assert "🟢 8/10" in content
        assert "2d since activity" in content
        assert "**Globex** - Engineer 🔥" in content
        assert "match N/A" in content

    def test_interviewing_jobs_show_their_stage(self):
        content = render_board([_job("Initech", status=JobStatus.TECHNICAL)], now=NOW)

        assert "## Interviewing (1)" in content
        assert "**Initech** - Engineer [Technical] |" in content
        assert "[Applied]" not in render_board([_job("Acme")], now=NOW)
