"""
Board - Kanban view of tracked jobs.

Groups jobs into five columns (the three interview stages share one),
orders each column (highest priority first, then most recent activity)
and renders match-score badges.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from job_tracker.core.models import (
    MAX_MATCH_SCORE,
    MIN_MATCH_SCORE,
    JobRecord,
    JobStatus,
    MatchScoreCategory,
)


@dataclass(frozen=True)
class BoardColumn:
    """A kanban column; one column may hold several statuses."""
    id: str
    title: str
    statuses: tuple[JobStatus, ...]


BOARD_COLUMNS = (
    BoardColumn("discovered", "Discovered", (JobStatus.DISCOVERED,)),
    BoardColumn("applied", "Applied", (JobStatus.APPLIED,)),
    BoardColumn(
        "interviewing",
        "Interviewing",
        (JobStatus.SCREENING, JobStatus.TECHNICAL, JobStatus.FINAL_ROUND),
    ),
    BoardColumn("offer", "Offer", (JobStatus.OFFER,)),
    BoardColumn("rejected", "Rejected", (JobStatus.REJECTED,)),
)


# Upper bound (inclusive) of each score category
SCORE_THRESHOLDS = {
    MatchScoreCategory.LOW: 3,
    MatchScoreCategory.MID: 6,
    MatchScoreCategory.HIGH: MAX_MATCH_SCORE,
}

CATEGORY_ICONS = {
    MatchScoreCategory.LOW: "🔴",
    MatchScoreCategory.MID: "🟡",
    MatchScoreCategory.HIGH: "🟢",
}


def score_category(score: int) -> MatchScoreCategory:
    """Bucket a 1-10 match score into low / mid / high."""
    if score < MIN_MATCH_SCORE or score > MAX_MATCH_SCORE:
        return MatchScoreCategory.LOW

    for category, upper in SCORE_THRESHOLDS.items():
        if score <= upper:
            return category

    return MatchScoreCategory.LOW


def format_match_score(score: Optional[int]) -> str:
    if score is None:
        return "N/A"
    return f"{score}/10"


def days_since_activity(job: JobRecord, now: Optional[datetime] = None) -> int:
    now = now or datetime.now()
    return abs((now - job.last_activity_at).days)


def sort_by_last_activity(jobs: list[JobRecord]) -> list[JobRecord]:
    """Most recent activity first."""
    return sorted(jobs, key=lambda j: j.last_activity_at, reverse=True)


def sort_by_priority(jobs: list[JobRecord]) -> list[JobRecord]:
    """Highest priority first; stable, so ties keep their order."""
    return sorted(jobs, key=lambda j: j.priority.order, reverse=True)


def _order_column(jobs: list[JobRecord]) -> list[JobRecord]:
    return sort_by_priority(sort_by_last_activity(jobs))


def group_by_status(jobs: list[JobRecord]) -> dict[JobStatus, list[JobRecord]]:
    """
    Split jobs by status.

    Every status gets an entry, even an empty one. Each list is ordered by
    priority, with ties broken by most recent activity.
    """
    grouped: dict[JobStatus, list[JobRecord]] = {status: [] for status in JobStatus}

    for job in jobs:
        grouped[job.status].append(job)

    return {status: _order_column(column) for status, column in grouped.items()}


def group_by_column(jobs: list[JobRecord]) -> dict[BoardColumn, list[JobRecord]]:
    """Split jobs into the board columns, ordered like group_by_status."""
    column_of = {status: column for column in BOARD_COLUMNS for status in column.statuses}
    grouped: dict[BoardColumn, list[JobRecord]] = {column: [] for column in BOARD_COLUMNS}

    for job in jobs:
        grouped[column_of[job.status]].append(job)

    return {column: _order_column(members) for column, members in grouped.items()}


def render_board(jobs: list[JobRecord], now: Optional[datetime] = None) -> str:
    """Render the board as markdown, one section per column."""
    grouped = group_by_column(jobs)
    now = now or datetime.now()

    lines = [
        "# Job Board",
        "",
        f"*{len(jobs)} jobs, generated {now.strftime('%Y-%m-%d %H:%M')}*",
        "",
    ]

    for board_column, column in grouped.items():
        lines.append(f"## {board_column.title} ({len(column)})")
        lines.append("")

        if not column:
            lines.append("_No jobs_")
            lines.append("")
            continue

        for job in column:
            badge = format_match_score(job.match_score)
            if job.match_score is not None:
                badge = f"{CATEGORY_ICONS[score_category(job.match_score)]} {badge}"

            flag = " 🔥" if job.is_desperate else ""
            stage = f" [{job.status.label}]" if len(board_column.statuses) > 1 else ""
            days = days_since_activity(job, now)
            lines.append(
                f"- **{job.company_name}** - {job.job_title}{flag}{stage} | "
                f"{job.priority.value} | match {badge} | {days}d since activity | `{job.id[:8]}`"
            )

        lines.append("")

    return "\n".join(lines)

