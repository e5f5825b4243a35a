"""
Job tracking - record storage and the kanban board view.
"""

from .board import (
    BOARD_COLUMNS,
    BoardColumn,
    format_match_score,
    group_by_column,
    group_by_status,
    render_board,
    score_category,
)
from .job_store import JobStore

__all__ = [
    "BOARD_COLUMNS",
    "BoardColumn",
    "JobStore",
    "format_match_score",
    "group_by_column",
    "group_by_status",
    "render_board",
    "score_category",
]
