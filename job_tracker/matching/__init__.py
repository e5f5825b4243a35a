"""
Resume text extraction and AI match scoring.
"""

from .match_scorer import MatchScorer
from .text_extraction import extract_text

__all__ = [
    "MatchScorer",
    "extract_text",
]
