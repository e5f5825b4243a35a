"""
Integrations with external job posting pages.
"""

from .job_scraper import JobDescriptionFetcher, SELECTOR_CHAIN

__all__ = [
    "JobDescriptionFetcher",
    "SELECTOR_CHAIN",
]
