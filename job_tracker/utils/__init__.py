"""
Utility modules for the job tracker application.
"""

from .config import (
    Config,
    FetcherSettings,
    PipelineSettings,
    ScorerSettings,
    StorageSettings,
)
from .logging_utils import setup_logging

__all__ = [
    "Config",
    "FetcherSettings",
    "PipelineSettings",
    "ScorerSettings",
    "StorageSettings",
    "setup_logging",
]
