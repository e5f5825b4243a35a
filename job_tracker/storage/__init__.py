"""
File storage for uploaded resumes.
"""

from .resume_storage import ResumeStorage

__all__ = [
    "ResumeStorage",
]
