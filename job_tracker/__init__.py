"""
Job Tracker - Kanban-style job application tracking with resume match scoring

This application:
1. Tracks job applications on a board (discovered -> offer/rejected)
2. Stores the resume submitted for each application
3. Scrapes the posting behind each application link
4. Scores how well the resume fits the posting (1-10) with an AI model
"""

__version__ = "1.0.0"
__author__ = "Job Tracker"
