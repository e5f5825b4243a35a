"""
Main entry point for the job_tracker package.

Usage:
    python -m job_tracker [command] [options]

See 'python -m job_tracker --help' for available commands.
"""

from job_tracker.cli import main

if __name__ == "__main__":
    main()
