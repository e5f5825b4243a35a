"""
Resume Storage - Stores the resume file submitted for each job application.

Files live under <root_dir>/<bucket>/ and are addressed by a relative
storage path of the form "<job_id>/resume.<ext>". Uploading again for the
same job replaces the previous file.
"""

from pathlib import Path, PurePosixPath
from typing import Optional
import logging
import os

from job_tracker.core.errors import StorageError
from job_tracker.utils.config import StorageSettings


class ResumeStorage:
    """Filesystem-backed blob storage for resume files."""

    DEFAULT_EXTENSION = "pdf"

    def __init__(self, settings: Optional[StorageSettings] = None):
        """
        Initialize resume storage.

        Args:
            settings: Root directory and bucket name
        """
        self.settings = settings or StorageSettings()
        self.bucket_path = Path(self.settings.root_dir) / self.settings.bucket
        self.bucket_path.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger(self.__class__.__name__)

    def _resolve(self, file_path: str) -> Path:
        """Map a storage path to a file inside the bucket, rejecting escapes."""
        relative = PurePosixPath(file_path.replace("\\", "/"))
        if not file_path or relative.is_absolute() or ".." in relative.parts:
            raise StorageError(f"Invalid storage path: {file_path!r}")
        return self.bucket_path.joinpath(*relative.parts)

    def upload(self, data: bytes, job_id: str, file_name: str, prune: bool = True) -> str:
        """
        Store a resume for a job, replacing any previous one.

        The new file is written in full before anything is removed, so a
        failed upload leaves the previous resume in place.

        Args:
            data: File content
            job_id: Job the resume belongs to
            file_name: Original file name (its extension is kept)
            prune: Also remove resumes saved under another extension. Pass
                False to keep them until prune_stale() is called.

        Returns:
            Storage path of the saved file
        """
        extension = PurePosixPath(file_name).suffix.lower().lstrip(".") or self.DEFAULT_EXTENSION
        file_path = f"{job_id}/resume.{extension}"
        target = self._resolve(file_path)
        partial = target.with_name(f".{target.name}.partial")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            partial.write_bytes(data)
            os.replace(partial, target)
        except OSError as e:
            self.logger.error(f"Error uploading resume for job {job_id}: {e}")
            self._discard(partial)
            raise StorageError(f"Failed to upload resume: {e}") from e

        self.logger.info(f"Stored resume for job {job_id} at {file_path} ({len(data)} bytes)")

        if prune:
            self.prune_stale(file_path)
        return file_path

    def prune_stale(self, file_path: str) -> int:
        """
        Remove the other resume versions stored next to file_path.

        Returns:
            Number of files removed

        Raises:
            StorageError: A stale file could not be removed
        """
        target = self._resolve(file_path)
        removed = 0

        try:
            for existing in target.parent.glob("resume.*"):
                if existing != target:
                    existing.unlink()
                    removed += 1
        except OSError as e:
            self.logger.error(f"Error removing old resumes next to {file_path}: {e}")
            raise StorageError(f"Failed to remove old resumes: {e}") from e

        if removed:
            self.logger.debug(f"Removed {removed} old resume(s) next to {file_path}")
        return removed

    def _discard(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            self.logger.warning(f"Could not remove partial upload {path}: {e}")


    def download(self, file_path: str) -> bytes:
        """
        Read a stored resume.

        Raises:
            StorageError: The file is missing or unreadable
        """
        target = self._resolve(file_path)

        try:
            return target.read_bytes()
        except FileNotFoundError as e:
            raise StorageError(f"Failed to download resume: {file_path} not found") from e
        except OSError as e:
            self.logger.error(f"Error downloading resume {file_path}: {e}")
            raise StorageError(f"Failed to download resume: {e}") from e

    def exists(self, file_path: str) -> bool:
        return self._resolve(file_path).is_file()

    def delete(self, file_path: str) -> bool:
        """
        Delete a stored resume.

        Returns:
            True if removed, False if it did not exist
        """
        target = self._resolve(file_path)

        if not target.exists():
            return False

        try:
            target.unlink()
            if target.parent != self.bucket_path and not any(target.parent.iterdir()):
                target.parent.rmdir()
        except OSError as e:
            raise StorageError(f"Failed to delete resume: {e}") from e

        return True
