"""
Resume storage on the local filesystem
Applications only keep the returned relative path; this class owns the files
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import structlog

from talentpool.config import settings
from talentpool.utils.helpers import file_extension

logger = structlog.get_logger(__name__)

RESUME_DIRECTORY = "cvs"


class ResumeStorage:
    """Stores resumes under <root>/cvs/<candidate_id>/cv_<candidate_id>_<timestamp>.<ext>."""

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root or settings.RESUME_STORAGE_DIR).resolve()

    def store(self, candidate_id: int, original_filename: str, content: bytes) -> str:
        """Write the file and return its path relative to the storage root."""
        extension = file_extension(original_filename)
        while True:
            timestamp = datetime.utcnow().strftime("%Y%m%d%H%M%S%f")
            relative_path = f"{RESUME_DIRECTORY}/{candidate_id}/cv_{candidate_id}_{timestamp}.{extension}"
            target = self.root / relative_path
            if not target.exists():
                break

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(content)

        logger.info("resume_stored", candidate_id=candidate_id, path=relative_path, size=len(content))
        return relative_path

    def resolve(self, relative_path: str) -> Path:
        """Absolute path for a stored resume; refuses paths escaping the root."""
        target = (self.root / relative_path).resolve()
        if target != self.root and self.root not in target.parents:
            raise ValueError(f"Resume path outside storage root: {relative_path}")
        return target

    def exists(self, relative_path: Optional[str]) -> bool:
        if not relative_path:
            return False
        try:
            return self.resolve(relative_path).is_file()
        except ValueError:
            return False

    def delete(self, relative_path: Optional[str]) -> None:
        """Remove a stored resume; a missing file is not an error."""
        if not relative_path:
            return
        try:
            target = self.resolve(relative_path)
        except ValueError:
            logger.warning("resume_delete_rejected", path=relative_path)
            return

        if target.exists():
            target.unlink()
            logger.info("resume_deleted", path=relative_path)
            # Also try to remove the candidate directory if empty
            try:
                if not any(target.parent.iterdir()):
                    target.parent.rmdir()
            except OSError:
                pass
        else:
            logger.info("resume_already_missing", path=relative_path)


def get_resume_storage() -> ResumeStorage:
    """FastAPI dependency returning storage rooted at settings.RESUME_STORAGE_DIR."""
    return ResumeStorage()
