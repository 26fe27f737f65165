"""Validators."""

from typing import List, Optional

from talentpool.utils.constants import (
    ALLOWED_RESUME_MIME_TYPES,
    GENERIC_UPLOAD_MIME_TYPES,
)
from talentpool.utils.helpers import file_extension


def validate_file_extension(filename: str, allowed_extensions: List[str]) -> bool:
    """Validate file extension."""
    if not filename:
        return False

    extension = file_extension(filename)
    return extension in [ext.lower() for ext in allowed_extensions]


def validate_resume_upload(
    filename: Optional[str],
    content_type: Optional[str],
    size: int,
    allowed_extensions: List[str],
    max_size: int,
) -> List[str]:
    """Check an uploaded resume, returning human readable errors (empty when valid)."""
    errors = []
    allowed = ", ".join(allowed_extensions)

    if not validate_file_extension(filename or "", allowed_extensions):
        errors.append(f"The cv must be a file of type: {allowed}.")
    else:
        extension = file_extension(filename)
        mime = (content_type or "").split(";")[0].strip().lower()
        accepted = ALLOWED_RESUME_MIME_TYPES.get(extension, []) + GENERIC_UPLOAD_MIME_TYPES
        if mime and mime not in accepted:
            errors.append(f"The cv must be a file of type: {allowed}.")

    if size <= 0:
        errors.append("The cv failed to upload.")
    elif size > max_size:
        errors.append(f"The cv may not be greater than {max_size // 1024} kilobytes.")

    return errors
