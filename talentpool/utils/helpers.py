"""Helper utilities."""

from datetime import date, datetime


def file_extension(filename: str) -> str:
    """Lower-cased extension without the dot, empty when there is none."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def today() -> date:
    """Current UTC date, the reference point for offer expiry."""
    return datetime.utcnow().date()
