"""Common constants."""

from enum import Enum


class Role(str, Enum):
    """User roles."""

    ADMIN = "admin"
    RECRUITER = "recruiter"
    CANDIDATE = "candidate"


# Application statuses
APPLICATION_STATUSES = [
    "pending",
    "reviewing",
    "accepted",
    "rejected",
]
DEFAULT_APPLICATION_STATUS = "pending"

# Contract types accepted on job offers
CONTRACT_TYPES = ["CDI", "CDD", "Stage", "Alternance", "Freelance"]

# Resume uploads
ALLOWED_RESUME_MIME_TYPES = {
    "pdf": ["application/pdf"],
    "doc": ["application/msword"],
    "docx": ["application/vnd.openxmlformats-officedocument.wordprocessingml.document"],
}
# Browsers and HTTP clients frequently send this for any binary upload
GENERIC_UPLOAD_MIME_TYPES = ["application/octet-stream"]

# Field length limits
COVER_LETTER_MAX_LENGTH = 5000
RECRUITER_NOTES_MAX_LENGTH = 1000

# Salaries are stored as NUMERIC(10, 2)
SALARY_MAX_VALUE = 99_999_999.99
SALARY_RANGE_MESSAGE = "The salary max must be greater than or equal to salary min."
