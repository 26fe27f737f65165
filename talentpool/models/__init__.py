"""Database models."""

# Import all models in dependency order to ensure proper relationship initialization
from talentpool.models.user import User
from talentpool.models.job_offer import JobOffer
from talentpool.models.job_application import JobApplication

# Export all models
__all__ = [
    "User",
    "JobOffer",
    "JobApplication",
]
