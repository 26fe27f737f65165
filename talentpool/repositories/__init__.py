"""Data access layer: one repository per entity, query construction only."""

from talentpool.repositories.job_application_repository import JobApplicationRepository
from talentpool.repositories.job_offer_repository import JobOfferRepository
from talentpool.repositories.user_repository import UserRepository

__all__ = ["JobApplicationRepository", "JobOfferRepository", "UserRepository"]
