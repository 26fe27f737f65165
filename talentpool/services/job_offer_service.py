"""
Job Offer Service
Recruiter/admin authority over the job offer lifecycle and role-appropriate listings
"""

from typing import Optional, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from talentpool.core.errors import FieldValidationError
from talentpool.core.principal import AdminCaller, Caller, RecruiterCaller
from talentpool.models.job_offer import JobOffer
from talentpool.repositories.job_application_repository import JobApplicationRepository
from talentpool.repositories.job_offer_repository import JobOfferRepository
from talentpool.services.resume_storage import ResumeStorage
from talentpool.utils.constants import SALARY_RANGE_MESSAGE
from talentpool.utils.helpers import today

logger = structlog.get_logger(__name__)


class JobOfferService:
    """
    Enforces ownership rules before touching job offers.

    Every denial returns None/False rather than raising: the caller cannot tell
    "does not exist" from "not yours", and routers map both to 403.
    """

    def __init__(
        self,
        db: AsyncSession,
        offers: Optional[JobOfferRepository] = None,
        storage: Optional[ResumeStorage] = None,
    ):
        self.db = db
        self.offers = offers or JobOfferRepository(db)
        self.applications = JobApplicationRepository(db)
        self.storage = storage or ResumeStorage()

    @staticmethod
    def can_manage(caller: Optional[Caller], offer: JobOffer) -> bool:
        """Admins and the owning recruiter may mutate an offer."""
        if isinstance(caller, AdminCaller):
            return True
        return isinstance(caller, RecruiterCaller) and offer.user_id == caller.user_id

    @classmethod
    def can_view(cls, caller: Optional[Caller], offer: JobOffer) -> bool:
        """Open offers are public to authenticated users; the rest only to owner/admin."""
        if caller is None:
            return False
        return offer.is_open(today()) or cls.can_manage(caller, offer)

    @staticmethod
    def _check_salary_range(offer: JobOffer, changes: dict) -> None:
        """The stored row merged with the changes must keep salary_max >= salary_min."""
        salary_min = changes.get("salary_min", offer.salary_min)
        salary_max = changes.get("salary_max", offer.salary_max)
        if salary_min is not None and salary_max is not None and salary_max < salary_min:
            raise FieldValidationError({"salary_max": [SALARY_RANGE_MESSAGE]})

    async def list_for_caller(self, caller: Optional[Caller]) -> Optional[Sequence[JobOffer]]:
        """Recruiters see all of their own offers; everyone else sees open offers."""
        if caller is None:
            return None
        if isinstance(caller, RecruiterCaller):
            return await self.offers.list_by_recruiter(caller.user_id)
        return await self.offers.list_active(today())

    async def find(self, offer_id: int) -> Optional[JobOffer]:
        """Raw lookup without visibility rules."""
        return await self.offers.find(offer_id)

    async def create(self, caller: Optional[Caller], data: dict) -> Optional[JobOffer]:
        if not isinstance(caller, RecruiterCaller):
            logger.info("job_offer_create_denied", caller=repr(caller))
            return None

        offer = await self.offers.create({**data, "user_id": caller.user_id})
        await self.db.commit()
        logger.info("job_offer_created", job_offer_id=offer.id, recruiter_id=caller.user_id)
        return offer

    async def update(self, caller: Optional[Caller], offer_id: int, data: dict) -> Optional[JobOffer]:
        """Apply a partial update; only the supplied fields change."""
        offer = await self.offers.find(offer_id)
        if offer is None or not self.can_manage(caller, offer):
            logger.info("job_offer_update_denied", job_offer_id=offer_id, caller=repr(caller))
            return None

        data = {field: value for field, value in data.items() if field not in ("id", "user_id")}
        self._check_salary_range(offer, data)
        offer = await self.offers.update(offer, data)
        await self.db.commit()
        logger.info("job_offer_updated", job_offer_id=offer.id, fields=sorted(data))
        return offer

    async def delete(self, caller: Optional[Caller], offer_id: int) -> bool:
        """Hard delete; the offer's applications go with it."""
        offer = await self.offers.find(offer_id)
        if offer is None or not self.can_manage(caller, offer):
            logger.info("job_offer_delete_denied", job_offer_id=offer_id, caller=repr(caller))
            return False

        cv_paths = [
            application.cv_path
            for application in await self.applications.list_by_job_offer(offer_id)
            if application.cv_path
        ]
        await self.offers.delete(offer)
        await self.db.commit()

        for cv_path in cv_paths:
            self.storage.delete(cv_path)
        logger.info("job_offer_deleted", job_offer_id=offer_id, resumes_deleted=len(cv_paths))
        return True

    async def statistics(
        self, caller: Optional[Caller], recruiter_id: Optional[int] = None
    ) -> Optional[dict]:
        """
        Offer counts for one recruiter.

        Recruiters only get their own numbers. Admins name a recruiter, or get
        platform-wide numbers when they don't.
        """
        if isinstance(caller, RecruiterCaller):
            if recruiter_id is not None and recruiter_id != caller.user_id:
                return None
            offers = await self.offers.list_by_recruiter(caller.user_id)
        elif isinstance(caller, AdminCaller):
            if recruiter_id is None:
                offers = await self.offers.list_all()
            else:
                offers = await self.offers.list_by_recruiter(recruiter_id)
        else:
            return None

        current = today()
        return {
            "total_offers": len(offers),
            "active_offers": sum(1 for offer in offers if offer.is_active),
            "expired_offers": sum(1 for offer in offers if offer.is_expired(current)),
        }
