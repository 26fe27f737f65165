"""
Job Application Service
Candidate/recruiter/admin authority over the application lifecycle,
role-scoped statistics and the resume upload side effect
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from talentpool.config import settings
from talentpool.core.principal import AdminCaller, CandidateCaller, Caller, RecruiterCaller
from talentpool.models.job_application import JobApplication
from talentpool.repositories.job_application_repository import JobApplicationRepository
from talentpool.repositories.job_offer_repository import JobOfferRepository
from talentpool.repositories.user_repository import UserRepository
from talentpool.services.notifications import NullStatusNotifier, StatusChangeNotifier
from talentpool.services.resume_storage import ResumeStorage
from talentpool.utils.constants import APPLICATION_STATUSES, DEFAULT_APPLICATION_STATUS, Role
from talentpool.utils.helpers import today

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UploadedResume:
    """A resume already read from the request."""

    filename: str
    content: bytes


def count_by_status(applications: Iterable[JobApplication]) -> Dict[str, int]:
    counts = {status: 0 for status in APPLICATION_STATUSES}
    for application in applications:
        if application.status in counts:
            counts[application.status] += 1
    return counts


class JobApplicationService:
    """
    Service for applying to offers and reviewing applications.

    Denials return None/False. Applications are readable by their candidate,
    the recruiter owning the offer and admins; status and notes are written by
    the recruiter side, existence by the candidate.
    """

    def __init__(
        self,
        db: AsyncSession,
        storage: Optional[ResumeStorage] = None,
        notifier: Optional[StatusChangeNotifier] = None,
    ):
        self.db = db
        self.applications = JobApplicationRepository(db)
        self.offers = JobOfferRepository(db)
        self.users = UserRepository(db)
        self.storage = storage or ResumeStorage()
        self.notifier = notifier or NullStatusNotifier()

    # ------------------------------------------------------------------ access

    @staticmethod
    def _owns_offer(caller: Optional[Caller], application: JobApplication) -> bool:
        offer = application.job_offer
        return (
            isinstance(caller, RecruiterCaller)
            and offer is not None
            and offer.user_id == caller.user_id
        )

    @classmethod
    def can_review(cls, caller: Optional[Caller], application: JobApplication) -> bool:
        """Admins and the recruiter owning the offer may change status and notes."""
        return isinstance(caller, AdminCaller) or cls._owns_offer(caller, application)

    @classmethod
    def can_view(cls, caller: Optional[Caller], application: JobApplication) -> bool:
        if cls.can_review(caller, application):
            return True
        return isinstance(caller, CandidateCaller) and application.user_id == caller.user_id

    # ------------------------------------------------------------------- reads

    async def find(self, caller: Optional[Caller], application_id: int) -> Optional[JobApplication]:
        application = await self.applications.find(application_id)
        if application is None or not self.can_view(caller, application):
            logger.info("application_view_denied", application_id=application_id, caller=repr(caller))
            return None
        return application

    async def resume_path(self, caller: Optional[Caller], application_id: int) -> Optional[Path]:
        """Absolute path of the stored resume, for callers allowed to see the application."""
        application = await self.find(caller, application_id)
        if application is None or not self.storage.exists(application.cv_path):
            return None
        return self.storage.resolve(application.cv_path)

    async def list_for_job_offer(
        self, caller: Optional[Caller], job_offer_id: int
    ) -> Optional[Sequence[JobApplication]]:
        offer = await self.offers.find(job_offer_id)
        if offer is None:
            return None
        owner = isinstance(caller, RecruiterCaller) and offer.user_id == caller.user_id
        if not (isinstance(caller, AdminCaller) or owner):
            logger.info("job_offer_applications_denied", job_offer_id=job_offer_id, caller=repr(caller))
            return None
        return await self.applications.list_by_job_offer(job_offer_id)

    async def list_mine(self, caller: Optional[Caller]) -> Optional[Sequence[JobApplication]]:
        if not isinstance(caller, CandidateCaller):
            return None
        return await self.applications.list_by_candidate(caller.user_id)

    async def list_recent(
        self, caller: Optional[Caller], limit: int = settings.RECENT_APPLICATIONS_DEFAULT_LIMIT
    ) -> Optional[Sequence[JobApplication]]:
        """Recruiters see applications to their own offers, admins see everything."""
        limit = max(1, min(limit, settings.RECENT_APPLICATIONS_MAX_LIMIT))
        if isinstance(caller, RecruiterCaller):
            return await self.applications.list_recent(limit, recruiter_id=caller.user_id)
        if isinstance(caller, AdminCaller):
            return await self.applications.list_recent(limit)
        return None

    # ------------------------------------------------------------------ writes

    async def apply(
        self,
        caller: Optional[Caller],
        job_offer_id: int,
        data: dict,
        resume: Optional[UploadedResume] = None,
    ) -> Optional[JobApplication]:
        """
        Create a pending application for an open offer.

        Returns None when the caller is not a candidate, the offer is missing or
        closed, or the candidate already applied. The uniqueness constraint backs
        up the duplicate check when two requests race.
        """
        if not isinstance(caller, CandidateCaller):
            return None

        offer = await self.offers.find(job_offer_id)
        if offer is None or not offer.is_open(today()):
            logger.info("apply_rejected_offer_unavailable", job_offer_id=job_offer_id, candidate_id=caller.user_id)
            return None

        existing = await self.applications.find_for_candidate_and_offer(caller.user_id, job_offer_id)
        if existing is not None:
            logger.info("apply_rejected_duplicate", job_offer_id=job_offer_id, candidate_id=caller.user_id)
            return None

        cv_path = None
        if resume is not None:
            cv_path = self.storage.store(caller.user_id, resume.filename, resume.content)

        try:
            application = await self.applications.create(
                {
                    "user_id": caller.user_id,
                    "job_offer_id": job_offer_id,
                    "cover_letter": data.get("cover_letter"),
                    "cv_path": cv_path,
                    "status": DEFAULT_APPLICATION_STATUS,
                    "last_status_change": datetime.utcnow(),
                }
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            self.storage.delete(cv_path)
            logger.warning("apply_rejected_duplicate_race", job_offer_id=job_offer_id, candidate_id=caller.user_id)
            return None
        except Exception:
            # The stored resume must not outlive a failed insert
            self.storage.delete(cv_path)
            raise

        logger.info(
            "application_submitted",
            application_id=application.id,
            job_offer_id=job_offer_id,
            candidate_id=caller.user_id,
            has_resume=cv_path is not None,
        )
        return application

    async def withdraw(self, caller: Optional[Caller], application_id: int) -> bool:
        """Delete an application; only the candidate who submitted it may."""
        application = await self.applications.find(application_id)
        if (
            application is None
            or not isinstance(caller, CandidateCaller)
            or application.user_id != caller.user_id
        ):
            logger.info("application_withdraw_denied", application_id=application_id, caller=repr(caller))
            return False

        cv_path = application.cv_path
        await self.applications.delete(application)
        await self.db.commit()
        self.storage.delete(cv_path)
        logger.info("application_withdrawn", application_id=application_id, candidate_id=caller.user_id)
        return True

    async def update_status(
        self,
        caller: Optional[Caller],
        application_id: int,
        status: str,
        notes: Optional[str] = None,
    ) -> bool:
        """
        Set status (and notes when given) in one transaction.

        last_status_change is stamped on every successful update and never moves
        backwards. The notifier runs after commit.
        """
        if status not in APPLICATION_STATUSES:
            logger.warning("application_status_invalid", application_id=application_id, status=status)
            return False

        application = await self.applications.find(application_id)
        if application is None or not self.can_review(caller, application):
            logger.info("application_status_denied", application_id=application_id, caller=repr(caller))
            return False

        previous_status = application.status
        stamp = datetime.utcnow()
        if application.last_status_change is not None and application.last_status_change > stamp:
            stamp = application.last_status_change

        changes = {"status": status, "last_status_change": stamp}
        if notes is not None:
            changes["recruiter_notes"] = notes

        await self.applications.update(application, changes)
        await self.db.commit()
        logger.info(
            "application_status_updated",
            application_id=application_id,
            previous_status=previous_status,
            status=status,
            notes_updated=notes is not None,
        )

        try:
            await self.notifier.status_changed(application, previous_status)
        except Exception:
            # The update is committed; a failing channel must not turn it into an error
            logger.exception("application_status_notification_failed", application_id=application_id)

        return True

    # -------------------------------------------------------------- statistics

    async def statistics(
        self, caller: Optional[Caller], role: str, user_id: Optional[int] = None
    ) -> Optional[dict]:
        """
        Role-scoped application statistics.

        The requested role must be the caller's own (and user_id, when given, the
        caller's own id). Admins may read any scope; recruiter and candidate scopes
        then need the user_id of the person being looked at.
        """
        if caller is None:
            return None

        if role == Role.ADMIN.value:
            if isinstance(caller, AdminCaller):
                return await self._admin_statistics()
            return None

        if role == Role.RECRUITER.value:
            target = self._scope_target(caller, RecruiterCaller, user_id)
            return None if target is None else await self._recruiter_statistics(target)

        if role == Role.CANDIDATE.value:
            target = self._scope_target(caller, CandidateCaller, user_id)
            return None if target is None else await self._candidate_statistics(target)

        return None

    @staticmethod
    def _scope_target(caller: Caller, variant: type, user_id: Optional[int]) -> Optional[int]:
        if isinstance(caller, AdminCaller):
            return user_id
        if isinstance(caller, variant) and (user_id is None or user_id == caller.user_id):
            return caller.user_id
        return None

    async def _admin_statistics(self) -> dict:
        applications = await self.applications.list_all()
        offers = await self.offers.list_all()
        return {
            "total_applications": len(applications),
            "total_offers": len(offers),
            "active_offers": sum(1 for offer in offers if offer.is_active),
            "status_counts": count_by_status(applications),
            "total_candidates": await self.users.count_by_role(Role.CANDIDATE.value),
            "total_recruiters": await self.users.count_by_role(Role.RECRUITER.value),
        }

    async def _recruiter_statistics(self, recruiter_id: int) -> dict:
        offers = await self.offers.list_by_recruiter(recruiter_id)
        applications = await self.applications.list_by_job_offers(offer.id for offer in offers)

        per_offer = {offer.id: 0 for offer in offers}
        for application in applications:
            per_offer[application.job_offer_id] += 1

        return {
            "total_applications": len(applications),
            "total_offers": len(offers),
            "active_offers": sum(1 for offer in offers if offer.is_active),
            "status_counts": count_by_status(applications),
            "offer_application_counts": {
                offer.id: {"title": offer.title, "count": per_offer[offer.id]} for offer in offers
            },
        }

    async def _candidate_statistics(self, candidate_id: int) -> dict:
        applications = await self.applications.list_by_candidate(candidate_id)
        return {
            "total_applications": len(applications),
            "status_counts": count_by_status(applications),
        }
