"""
API Dependencies
Common dependencies for API endpoints (session, caller, services)
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from talentpool.core.principal import Caller, caller_for
from talentpool.core.security import get_current_user, require_role
from talentpool.db.session import get_db
from talentpool.models.user import User
from talentpool.services.job_application_service import JobApplicationService
from talentpool.services.job_offer_service import JobOfferService
from talentpool.services.notifications import StatusChangeNotifier, get_status_notifier
from talentpool.services.resume_storage import ResumeStorage, get_resume_storage
from talentpool.utils.constants import Role

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_caller",
    "get_job_offer_service",
    "get_job_application_service",
    "require_recruiter",
    "require_candidate",
    "require_recruiter_or_admin",
]


async def get_current_caller(current_user: User = Depends(get_current_user)) -> Caller:
    """
    Map the authenticated user to its caller variant.

    A user whose role is not one of the known roles cannot act at all.
    """
    caller: Optional[Caller] = caller_for(current_user)
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized access",
        )
    return caller


def get_job_offer_service(
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_resume_storage),
) -> JobOfferService:
    return JobOfferService(db, storage=storage)


def get_job_application_service(
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_resume_storage),
    notifier: StatusChangeNotifier = Depends(get_status_notifier),
) -> JobApplicationService:
    return JobApplicationService(db, storage=storage, notifier=notifier)


# Role-based fast-fail checks (services repeat them)
require_recruiter = require_role(Role.RECRUITER)
require_candidate = require_role(Role.CANDIDATE)
require_recruiter_or_admin = require_role(Role.RECRUITER, Role.ADMIN)
