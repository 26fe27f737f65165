"""Job application persistence."""

from typing import Iterable, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from talentpool.models.job_application import JobApplication
from talentpool.models.job_offer import JobOffer


class JobApplicationRepository:
    """Basic persistence for job applications. Flushes, never commits."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, application_id: int) -> Optional[JobApplication]:
        """Load an application together with its offer and candidate."""
        query = (
            select(JobApplication)
            .options(
                selectinload(JobApplication.job_offer),
                selectinload(JobApplication.candidate),
            )
            .where(JobApplication.id == application_id)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_for_candidate_and_offer(
        self, candidate_id: int, job_offer_id: int
    ) -> Optional[JobApplication]:
        result = await self.db.execute(
            select(JobApplication).where(
                JobApplication.user_id == candidate_id,
                JobApplication.job_offer_id == job_offer_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> Sequence[JobApplication]:
        result = await self.db.execute(select(JobApplication).order_by(JobApplication.id))
        return result.scalars().all()

    async def list_by_job_offer(self, job_offer_id: int) -> Sequence[JobApplication]:
        result = await self.db.execute(
            select(JobApplication)
            .where(JobApplication.job_offer_id == job_offer_id)
            .order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
        )
        return result.scalars().all()

    async def list_by_job_offers(self, job_offer_ids: Iterable[int]) -> Sequence[JobApplication]:
        ids = list(job_offer_ids)
        if not ids:
            return []
        result = await self.db.execute(
            select(JobApplication).where(JobApplication.job_offer_id.in_(ids))
        )
        return result.scalars().all()

    async def list_by_candidate(self, candidate_id: int) -> Sequence[JobApplication]:
        result = await self.db.execute(
            select(JobApplication)
            .where(JobApplication.user_id == candidate_id)
            .order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
        )
        return result.scalars().all()

    async def list_recent(self, limit: int, recruiter_id: Optional[int] = None) -> Sequence[JobApplication]:
        """Newest applications first, optionally restricted to one recruiter's offers."""
        query = select(JobApplication)
        if recruiter_id is not None:
            query = query.join(JobOffer, JobApplication.job_offer_id == JobOffer.id).where(
                JobOffer.user_id == recruiter_id
            )
        query = query.order_by(JobApplication.created_at.desc(), JobApplication.id.desc()).limit(limit)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def create(self, data: dict) -> JobApplication:
        application = JobApplication(**data)
        self.db.add(application)
        await self.db.flush()
        await self.db.refresh(application)
        return application

    async def update(self, application: JobApplication, data: dict) -> JobApplication:
        for field, value in data.items():
            setattr(application, field, value)
        await self.db.flush()
        return application

    async def delete(self, application: JobApplication) -> None:
        await self.db.delete(application)
        await self.db.flush()
