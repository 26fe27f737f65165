"""Job offer persistence."""

from datetime import date
from typing import Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from talentpool.models.job_offer import JobOffer


class JobOfferRepository:
    """Basic persistence for job offers. Flushes, never commits."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, offer_id: int) -> Optional[JobOffer]:
        return await self.db.get(JobOffer, offer_id)

    async def list_all(self) -> Sequence[JobOffer]:
        result = await self.db.execute(select(JobOffer).order_by(JobOffer.created_at.desc(), JobOffer.id.desc()))
        return result.scalars().all()

    async def list_active(self, today: date) -> Sequence[JobOffer]:
        """Offers flagged active whose expiry date, if any, is today or later."""
        query = (
            select(JobOffer)
            .where(
                JobOffer.is_active.is_(True),
                or_(JobOffer.expires_at.is_(None), JobOffer.expires_at >= today),
            )
            .order_by(JobOffer.created_at.desc(), JobOffer.id.desc())
        )
        result = await self.db.execute(query)
        return result.scalars().all()

    async def list_by_recruiter(self, recruiter_id: int) -> Sequence[JobOffer]:
        query = (
            select(JobOffer)
            .where(JobOffer.user_id == recruiter_id)
            .order_by(JobOffer.created_at.desc(), JobOffer.id.desc())
        )
        result = await self.db.execute(query)
        return result.scalars().all()

    async def create(self, data: dict) -> JobOffer:
        offer = JobOffer(**data)
        self.db.add(offer)
        await self.db.flush()
        await self.db.refresh(offer)
        return offer

    async def update(self, offer: JobOffer, data: dict) -> JobOffer:
        for field, value in data.items():
            setattr(offer, field, value)
        await self.db.flush()
        await self.db.refresh(offer)
        return offer

    async def delete(self, offer: JobOffer) -> None:
        await self.db.delete(offer)
        await self.db.flush()
