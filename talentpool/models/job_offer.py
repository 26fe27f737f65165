"""Job offer model."""

from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from talentpool.db.base import Base
from talentpool.utils.helpers import today as current_date


class JobOffer(Base):
    """Job posting owned by the recruiter who created it."""

    __tablename__ = "job_offers"

    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    location = Column(String(255))
    company_name = Column(String(255), nullable=False)
    contract_type = Column(String(100), nullable=False)  # CDI, CDD, Stage, Alternance, Freelance

    # Salary
    salary_min = Column(Numeric(10, 2), nullable=True)
    salary_max = Column(Numeric(10, 2), nullable=True)

    # Details
    requirements = Column(Text, nullable=True)
    benefits = Column(Text, nullable=True)

    # Status
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    expires_at = Column(Date, nullable=True)

    # Owner
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    recruiter = relationship("User", back_populates="job_offers")
    applications = relationship(
        "JobApplication",
        back_populates="job_offer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def is_expired(self, today: Optional[date] = None) -> bool:
        """True once the expiry date has passed (the expiry day itself still counts)."""
        if self.expires_at is None:
            return False
        return self.expires_at < (today or current_date())

    def is_open(self, today: Optional[date] = None) -> bool:
        """Active flag set and not expired."""
        return bool(self.is_active) and not self.is_expired(today)

    def __repr__(self):
        return f"<JobOffer {self.title} by {self.user_id}>"
