"""Job application model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from talentpool.db.base import Base


class JobApplication(Base):
    """One candidate's application to one job offer."""

    __tablename__ = "job_applications"
    __table_args__ = (
        UniqueConstraint("user_id", "job_offer_id", name="unique_candidate_job_offer_application"),
    )

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_offer_id = Column(
        Integer, ForeignKey("job_offers.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Status tracking
    status = Column(String(20), nullable=False, default="pending")  # pending, reviewing, accepted, rejected
    last_status_change = Column(DateTime, nullable=True)

    # Submitted by the candidate
    cover_letter = Column(Text, nullable=True)
    cv_path = Column(String(500), nullable=True)

    # Written by the reviewing recruiter or admin
    recruiter_notes = Column(Text, nullable=True)

    # Relationships
    candidate = relationship("User", back_populates="applications")
    job_offer = relationship("JobOffer", back_populates="applications")

    def __repr__(self):
        return f"<JobApplication {self.user_id} -> {self.job_offer_id} ({self.status})>"
