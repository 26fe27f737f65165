"""User model."""

from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from talentpool.db.base import Base


class User(Base):
    """User model for authentication."""

    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="candidate")
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    job_offers = relationship(
        "JobOffer",
        back_populates="recruiter",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    applications = relationship(
        "JobApplication",
        back_populates="candidate",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
