"""Job application request/response schemas."""

from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from talentpool.schemas.job_offer import JobOfferBrief
from talentpool.utils.constants import COVER_LETTER_MAX_LENGTH, RECRUITER_NOTES_MAX_LENGTH

ApplicationStatus = Literal["pending", "reviewing", "accepted", "rejected"]


class ApplicationCreate(BaseModel):
    """Fields accepted alongside the optional resume upload."""

    cover_letter: Optional[str] = Field(None, max_length=COVER_LETTER_MAX_LENGTH)


class ApplicationStatusUpdate(BaseModel):
    """Recruiter decision on an application."""

    status: ApplicationStatus
    notes: Optional[str] = Field(None, max_length=RECRUITER_NOTES_MAX_LENGTH)


class CandidateBrief(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class ApplicationResponse(BaseModel):
    """Application row as returned by the API."""

    id: int
    job_offer_id: int
    user_id: int
    status: ApplicationStatus
    cover_letter: Optional[str] = None
    cv_path: Optional[str] = None
    recruiter_notes: Optional[str] = None
    last_status_change: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationDetail(ApplicationResponse):
    """Single application with its offer and candidate."""

    job_offer: Optional[JobOfferBrief] = None
    candidate: Optional[CandidateBrief] = None


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]


class ApplicationDetailResponse(BaseModel):
    application: ApplicationDetail


class ApplicationCreatedResponse(BaseModel):
    message: str
    application: ApplicationResponse


class StatusCounts(BaseModel):
    pending: int = 0
    reviewing: int = 0
    accepted: int = 0
    rejected: int = 0


class OfferApplicationCount(BaseModel):
    title: str
    count: int


class CandidateStatistics(BaseModel):
    total_applications: int
    status_counts: StatusCounts


class RecruiterStatistics(CandidateStatistics):
    total_offers: int
    active_offers: int
    offer_application_counts: Dict[int, OfferApplicationCount]


class AdminStatistics(CandidateStatistics):
    total_offers: int
    active_offers: int
    total_candidates: int
    total_recruiters: int


class ApplicationStatisticsResponse(BaseModel):
    # Most specific shape first so a richer payload is never narrowed
    statistics: Union[AdminStatistics, RecruiterStatistics, CandidateStatistics]
