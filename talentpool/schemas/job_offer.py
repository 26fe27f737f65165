"""Job offer request/response schemas."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from talentpool.utils.constants import CONTRACT_TYPES, SALARY_MAX_VALUE, SALARY_RANGE_MESSAGE
from talentpool.utils.helpers import today


def _check_contract_type(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in CONTRACT_TYPES:
        raise ValueError(f"The contract type must be one of: {', '.join(CONTRACT_TYPES)}.")
    return value


def _check_expiry(value: Optional[date]) -> Optional[date]:
    if value is not None and value <= today():
        raise ValueError("The expires at must be a date after today.")
    return value


def _check_salary_range(salary_min: Optional[float], salary_max: Optional[float]) -> None:
    if salary_min is not None and salary_max is not None and salary_max < salary_min:
        raise PydanticCustomError(
            "salary_range",
            SALARY_RANGE_MESSAGE,
            {"field": "salary_max"},
        )


class JobOfferCreate(BaseModel):
    """Payload for publishing a new job offer."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    location: Optional[str] = Field(None, max_length=255)
    company_name: str = Field(..., min_length=1, max_length=255)
    contract_type: str = Field(..., max_length=100, description="CDI, CDD, Stage, Alternance or Freelance")
    salary_min: Optional[float] = Field(None, ge=0, le=SALARY_MAX_VALUE)
    salary_max: Optional[float] = Field(None, ge=0, le=SALARY_MAX_VALUE)
    is_active: bool = True
    expires_at: Optional[date] = Field(None, description="Last day the offer is open (YYYY-MM-DD)")
    requirements: Optional[str] = None
    benefits: Optional[str] = None

    @field_validator("contract_type")
    @classmethod
    def contract_type_allowed(cls, v):
        return _check_contract_type(v)

    @field_validator("expires_at")
    @classmethod
    def expires_after_today(cls, v):
        return _check_expiry(v)

    @model_validator(mode="after")
    def salary_max_not_below_min(self):
        _check_salary_range(self.salary_min, self.salary_max)
        return self


class JobOfferUpdate(BaseModel):
    """Partial update: only the supplied fields change."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, max_length=255)
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contract_type: Optional[str] = Field(None, max_length=100)
    salary_min: Optional[float] = Field(None, ge=0, le=SALARY_MAX_VALUE)
    salary_max: Optional[float] = Field(None, ge=0, le=SALARY_MAX_VALUE)
    is_active: Optional[bool] = None
    expires_at: Optional[date] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None

    @field_validator("title", "description", "company_name", "contract_type", "is_active")
    @classmethod
    def not_null_when_present(cls, v, info):
        if v is None:
            raise ValueError(f"The {info.field_name.replace('_', ' ')} field is required.")
        return v

    @field_validator("contract_type")
    @classmethod
    def contract_type_allowed(cls, v):
        return _check_contract_type(v)

    @field_validator("expires_at")
    @classmethod
    def expires_after_today(cls, v):
        return _check_expiry(v)

    @model_validator(mode="after")
    def salary_max_not_below_min(self):
        _check_salary_range(self.salary_min, self.salary_max)
        return self

    def changes(self) -> dict:
        """Fields explicitly sent by the client."""
        return self.model_dump(exclude_unset=True)


class JobOfferResponse(BaseModel):
    """Job offer as returned by the API."""

    id: int
    title: str
    description: str
    location: Optional[str] = None
    company_name: str
    contract_type: str
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    is_active: bool
    expires_at: Optional[date] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    user_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobOfferBrief(BaseModel):
    """Offer summary embedded in application payloads."""

    id: int
    title: str
    company_name: str
    location: Optional[str] = None
    contract_type: str
    is_active: bool
    user_id: int

    class Config:
        from_attributes = True


class JobOfferListResponse(BaseModel):
    job_offers: List[JobOfferResponse]


class JobOfferDetailResponse(BaseModel):
    job_offer: JobOfferResponse


class JobOfferCreatedResponse(BaseModel):
    message: str
    job_offer: JobOfferResponse


class JobOfferStatistics(BaseModel):
    total_offers: int
    active_offers: int
    expired_offers: int


class JobOfferStatisticsResponse(BaseModel):
    statistics: JobOfferStatistics


class MessageResponse(BaseModel):
    message: str
