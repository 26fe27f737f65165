"""
Job Offers API
Role-filtered listing for everyone, lifecycle for recruiters and admins
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from talentpool.api.deps import (
    get_current_caller,
    get_job_application_service,
    get_job_offer_service,
    require_recruiter,
    require_recruiter_or_admin,
)
from talentpool.core.principal import Caller
from talentpool.models.user import User
from talentpool.schemas.job_application import ApplicationListResponse, ApplicationResponse
from talentpool.schemas.job_offer import (
    JobOfferCreate,
    JobOfferCreatedResponse,
    JobOfferDetailResponse,
    JobOfferListResponse,
    JobOfferResponse,
    JobOfferStatisticsResponse,
    JobOfferUpdate,
    MessageResponse,
)
from talentpool.services.job_application_service import JobApplicationService
from talentpool.services.job_offer_service import JobOfferService

router = APIRouter()

UNAUTHORIZED = "Unauthorized access"


def _forbidden() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)


@router.get("", response_model=JobOfferListResponse)
async def list_job_offers(
    caller: Caller = Depends(get_current_caller),
    service: JobOfferService = Depends(get_job_offer_service),
):
    """
    List job offers

    **Auth**: any authenticated user

    Recruiters get all of their own offers, active or not. Candidates and
    admins get the offers that are active and not expired.
    """
    offers = await service.list_for_caller(caller)
    if offers is None:
        raise _forbidden()
    return JobOfferListResponse(job_offers=[JobOfferResponse.model_validate(o) for o in offers])


@router.post("", response_model=JobOfferCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_job_offer(
    offer_in: JobOfferCreate,
    _: User = Depends(require_recruiter),
    caller: Caller = Depends(get_current_caller),
    service: JobOfferService = Depends(get_job_offer_service),
):
    """Create a job offer owned by the calling recruiter."""
    offer = await service.create(caller, offer_in.model_dump())
    if offer is None:
        raise _forbidden()
    return JobOfferCreatedResponse(
        message="Job offer created successfully",
        job_offer=JobOfferResponse.model_validate(offer),
    )


@router.get("/statistics", response_model=JobOfferStatisticsResponse)
async def job_offer_statistics(
    recruiter_id: Optional[int] = Query(None, description="Admins only: recruiter to report on"),
    _: User = Depends(require_recruiter_or_admin),
    caller: Caller = Depends(get_current_caller),
    service: JobOfferService = Depends(get_job_offer_service),
):
    """Total, active and expired offer counts."""
    stats = await service.statistics(caller, recruiter_id)
    if stats is None:
        raise _forbidden()
    return {"statistics": stats}


@router.get("/{job_offer_id}", response_model=JobOfferDetailResponse)
async def get_job_offer(
    job_offer_id: int,
    caller: Caller = Depends(get_current_caller),
    service: JobOfferService = Depends(get_job_offer_service),
):
    """
    Get a single job offer

    Unknown ids answer 404. Inactive or expired offers answer 403 unless the
    caller owns the offer or is an admin.
    """
    offer = await service.find(job_offer_id)
    if offer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job offer not found")
    if not service.can_view(caller, offer):
        raise _forbidden()
    return JobOfferDetailResponse(job_offer=JobOfferResponse.model_validate(offer))


@router.put("/{job_offer_id}", response_model=JobOfferCreatedResponse)
async def update_job_offer(
    job_offer_id: int,
    offer_in: JobOfferUpdate,
    _: User = Depends(require_recruiter_or_admin),
    caller: Caller = Depends(get_current_caller),
    service: JobOfferService = Depends(get_job_offer_service),
):
    """Partially update an offer; only the fields sent change."""
    offer = await service.update(caller, job_offer_id, offer_in.changes())
    if offer is None:
        raise _forbidden()
    return JobOfferCreatedResponse(
        message="Job offer updated successfully",
        job_offer=JobOfferResponse.model_validate(offer),
    )


@router.delete("/{job_offer_id}", response_model=MessageResponse)
async def delete_job_offer(
    job_offer_id: int,
    _: User = Depends(require_recruiter_or_admin),
    caller: Caller = Depends(get_current_caller),
    service: JobOfferService = Depends(get_job_offer_service),
):
    """Delete an offer together with its applications."""
    if not await service.delete(caller, job_offer_id):
        raise _forbidden()
    return MessageResponse(message="Job offer deleted successfully")


@router.get("/{job_offer_id}/applications", response_model=ApplicationListResponse)
async def list_job_offer_applications(
    job_offer_id: int,
    caller: Caller = Depends(get_current_caller),
    service: JobApplicationService = Depends(get_job_application_service),
):
    """Same listing as GET /applications/job/{job_offer_id}."""
    applications = await service.list_for_job_offer(caller, job_offer_id)
    if applications is None:
        raise _forbidden()
    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(a) for a in applications]
    )
