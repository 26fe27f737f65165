"""
Job Applications API
Candidates apply and withdraw, recruiters review, admins see everything
"""

from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import FileResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from talentpool.api.deps import (
    get_current_caller,
    get_job_application_service,
    require_candidate,
    require_recruiter_or_admin,
)
from talentpool.config import settings
from talentpool.core.errors import FieldValidationError, format_validation_errors
from talentpool.core.principal import Caller
from talentpool.models.user import User
from talentpool.schemas.job_application import (
    ApplicationCreate,
    ApplicationCreatedResponse,
    ApplicationDetail,
    ApplicationDetailResponse,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatisticsResponse,
    ApplicationStatusUpdate,
)
from talentpool.schemas.job_offer import MessageResponse
from talentpool.services.job_application_service import JobApplicationService, UploadedResume
from talentpool.utils.validators import validate_resume_upload

router = APIRouter()

UNAUTHORIZED = "Unauthorized access"
FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _forbidden() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=UNAUTHORIZED)


def _application_list(applications) -> ApplicationListResponse:
    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(a) for a in applications]
    )


async def _read_apply_payload(request: Request) -> Tuple[ApplicationCreate, Optional[UploadedResume]]:
    """
    Parse an apply request sent either as multipart/form-data or as JSON.

    Raises FieldValidationError with every problem found.
    """
    errors: Dict[str, List[str]] = {}
    fields = {}
    upload = None

    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        cover_letter = form.get("cover_letter")
        if cover_letter not in (None, ""):
            fields["cover_letter"] = cover_letter
        cv = form.get("cv")
        if isinstance(cv, UploadFile):
            upload = cv
        elif cv not in (None, ""):
            errors["cv"] = ["The cv must be a file."]
    else:
        body = await request.body()
        if body.strip():
            try:
                payload = await request.json()
            except ValueError:
                raise FieldValidationError({"body": ["The request body must be valid JSON."]})
            if not isinstance(payload, dict):
                raise FieldValidationError({"body": ["The request body must be a JSON object."]})
            if payload.get("cover_letter") is not None:
                fields["cover_letter"] = payload["cover_letter"]
            if payload.get("cv") is not None:
                errors["cv"] = ["The cv must be a file."]

    try:
        data = ApplicationCreate.model_validate(fields)
    except ValidationError as e:
        data = None
        for field, messages in format_validation_errors(e.errors()).items():
            errors.setdefault(field, []).extend(messages)

    resume = None
    if upload is not None:
        # Read one byte past the limit so oversize files are detected without loading them whole
        content = await upload.read(settings.MAX_RESUME_SIZE + 1)
        file_errors = validate_resume_upload(
            upload.filename,
            upload.content_type,
            len(content),
            settings.ALLOWED_RESUME_EXTENSIONS,
            settings.MAX_RESUME_SIZE,
        )
        if file_errors:
            errors.setdefault("cv", []).extend(file_errors)
        else:
            resume = UploadedResume(filename=upload.filename, content=content)

    if errors:
        raise FieldValidationError(errors)
    return data, resume


@router.get("/my", response_model=ApplicationListResponse)
async def my_applications(
    _: User = Depends(require_candidate),
    caller: Caller = Depends(get_current_caller),
    service: JobApplicationService = Depends(get_job_application_service),
):
    """Applications submitted by the calling candidate, newest first."""
    applications = await service.list_mine(caller)
    if applications is None:
        raise _forbidden()
    return _application_list(applications)


@router.get("/statistics", response_model=ApplicationStatisticsResponse)
async def application_statistics(
    role: Optional[str] = Query(None, description="Scope to report on; defaults to the caller's role"),
    user_id: Optional[int] = Query(None, description="Admins only: user to report on"),
    caller: Caller = Depends(get_current_caller),
    service: JobApplicationService = Depends(get_job_application_service),
):
    """
    Application statistics

    **Auth**: any authenticated user

    The shape depends on the scope: admins get platform totals, recruiters
    totals for their offers plus a per-offer count, candidates their own totals.
    """
    stats = await service.statistics(caller, role or caller.role, user_id)
    if stats is None:
        raise _forbidden()
    return {"statistics": stats}


@router.get("/recent", response_model=ApplicationListResponse)
async def recent_applications(
    limit: int = Query(settings.RECENT_APPLICATIONS_DEFAULT_LIMIT),
    _: User = Depends(require_recruiter_or_admin),
    caller: Caller = Depends(get_current_caller),
    service: JobApplicationService = Depends(get_job_application_service),
):
    """Newest applications; recruiters only see those to their own offers."""
    applications = await service.list_recent(caller, limit)
    if applications is None:
        raise _forbidden()
    return _application_list(applications)


@router.get("/job/{job_offer_id}", response_model=ApplicationListResponse)
async def job_offer_applications(
    job_offer_id: int,
    caller: Caller = Depends(get_current_caller),
    service: JobApplicationService = Depends(get_job_application_service),
):
    """Applications received by one offer (owning recruiter or admin)."""
    applications = await service.list_for_job_offer(caller, job_offer_id)
    if applications is None:
        raise _forbidden()
    return _application_list(applications)


@router.post(
    "/job/{job_offer_id}",
    response_model=ApplicationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply_to_job_offer(
    job_offer_id: int,
    request: Request,
    _: User = Depends(require_candidate),
    caller: Caller = Depends(get_current_caller),
    service: JobApplicationService = Depends(get_job_application_service),
):
    """
    Apply to a job offer

    **Auth**: Candidate

    Send `cover_letter` and an optional `cv` file (pdf, doc or docx, up to 2MB)
    as multipart/form-data, or `cover_letter` alone as JSON. Unknown, closed or
    already applied offers all answer the same 400.
    """
    data, resume = await _read_apply_payload(request)

    application = await service.apply(caller, job_offer_id, data.model_dump(), resume)
    if application is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unable to apply to this job offer",
        )
    return ApplicationCreatedResponse(
        message="Application submitted successfully",
        application=ApplicationResponse.model_validate(application),
    )


@router.get("/{application_id}", response_model=ApplicationDetailResponse)
async def get_application(
    application_id: int,
    caller: Caller = Depends(get_current_caller),
    service: JobApplicationService = Depends(get_job_application_service),
):
    """One application with its offer and candidate."""
    application = await service.find(caller, application_id)
    if application is None:
        raise _forbidden()
    return ApplicationDetailResponse(application=ApplicationDetail.model_validate(application))


@router.get("/{application_id}/cv")
async def download_resume(
    application_id: int,
    caller: Caller = Depends(get_current_caller),
    service: JobApplicationService = Depends(get_job_application_service),
):
    """Stream the resume attached to an application."""
    path = await service.resume_path(caller, application_id)
    if path is None:
        raise _forbidden()
    return FileResponse(path, filename=path.name)


@router.put("/{application_id}/status", response_model=MessageResponse)
async def update_application_status(
    application_id: int,
    status_in: ApplicationStatusUpdate,
    caller: Caller = Depends(get_current_caller),
    service: JobApplicationService = Depends(get_job_application_service),
):
    """Change status (and optionally the recruiter notes) of an application."""
    updated = await service.update_status(caller, application_id, status_in.status, status_in.notes)
    if not updated:
        raise _forbidden()
    return MessageResponse(message="Application status updated successfully")


@router.delete("/{application_id}", response_model=MessageResponse)
async def withdraw_application(
    application_id: int,
    caller: Caller = Depends(get_current_caller),
    service: JobApplicationService = Depends(get_job_application_service),
):
    """Withdraw an application (the candidate who submitted it only)."""
    if not await service.withdraw(caller, application_id):
        raise _forbidden()
    return MessageResponse(message="Application withdrawn successfully")
