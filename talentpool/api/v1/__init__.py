"""API v1 routes."""

from fastapi import APIRouter

from talentpool.api.v1 import applications, auth, job_offers

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(auth.user_router, tags=["Authentication"])
api_router.include_router(job_offers.router, prefix="/job-offers", tags=["Job Offers"])
api_router.include_router(applications.router, prefix="/applications", tags=["Applications"])
