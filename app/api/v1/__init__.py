"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import analytics, applications, auth, external_jobs, jobs, profiles

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
api_router.include_router(applications.router, prefix="/applications", tags=["Applications"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])
api_router.include_router(external_jobs.router, prefix="/external-jobs", tags=["External Jobs"])
