"""Analytics endpoints (employer only)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, require_employer
from app.models.user import User
from app.schemas.analytics import (
    ApplicationStatusAnalytics,
    JobPostingsAnalytics,
    PlatformAnalytics,
)
from app.services import analytics_service

router = APIRouter()


@router.get("/employer/jobs", response_model=JobPostingsAnalytics)
async def job_postings_analytics(
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Views and application totals over the caller's jobs."""
    return await analytics_service.get_job_postings_analytics(db, current_user.id)


@router.get("/employer/applications", response_model=ApplicationStatusAnalytics)
async def application_status_analytics(
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Application counts per status for the caller's jobs."""
    return await analytics_service.get_application_status_analytics(db, current_user.id)


@router.get("/platform", response_model=PlatformAnalytics)
async def platform_analytics(
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Platform-wide totals."""
    return await analytics_service.get_platform_analytics(db)
