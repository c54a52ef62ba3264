"""External job endpoints - Search and import third-party postings."""

from typing import Optional

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_employer
from app.models.job import Job, JobSource
from app.models.user import User
from app.schemas.external_job import (
    ExternalSearchResponse,
    ProvidersStatusResponse,
    SyncRequest,
    SyncResponse,
    TrendingJobsResponse,
)
from app.services.external_jobs_service import (
    ExternalJobsError,
    ExternalJobsService,
    ProviderNotConfiguredError,
    format_location,
    get_external_jobs_service,
    map_employment_type,
    parse_posted_date,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


def _upstream_error(e: ExternalJobsError, detail: str) -> HTTPException:
    if isinstance(e, ProviderNotConfiguredError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


@router.get("/search", response_model=ExternalSearchResponse)
async def search_external_jobs(
    query: str = Query("", description="Search terms"),
    location: str = Query("", description="Location appended to the query"),
    employment_types: str = Query("FULLTIME", description="FULLTIME, PARTTIME, CONTRACTOR, INTERN"),
    page: int = Query(1, ge=1),
    num_pages: int = Query(1, ge=1, le=10),
    date_posted: str = Query("all", description="all, today, 3days, week, month"),
    remote_jobs_only: bool = Query(False),
    current_user: User = Depends(get_current_user),
    service: ExternalJobsService = Depends(get_external_jobs_service),
):
    """Search JSearch; repeated searches are served from the cache."""
    try:
        result, cached = await service.search(
            query=query,
            location=location,
            employment_types=employment_types,
            page=page,
            num_pages=num_pages,
            date_posted=date_posted,
            remote_jobs_only=remote_jobs_only,
        )
    except ExternalJobsError as e:
        raise _upstream_error(e, "Failed to search external jobs")

    return ExternalSearchResponse(data=result, cached=cached)


@router.get("/trending", response_model=TrendingJobsResponse)
async def trending_external_jobs(
    location: str = Query(""),
    category: str = Query("technology"),
    limit: int = Query(10, ge=1, le=50),
    service: ExternalJobsService = Depends(get_external_jobs_service),
):
    """Recent postings for a popular role."""
    try:
        jobs, cached = await service.trending(location=location, category=category, limit=limit)
    except ExternalJobsError as e:
        raise _upstream_error(e, "Failed to fetch trending jobs")

    return TrendingJobsResponse(data=jobs, cached=cached)


@router.post("/sync", response_model=SyncResponse)
async def sync_external_jobs(
    sync_in: Optional[SyncRequest] = Body(None),
    current_user: User = Depends(require_employer),
    service: ExternalJobsService = Depends(get_external_jobs_service),
    db: AsyncSession = Depends(get_db),
):
    """
    Import recent JSearch postings as external jobs owned by the caller.

    Postings already stored (same externalId from jsearch) are skipped, as is
    any posting that fails to save.
    """
    sync_in = sync_in or SyncRequest()
    try:
        raw_jobs = await service.fetch_for_sync(sync_in.query, sync_in.max_jobs)
    except ExternalJobsError as e:
        raise _upstream_error(e, "Failed to sync external jobs")

    employer_id = current_user.id
    synced_count = 0
    for raw in raw_jobs:
        external_id = raw.get("job_id")
        if not external_id:
            continue

        existing = await db.execute(
            select(Job.id).where(
                Job.external_id == external_id,
                Job.source == JobSource.JSEARCH.value,
            )
        )
        if existing.first() is not None:
            continue

        required = [
            s.strip() for s in raw.get("job_required_skills") or []
            if isinstance(s, str) and s.strip()
        ]
        # One commit per posting so a bad one does not undo the rest
        try:
            db.add(Job(
                employer_id=employer_id,
                title=(raw.get("job_title") or "Untitled position")[:100],
                company_name=raw.get("employer_name") or "Unknown",
                location=format_location(raw),
                description=(raw.get("job_description") or "No description provided")[:2000],
                requirements=required,
                skills=[s.lower() for s in required],
                salary_min=raw.get("job_min_salary"),
                salary_max=raw.get("job_max_salary"),
                job_type=map_employment_type(raw.get("job_employment_type")),
                posted_date=parse_posted_date(raw.get("job_posted_at_datetime_utc")),
                is_active=True,
                is_external=True,
                external_id=external_id,
                source=JobSource.JSEARCH.value,
                apply_link=raw.get("job_apply_link"),
                logo_url=raw.get("employer_logo"),
                company_type=raw.get("employer_company_type"),
            ))
            await db.commit()
            synced_count += 1
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("external_job_save_failed", external_id=external_id, error=str(e))

    logger.info("external_jobs_synced", synced=synced_count, fetched=len(raw_jobs))
    return SyncResponse(
        message=f"Successfully synced {synced_count} external jobs",
        synced_count=synced_count,
        total_fetched=len(raw_jobs),
    )


@router.get("/providers/status", response_model=ProvidersStatusResponse)
async def providers_status(
    current_user: User = Depends(get_current_user),
    service: ExternalJobsService = Depends(get_external_jobs_service),
):
    """Provider configuration and reachability, plus cache stats."""
    return ProvidersStatusResponse(data=await service.providers_status())
