"""Job endpoints - Browse, search and manage job postings."""

import uuid
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import String, and_, cast, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import PageParams, get_db, get_page_params, parse_id, require_employer
from app.db.query import build_order_by, json_list_contains_all, keyword_filter, paginate
from app.models.job import Job
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.job import (
    JobCreate,
    JobListResponse,
    JobResponse,
    JobsBySkillsResponse,
    JobUpdate,
    JobViewResponse,
    check_salary_range,
)
from app.utils.constants import DEFAULT_JOB_SORT, EMPLOYER_JOB_FILTERS, JOB_SORT_FIELDS
from app.utils.helpers import escape_like, page_count, parse_list_field

logger = structlog.get_logger(__name__)

router = APIRouter()

JOB_NOT_FOUND = "Job not found"


async def get_owned_job(db: AsyncSession, job_id: str, user: User, action: str) -> Job:
    """Load a job for mutation: 404 when absent, 403 when ``user`` does not own it."""
    job = await db.get(Job, parse_id(job_id, JOB_NOT_FOUND))
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=JOB_NOT_FOUND)
    if job.employer_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User not authorized to {action} this job",
        )
    return job


@router.get("", response_model=JobListResponse)
async def list_jobs(
    keyword: Optional[str] = Query(None, description="Search title, company, location, description, skills"),
    location: Optional[str] = Query(None, description="Filter by location (case-insensitive, partial match)"),
    job_type: Optional[str] = Query(None, alias="jobType", description="Exact job type (e.g. 'Full-time')"),
    skills: Optional[str] = Query(None, description="Comma-separated skills, all must match"),
    sort: str = Query(DEFAULT_JOB_SORT, description="Sort field, '-' prefix for descending"),
    paging: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
):
    """
    Get paginated list of active jobs with filters.

    **Filters** (ANDed together):
    - `keyword`: any whitespace-separated term matched against title, companyName,
      location, description and skills
    - `location`: case-insensitive partial match
    - `jobType`: exact job type
    - `skills`: comma-separated, the job must list every one

    **Sorting:** `sort` is one of postedDate, title, location, salaryMin, salaryMax,
    views, applicationsCount, createdAt with an optional `-` prefix (default `-postedDate`).
    """
    # Build filters list
    filters = [Job.is_active.is_(True)]

    if keyword:
        clause = keyword_filter(
            [Job.title, Job.company_name, Job.location, Job.description, cast(Job.skills, String)],
            keyword,
        )
        if clause is not None:
            filters.append(clause)

    if location:
        filters.append(Job.location.ilike(f"%{escape_like(location.strip())}%", escape="\\"))

    if job_type:
        filters.append(Job.job_type == job_type)

    skill_list = parse_list_field(skills, lowercase=True)
    if skill_list:
        filters.append(json_list_contains_all(Job.skills, skill_list))

    stmt = (
        select(Job)
        .where(and_(*filters))
        .order_by(*build_order_by(Job, sort, JOB_SORT_FIELDS, DEFAULT_JOB_SORT))
    )
    jobs, count = await paginate(db, stmt, paging.offset, paging.page_size)

    return JobListResponse(
        jobs=jobs,
        page=paging.page,
        pages=page_count(count, paging.page_size),
        count=count,
    )


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_in: JobCreate,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Create a job posting; the company name is taken from the employer's account."""
    data = job_in.model_dump()
    data["job_type"] = job_in.job_type.value

    job = Job(
        employer_id=current_user.id,
        company_name=current_user.company_name or current_user.name,
        **data,
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)

    logger.info("job_created", job_id=str(job.id), employer_id=str(current_user.id))
    return job


@router.get("/employer", response_model=JobListResponse)
async def list_employer_jobs(
    filter_: str = Query("all", alias="filter", description="active, inactive or all"),
    sort: str = Query(DEFAULT_JOB_SORT, description="Sort field, '-' prefix for descending"),
    paging: PageParams = Depends(get_page_params),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's own jobs, including inactive ones."""
    if filter_ not in EMPLOYER_JOB_FILTERS:
        filter_ = "all"

    filters = [Job.employer_id == current_user.id]
    if filter_ == "active":
        filters.append(Job.is_active.is_(True))
    elif filter_ == "inactive":
        filters.append(Job.is_active.is_(False))

    stmt = (
        select(Job)
        .where(and_(*filters))
        .order_by(*build_order_by(Job, sort, JOB_SORT_FIELDS, DEFAULT_JOB_SORT))
    )
    jobs, count = await paginate(db, stmt, paging.offset, paging.page_size)

    return JobListResponse(
        jobs=jobs,
        page=paging.page,
        pages=page_count(count, paging.page_size),
        count=count,
    )


@router.get("/skills", response_model=JobsBySkillsResponse)
async def list_jobs_by_skills(
    skills: Optional[str] = Query(None, description="Comma-separated skills, all must match"),
    db: AsyncSession = Depends(get_db),
):
    """Active jobs that list every requested skill, newest first."""
    skill_list = parse_list_field(skills, lowercase=True)
    if not skill_list:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide skills to search for.",
        )

    stmt = (
        select(Job)
        .where(Job.is_active.is_(True), json_list_contains_all(Job.skills, skill_list))
        .order_by(Job.posted_date.desc(), Job.id.desc())
    )
    jobs = (await db.execute(stmt)).scalars().all()
    return JobsBySkillsResponse(jobs=jobs, count=len(jobs))


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str, db: AsyncSession = Depends(get_db)):
    """Get one active job; inactive jobs are reported as not found."""
    job = await db.get(Job, parse_id(job_id, JOB_NOT_FOUND))
    if job is None or not job.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=JOB_NOT_FOUND)
    return job


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    job_in: JobUpdate,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Partially update an owned job; only supplied fields change."""
    job = await get_owned_job(db, job_id, current_user, "update")

    changes = job_in.model_dump(exclude_unset=True)
    if "job_type" in changes:
        changes["job_type"] = changes["job_type"].value

    try:
        check_salary_range(
            changes.get("salary_min", job.salary_min),
            changes.get("salary_max", job.salary_max),
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    for field, value in changes.items():
        setattr(job, field, value)

    await db.commit()
    await db.refresh(job)

    logger.info("job_updated", job_id=str(job.id), fields=sorted(changes))
    return job


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete an owned job (isActive=false); the row is kept."""
    job = await get_owned_job(db, job_id, current_user, "delete")
    job.is_active = False
    await db.commit()

    logger.info("job_deactivated", job_id=str(job.id))
    return MessageResponse(message="Job removed successfully")


@router.put("/{job_id}/view", response_model=JobViewResponse)
async def increment_job_view(job_id: str, db: AsyncSession = Depends(get_db)):
    """Atomically add one to an active job's view counter."""
    job_uuid: uuid.UUID = parse_id(job_id, "Job not found or not active")

    result = await db.execute(
        update(Job)
        .where(Job.id == job_uuid, Job.is_active.is_(True))
        .values(views=Job.views + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found or not active")

    views = (await db.execute(select(Job.views).where(Job.id == job_uuid))).scalar_one()
    await db.commit()

    return JobViewResponse(message="View count incremented", views=views)
