"""
Analytics Service
Read-only rollups over jobs, applications and users.
"""

import uuid
from typing import Dict

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import Role
from app.models.application import Application, ApplicationStatus
from app.models.job import Job
from app.models.user import User
from app.utils.constants import TOP_JOBS_LIMIT
from app.utils.helpers import round_average

logger = structlog.get_logger(__name__)


async def get_job_postings_analytics(db: AsyncSession, employer_id: uuid.UUID) -> Dict:
    """Views and applications over every job the employer posted, active or not."""
    result = await db.execute(
        select(Job).where(Job.employer_id == employer_id).order_by(Job.posted_date.desc())
    )
    jobs = result.scalars().all()

    total_views = sum(job.views or 0 for job in jobs)
    total_applications = sum(job.applications_count or 0 for job in jobs)

    return {
        "total_jobs_posted": len(jobs),
        "total_views": total_views,
        "total_applications": total_applications,
        "average_views_per_job": round_average(total_views, len(jobs)),
        "average_applications_per_job": round_average(total_applications, len(jobs)),
        "jobs_analytics": [
            {
                "job_id": job.id,
                "title": job.title,
                "views": job.views or 0,
                "applications_count": job.applications_count or 0,
                "is_active": job.is_active,
                "posted_date": job.posted_date,
            }
            for job in jobs
        ],
    }


async def get_application_status_analytics(db: AsyncSession, employer_id: uuid.UUID) -> Dict:
    """Count applications received by the employer per status; every status is present."""
    result = await db.execute(
        select(Application.status, func.count(Application.id))
        .where(Application.employer_id == employer_id)
        .group_by(Application.status)
    )

    status_counts = {s.value: 0 for s in ApplicationStatus}
    total = 0
    for status_value, count in result.all():
        total += count
        # Unknown stored statuses count towards the total only
        if status_value in status_counts:
            status_counts[status_value] = count

    return {
        "total_applications_received": total,
        "status_counts": status_counts,
    }


async def _count(db: AsyncSession, stmt) -> int:
    return (await db.execute(stmt)).scalar_one()


async def get_platform_analytics(db: AsyncSession) -> Dict:
    """Platform-wide totals plus the jobs with the most applications."""
    total_users = await _count(db, select(func.count(User.id)))
    total_candidates = await _count(
        db, select(func.count(User.id)).where(User.role == Role.CANDIDATE.value)
    )
    total_employers = await _count(
        db, select(func.count(User.id)).where(User.role == Role.EMPLOYER.value)
    )
    total_jobs = await _count(db, select(func.count(Job.id)))
    total_active_jobs = await _count(
        db, select(func.count(Job.id)).where(Job.is_active.is_(True))
    )
    total_applications = await _count(db, select(func.count(Application.id)))

    application_count = func.count(Application.id).label("applications")
    top_jobs = await db.execute(
        select(Job.id, Job.title, Job.company_name, application_count)
        .join(Application, Application.job_id == Job.id)
        .group_by(Job.id, Job.title, Job.company_name)
        .order_by(application_count.desc(), Job.id)
        .limit(TOP_JOBS_LIMIT)
    )

    return {
        "total_users": total_users,
        "total_candidates": total_candidates,
        "total_employers": total_employers,
        "total_jobs": total_jobs,
        "total_active_jobs": total_active_jobs,
        "total_applications": total_applications,
        "average_applications_per_job": round_average(total_applications, total_jobs),
        "top_jobs_by_application": [
            {
                "job_id": row.id,
                "title": row.title,
                "company": row.company_name,
                "applications": row.applications,
            }
            for row in top_jobs.all()
        ],
    }
