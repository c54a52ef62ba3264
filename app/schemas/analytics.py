"""Analytics response schemas."""

from datetime import datetime
from typing import Dict, List
from uuid import UUID

from app.schemas.common import CamelModel


class JobAnalyticsItem(CamelModel):
    job_id: UUID
    title: str
    views: int
    applications_count: int
    is_active: bool
    posted_date: datetime


class JobPostingsAnalytics(CamelModel):
    """Rollup over the caller's jobs."""

    total_jobs_posted: int
    total_views: int
    total_applications: int
    average_views_per_job: float
    average_applications_per_job: float
    jobs_analytics: List[JobAnalyticsItem]


class ApplicationStatusAnalytics(CamelModel):
    """Status histogram over applications received by the caller."""

    total_applications_received: int
    status_counts: Dict[str, int]


class TopJob(CamelModel):
    job_id: UUID
    title: str
    company: str
    applications: int


class PlatformAnalytics(CamelModel):
    """Platform-wide counts."""

    total_users: int
    total_candidates: int
    total_employers: int
    total_jobs: int
    total_active_jobs: int
    total_applications: int
    average_applications_per_job: float
    top_jobs_by_application: List[TopJob]
