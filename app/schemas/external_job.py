"""External job schemas (snake_case on the wire, as the client reads them)."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ExternalJob(BaseModel):
    """A third-party posting mapped onto our fields."""

    id: Optional[str] = None
    title: Optional[str] = None
    company: Optional[str] = None
    location: str = "Remote"
    description: Optional[str] = None
    employment_type: Optional[str] = None
    posted_date: Optional[str] = None
    apply_link: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: Optional[str] = None
    requirements: List[Any] = Field(default_factory=list)
    benefits: List[Any] = Field(default_factory=list)
    is_remote: Optional[bool] = None
    source: str = "jsearch"
    external_id: Optional[str] = None
    logo_url: Optional[str] = None
    company_type: Optional[str] = None


class ExternalSearchResult(BaseModel):
    jobs: List[ExternalJob]
    total: int
    page: int
    provider: str = "jsearch"


class ExternalSearchResponse(BaseModel):
    success: bool = True
    data: ExternalSearchResult
    cached: bool = False


class TrendingJobsResponse(BaseModel):
    success: bool = True
    data: List[ExternalJob]
    cached: bool = False


class SyncRequest(BaseModel):
    """Sync payload."""

    query: str = Field("software developer", min_length=1)
    max_jobs: int = Field(50, ge=1, le=500)


class SyncResponse(BaseModel):
    success: bool = True
    message: str
    synced_count: int
    total_fetched: int


class ProviderStatus(BaseModel):
    name: str
    status: str
    configured: bool


class ProvidersStatusData(BaseModel):
    providers: List[ProviderStatus]
    cache_size: int
    cache_capacity: Optional[int] = None
    cache_enabled: bool = True
    cache_backend: str


class ProvidersStatusResponse(BaseModel):
    success: bool = True
    data: ProvidersStatusData
