"""Job schemas for API requests and responses."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from app.models.job import JobType
from app.schemas.common import CamelModel
from app.utils.helpers import parse_list_field, to_naive_utc

# Fields that may be omitted on update but never cleared
NON_NULLABLE_UPDATE_FIELDS = ("title", "description", "location", "job_type", "is_active")


def _check_future_deadline(value: Optional[datetime]) -> Optional[datetime]:
    value = to_naive_utc(value)
    if value is not None and value <= datetime.utcnow():
        raise ValueError("Application deadline must be a future date")
    return value


def check_salary_range(salary_min: Optional[float], salary_max: Optional[float]) -> None:
    """Raise ValueError when both bounds are set and max < min."""
    if salary_min is not None and salary_max is not None and salary_max < salary_min:
        raise ValueError("Maximum salary must be greater than or equal to minimum salary")


class JobFields(CamelModel):
    """Validators shared by create and update payloads."""

    @field_validator("title", "description", "location", mode="before", check_fields=False)
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("requirements", mode="before", check_fields=False)
    @classmethod
    def parse_requirements(cls, v):
        return parse_list_field(v)

    @field_validator("skills", mode="before", check_fields=False)
    @classmethod
    def parse_skills(cls, v):
        return parse_list_field(v, lowercase=True)

    @field_validator("application_deadline", check_fields=False)
    @classmethod
    def check_deadline(cls, v):
        return _check_future_deadline(v)


class JobCreate(JobFields):
    """Job creation payload."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    location: str = Field(..., min_length=1, max_length=255)
    requirements: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    job_type: JobType
    application_deadline: Optional[datetime] = None

    @model_validator(mode="after")
    def check_salary(self) -> "JobCreate":
        check_salary_range(self.salary_min, self.salary_max)
        return self


class JobUpdate(JobFields):
    """
    Partial job update payload.

    Only the keys present in the request are applied (``exclude_unset``);
    the salary range is re-checked by the endpoint against the merged job.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    requirements: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    job_type: Optional[JobType] = None
    application_deadline: Optional[datetime] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def check_required_not_null(self) -> "JobUpdate":
        for name in NON_NULLABLE_UPDATE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class JobResponse(CamelModel):
    """Job response schema."""

    id: UUID
    employer_id: UUID
    title: str
    company_name: str
    location: str
    description: str
    requirements: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    job_type: str
    posted_date: datetime
    application_deadline: Optional[datetime] = None
    is_active: bool
    views: int = 0
    applications_count: int = 0
    is_external: bool = False
    external_id: Optional[str] = None
    source: str = "internal"
    apply_link: Optional[str] = None
    logo_url: Optional[str] = None
    company_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("requirements", "skills", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class JobListResponse(CamelModel):
    """Paginated job list."""

    jobs: List[JobResponse]
    page: int
    pages: int
    count: int


class JobsBySkillsResponse(CamelModel):
    """Jobs matching a skills query."""

    jobs: List[JobResponse]
    count: int


class JobViewResponse(CamelModel):
    """View counter response."""

    message: str
    views: int


class JobSummary(CamelModel):
    """Job summary embedded in application responses."""

    id: UUID
    title: str
    company_name: str
    location: Optional[str] = None
    job_type: Optional[str] = None
    application_deadline: Optional[datetime] = None
