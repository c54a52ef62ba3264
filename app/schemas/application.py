"""Application schemas."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.common import CamelModel
from app.schemas.job import JobSummary
from app.schemas.profile import CandidateBrief


class ApplicationCreate(CamelModel):
    """Apply payload; the body may be empty."""

    cover_letter: Optional[str] = Field(None, max_length=5000)

    @field_validator("cover_letter", mode="before")
    @classmethod
    def strip_cover_letter(cls, v):
        return v.strip() if isinstance(v, str) else v


class ApplicationStatusUpdate(CamelModel):
    """
    Status change payload.

    ``status`` is kept as a raw value here; the endpoint checks it against
    ``ApplicationStatus`` so an unknown value gets the dedicated message.
    """

    status: Optional[Any] = None


class ApplicationNoteCreate(CamelModel):
    """Employer note payload."""

    note: str = Field(..., min_length=1, max_length=2000)

    @field_validator("note", mode="before")
    @classmethod
    def strip_note(cls, v):
        return v.strip() if isinstance(v, str) else v


class ProfileSnapshot(CamelModel):
    """Candidate data frozen at apply time."""

    name: str = "N/A"
    email: str = "N/A"
    skills: List[str] = Field(default_factory=list)
    headline: str = ""
    resume_url: str = ""


class ApplicationNote(CamelModel):
    """One employer note."""

    by_user: UUID
    note: str
    date: datetime


class ApplicationResponse(CamelModel):
    """Application response schema."""

    id: UUID
    job_id: UUID
    candidate_id: UUID
    employer_id: UUID
    status: str
    application_date: datetime
    cover_letter: Optional[str] = None
    profile_snapshot: ProfileSnapshot = Field(default_factory=ProfileSnapshot)
    notes: List[ApplicationNote] = Field(default_factory=list)
    assignment_submission_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("profile_snapshot", mode="before")
    @classmethod
    def none_as_empty_snapshot(cls, v):
        return v or {}

    @field_validator("notes", mode="before")
    @classmethod
    def none_as_empty_notes(cls, v):
        return v or []


class ApplicationWithCandidate(ApplicationResponse):
    """Application as listed for the job owner."""

    job: Optional[JobSummary] = None
    candidate: Optional[CandidateBrief] = None


class ApplicationWithJob(ApplicationResponse):
    """Application as listed for the applicant."""

    job: Optional[JobSummary] = None


class EmployerBrief(CamelModel):
    """Hiring employer embedded in application details."""

    id: UUID
    name: str
    email: str
    company_name: Optional[str] = None


class ApplicationDetail(ApplicationResponse):
    """Application with both sides populated."""

    job: Optional[JobSummary] = None
    candidate: Optional[CandidateBrief] = None
    employer: Optional[EmployerBrief] = None


class ApplicationWithdrawResponse(CamelModel):
    """Withdraw response."""

    message: str
    application: ApplicationResponse
