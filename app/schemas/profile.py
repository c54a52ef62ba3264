"""Candidate profile schemas."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from app.schemas.common import CamelModel
from app.utils.helpers import parse_list_field
from app.utils.validators import validate_github_url, validate_linkedin_url, validate_url


def _blank_as_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class ExperienceItem(CamelModel):
    """One work experience entry."""

    title: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    location: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("title", "company", "location", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class EducationItem(CamelModel):
    """One education entry."""

    institution: str = Field(..., min_length=1, max_length=255)
    degree: str = Field(..., min_length=1, max_length=255)
    field_of_study: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    grade: Optional[str] = None

    @field_validator("institution", "degree", "field_of_study", "grade", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class ContactInfo(CamelModel):
    """Contact links; each validated when present."""

    phone: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    portfolio: Optional[str] = None

    @field_validator("phone", "linkedin", "github", "portfolio", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        return _blank_as_none(v)

    @field_validator("linkedin")
    @classmethod
    def check_linkedin(cls, v):
        if v is not None and not validate_linkedin_url(v):
            raise ValueError("Please provide a valid LinkedIn profile URL")
        return v

    @field_validator("github")
    @classmethod
    def check_github(cls, v):
        if v is not None and not validate_github_url(v):
            raise ValueError("Please provide a valid GitHub profile URL")
        return v

    @field_validator("portfolio")
    @classmethod
    def check_portfolio(cls, v):
        if v is not None and not validate_url(v):
            raise ValueError("Please provide a valid portfolio URL")
        return v


class ProfileUpsert(CamelModel):
    """
    Create-or-update payload for the caller's profile.

    Only keys present in the request body are written; absent keys keep
    their stored value on update and take the defaults on create.
    """

    headline: Optional[str] = Field(None, max_length=150)
    summary: Optional[str] = Field(None, max_length=2000)
    skills: Optional[List[str]] = None
    experience: Optional[List[ExperienceItem]] = None
    education: Optional[List[EducationItem]] = None
    resume_url: Optional[str] = None
    contact: Optional[ContactInfo] = None
    is_visible: Optional[bool] = None

    @field_validator("headline", "summary", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("skills", mode="before")
    @classmethod
    def parse_skills(cls, v):
        return parse_list_field(v, lowercase=True)

    @field_validator("resume_url", mode="before")
    @classmethod
    def blank_resume_as_none(cls, v):
        return _blank_as_none(v)

    @field_validator("resume_url")
    @classmethod
    def check_resume_url(cls, v):
        if v is not None and not validate_url(v):
            raise ValueError("Please provide a valid URL for the resume")
        return v

    @model_validator(mode="after")
    def check_visibility_not_null(self) -> "ProfileUpsert":
        if "is_visible" in self.model_fields_set and self.is_visible is None:
            raise ValueError("is_visible cannot be null")
        return self

    def to_columns(self) -> dict:
        """Supplied fields as column values (nested models as JSON-ready dicts)."""
        data = self.model_dump(exclude_unset=True, mode="json")
        for key in ("skills", "experience", "education"):
            if key in data and data[key] is None:
                data[key] = []
        if "contact" in data and data["contact"] is None:
            data["contact"] = {}
        return data


class CandidateBrief(CamelModel):
    """Owning candidate embedded in profile and application responses."""

    id: UUID
    name: str
    email: str


class ProfileResponse(CamelModel):
    """Profile response schema."""

    id: UUID
    candidate_id: UUID
    candidate: Optional[CandidateBrief] = None
    headline: Optional[str] = None
    summary: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    experience: List[ExperienceItem] = Field(default_factory=list)
    education: List[EducationItem] = Field(default_factory=list)
    resume_url: Optional[str] = None
    contact: ContactInfo = Field(default_factory=ContactInfo)
    is_visible: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("skills", "experience", "education", mode="before")
    @classmethod
    def none_as_empty_list(cls, v):
        return v or []

    @field_validator("contact", mode="before")
    @classmethod
    def none_as_empty_contact(cls, v):
        return v or {}


class ProfileListResponse(CamelModel):
    """Paginated profile list."""

    profiles: List[ProfileResponse]
    page: int
    pages: int
    count: int
