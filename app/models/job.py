"""Job model."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base, JSONType


class JobType(str, enum.Enum):
    """Employment type of a posting."""
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERNSHIP = "Internship"
    TEMPORARY = "Temporary"


class JobSource(str, enum.Enum):
    """Where a posting came from."""
    INTERNAL = "internal"
    JSEARCH = "jsearch"
    ADZUNA = "adzuna"
    REED = "reed"
    INDEED = "indeed"


class Job(Base):
    """Job posting model."""

    __tablename__ = "jobs"
    __table_args__ = (
        Index("idx_jobs_active_posted", "is_active", "posted_date"),
        Index("idx_jobs_external", "external_id", "source"),
    )

    employer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False, index=True)
    company_name = Column(String(255), nullable=False)  # snapshot taken at post time
    location = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)

    # Job details
    requirements = Column(JSONType, default=list)  # ["React", "CSS", ...]
    skills = Column(JSONType, default=list)  # lowercased: ["react", "css", ...]
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    job_type = Column(String(20), nullable=False, index=True)

    posted_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    application_deadline = Column(DateTime, nullable=True)

    # Status
    is_active = Column(Boolean, default=True, nullable=False)

    # Stats
    views = Column(Integer, default=0, nullable=False)
    applications_count = Column(Integer, default=0, nullable=False)

    # External listings
    is_external = Column(Boolean, default=False, nullable=False, index=True)
    external_id = Column(String(255), nullable=True)
    source = Column(String(20), default=JobSource.INTERNAL.value, nullable=False)
    apply_link = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)
    company_type = Column(String(255), nullable=True)

    # Relationships
    employer = relationship("User", back_populates="jobs")
    applications = relationship("Application", back_populates="job")

    def __repr__(self):
        return f"<Job {self.title} at {self.company_name}>"
