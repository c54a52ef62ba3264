"""Application model."""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base, JSONType


class ApplicationStatus(str, enum.Enum):
    """Lifecycle states of an application."""
    APPLIED = "Applied"
    VIEWED = "Viewed"
    SHORTLISTED = "Shortlisted"
    INTERVIEWING = "Interviewing"
    OFFERED = "Offered"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"


class Application(Base):
    """Job application model."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "candidate_id", name="unique_candidate_job_application"),
    )

    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id"), nullable=False, index=True)
    candidate_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    employer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Status tracking
    status = Column(String(20), default=ApplicationStatus.APPLIED.value, nullable=False, index=True)
    application_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    cover_letter = Column(Text, nullable=True)
    profile_snapshot = Column(JSONType, default=dict)  # frozen at apply time
    notes = Column(JSONType, default=list)  # [{"by_user", "note", "date"}]
    assignment_submission_id = Column(Uuid(as_uuid=True), nullable=True)

    # Relationships
    job = relationship("Job", back_populates="applications")
    candidate = relationship("User", foreign_keys=[candidate_id])
    employer = relationship("User", foreign_keys=[employer_id])

    def __repr__(self):
        return f"<Application {self.candidate_id} -> {self.job_id} ({self.status})>"
