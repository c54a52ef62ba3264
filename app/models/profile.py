"""Candidate profile model."""

from sqlalchemy import Boolean, Column, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base, JSONType


class Profile(Base):
    """Resume/skills record owned by exactly one candidate."""

    __tablename__ = "profiles"

    candidate_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        unique=True, nullable=False, index=True,
    )
    headline = Column(String(150), nullable=True)
    summary = Column(Text, nullable=True)
    skills = Column(JSONType, default=list)

    # Ordered lists of dicts, shapes enforced by app.schemas.profile
    experience = Column(JSONType, default=list)
    education = Column(JSONType, default=list)

    resume_url = Column(Text, nullable=True)
    contact = Column(JSONType, default=dict)  # {"phone", "linkedin", "github", "portfolio"}
    is_visible = Column(Boolean, default=True, nullable=False)

    # Relationships
    candidate = relationship("User", back_populates="profile")

    def __repr__(self):
        return f"<Profile {self.candidate_id}>"
