"""User model."""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class User(Base):
    """User model for authentication."""

    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)  # candidate, employer
    company_name = Column(String(255), nullable=True)  # employers only

    # Relationships
    jobs = relationship("Job", back_populates="employer")
    profile = relationship("Profile", back_populates="candidate", uselist=False)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
