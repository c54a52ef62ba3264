"""Database models."""

# Import all models in dependency order to ensure proper relationship initialization

# Base models (no foreign keys)
from app.models.user import User

# Models with foreign keys to users
from app.models.job import Job, JobSource, JobType
from app.models.profile import Profile

# Models with foreign keys to other models
from app.models.application import Application, ApplicationStatus

# Export all models
__all__ = [
    "User",
    "Job",
    "JobType",
    "JobSource",
    "Profile",
    "Application",
    "ApplicationStatus",
]
