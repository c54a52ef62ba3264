"""Authentication schemas."""

from __future__ import annotations  # Enable forward references

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator, model_validator

from app.core.security import Role
from app.schemas.common import CamelModel

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(CamelModel):
    """Register request schema."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")
    role: Role
    company_name: Optional[str] = Field(None, max_length=255)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, v: str) -> str:
        return _check_password_bytes(v)

    @model_validator(mode="after")
    def check_company_name(self) -> "RegisterRequest":
        """Employers must name their company; candidates never carry one."""
        if self.role == Role.EMPLOYER:
            company_name = (self.company_name or "").strip()
            if not company_name:
                raise ValueError("Please provide a company name for employer role")
            self.company_name = company_name
        else:
            self.company_name = None
        return self


class LoginRequest(CamelModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UpdatePasswordRequest(CamelModel):
    """Change-password request schema."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)

    @field_validator("new_password")
    @classmethod
    def check_password_bytes(cls, v: str) -> str:
        return _check_password_bytes(v)


class UserResponse(CamelModel):
    """User response schema."""

    id: UUID
    name: str
    email: str
    role: str
    company_name: Optional[str] = None
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    """Register/login response schema."""

    success: bool = True
    token: str
    user: UserResponse


class MeResponse(CamelModel):
    """Current user response schema."""

    success: bool = True
    data: UserResponse


# Rebuild models to resolve forward references
AuthResponse.model_rebuild()
MeResponse.model_rebuild()
