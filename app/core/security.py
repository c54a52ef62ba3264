"""Security utilities: JWT, password hashing, RBAC."""

import uuid
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

import bcrypt
import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.session import get_db
from app.models.user import User

logger = structlog.get_logger(__name__)

# auto_error=False so a missing header is reported as 401, not 403
security = HTTPBearer(auto_error=False)


class Role(str, Enum):
    """User roles."""

    CANDIDATE = "candidate"
    EMPLOYER = "employer"

    @classmethod
    def parse(cls, value) -> Optional["Role"]:
        """Return the Role for a stored value, or None if it is not a known role."""
        try:
            return cls(value)
        except ValueError:
            return None


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    """Check a password against its bcrypt hash."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


def create_access_token(user_id, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token carrying ``{"id": <user id>}``."""
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode = {"id": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _credentials_exception(detail: str = "Not authorized, token failed") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> dict:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning("token_verification_failed", error=type(e).__name__)
        raise _credentials_exception()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from Bearer token."""
    if credentials is None or not credentials.credentials:
        raise _credentials_exception("Not authorized, no token provided")

    payload = decode_token(credentials.credentials)

    try:
        user_id = uuid.UUID(str(payload.get("id")))
    except ValueError:
        raise _credentials_exception()

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise _credentials_exception()

    return user


def require_role(*allowed_roles: Role):
    """Dependency to check if user has one of the allowed roles."""

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        user_role = Role.parse(current_user.role)

        # Unknown role strings never match
        if user_role is None or user_role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User role {current_user.role} is not authorized to access this route",
            )

        return current_user

    return role_checker


require_employer = require_role(Role.EMPLOYER)
require_candidate = require_role(Role.CANDIDATE)
