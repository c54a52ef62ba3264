"""Authentication endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import (
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)
from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UpdatePasswordRequest,
    UserResponse,
)
from app.schemas.common import SuccessMessageResponse

logger = structlog.get_logger(__name__)

router = APIRouter()

USER_EXISTS = "User already exists"


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new candidate or employer."""
    # Check if user already exists
    result = await db.execute(select(User).where(User.email == request.email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=USER_EXISTS)

    # Create new user
    new_user = User(
        name=request.name,
        email=request.email,
        password_hash=get_password_hash(request.password),
        role=request.role.value,
        company_name=request.company_name,
    )
    db.add(new_user)

    try:
        await db.commit()
    except IntegrityError:
        # Concurrent registration with the same email
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=USER_EXISTS)
    await db.refresh(new_user)

    logger.info("user_registered", user_id=str(new_user.id), role=new_user.role)
    return AuthResponse(
        token=create_access_token(new_user.id),
        user=UserResponse.model_validate(new_user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email and password."""
    result = await db.execute(select(User).where(User.email == request.email))
    user = result.scalar_one_or_none()

    # Same message for unknown email and wrong password
    if not user or not verify_password(request.password, user.password_hash):
        logger.info("login_failed", email=request.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    logger.info("user_logged_in", user_id=str(user.id))
    return AuthResponse(
        token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user."""
    return MeResponse(data=UserResponse.model_validate(current_user))


@router.post("/logout", response_model=SuccessMessageResponse)
async def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy."""
    return SuccessMessageResponse(
        message="User logged out successfully (client-side action required)"
    )


@router.put("/updatepassword", response_model=SuccessMessageResponse)
async def update_password(
    request: UpdatePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change the caller's password after checking the current one."""
    if not verify_password(request.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect current password",
        )

    current_user.password_hash = get_password_hash(request.new_password)
    await db.commit()

    logger.info("password_updated", user_id=str(current_user.id))
    return SuccessMessageResponse(message="Password updated successfully")


@router.post("/forgotpassword", status_code=status.HTTP_501_NOT_IMPLEMENTED)
async def forgot_password():
    """Password reset emails are not implemented."""
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Forgot password functionality not fully implemented yet.",
    )


@router.put("/resetpassword/{token}", status_code=status.HTTP_501_NOT_IMPLEMENTED)
async def reset_password(token: str):
    """Reset tokens are not implemented."""
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Reset password functionality not fully implemented yet.",
    )
