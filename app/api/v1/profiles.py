"""Candidate profile endpoints."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import String, and_, cast, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.deps import (
    PageParams,
    get_current_user,
    get_db,
    get_page_params,
    parse_id,
    require_candidate,
    require_employer,
)
from app.db.query import build_order_by, json_list_contains_all, keyword_filter, paginate
from app.models.profile import Profile
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.profile import ProfileListResponse, ProfileResponse, ProfileUpsert
from app.utils.constants import DEFAULT_PROFILE_SORT, PROFILE_SORT_FIELDS
from app.utils.helpers import page_count, parse_list_field

logger = structlog.get_logger(__name__)

router = APIRouter()


async def _load_profile(db: AsyncSession, *criteria) -> Optional[Profile]:
    result = await db.execute(
        select(Profile)
        .options(selectinload(Profile.candidate))
        .where(*criteria)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


@router.post("", response_model=ProfileResponse)
async def create_or_update_profile(
    profile_in: ProfileUpsert,
    response: Response,
    current_user: User = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
):
    """
    Create or update the caller's profile.

    Returns 201 when the profile is created, 200 when an existing one is updated.
    """
    fields = profile_in.to_columns()
    profile = await _load_profile(db, Profile.candidate_id == current_user.id)
    event = "profile_updated"

    if profile is None:
        db.add(Profile(candidate_id=current_user.id, **fields))
        try:
            await db.commit()
        except IntegrityError:
            # A concurrent request created the profile first, apply ours as an update
            await db.rollback()
            profile = await _load_profile(db, Profile.candidate_id == current_user.id)
        else:
            response.status_code = status.HTTP_201_CREATED
            event = "profile_created"

    if profile is not None:
        for field, value in fields.items():
            setattr(profile, field, value)
        await db.commit()

    profile = await _load_profile(db, Profile.candidate_id == current_user.id)
    logger.info(event, candidate_id=str(current_user.id), fields=sorted(fields))
    return profile


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: User = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's own profile."""
    profile = await _load_profile(db, Profile.candidate_id == current_user.id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found for this candidate.",
        )
    return profile


@router.get("", response_model=ProfileListResponse)
async def list_profiles(
    keyword: Optional[str] = Query(None, description="Search headline, summary and experience"),
    skills: Optional[str] = Query(None, description="Comma-separated skills, all must match"),
    sort: str = Query(DEFAULT_PROFILE_SORT, description="Sort field, '-' prefix for descending"),
    paging: PageParams = Depends(get_page_params),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Search visible candidate profiles."""
    filters = [Profile.is_visible.is_(True)]

    if keyword:
        clause = keyword_filter(
            [Profile.headline, Profile.summary, cast(Profile.experience, String)],
            keyword,
        )
        if clause is not None:
            filters.append(clause)

    skill_list = parse_list_field(skills, lowercase=True)
    if skill_list:
        filters.append(json_list_contains_all(Profile.skills, skill_list))

    stmt = (
        select(Profile)
        .options(selectinload(Profile.candidate))
        .where(and_(*filters))
        .order_by(*build_order_by(Profile, sort, PROFILE_SORT_FIELDS, DEFAULT_PROFILE_SORT))
    )
    profiles, count = await paginate(db, stmt, paging.offset, paging.page_size)

    return ProfileListResponse(
        profiles=profiles,
        page=paging.page,
        pages=page_count(count, paging.page_size),
        count=count,
    )


@router.get("/user/{user_id}", response_model=ProfileResponse)
async def get_profile_by_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the visible profile of any user."""
    not_found = "Profile not found or not visible."
    candidate_id = parse_id(user_id, not_found)

    profile = await _load_profile(
        db, Profile.candidate_id == candidate_id, Profile.is_visible.is_(True)
    )
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
    return profile


@router.delete("", response_model=MessageResponse)
async def delete_profile(
    current_user: User = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
):
    """Hard-delete the caller's profile."""
    result = await db.execute(
        delete(Profile)
        .where(Profile.candidate_id == current_user.id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found to delete.")
    await db.commit()

    logger.info("profile_deleted", candidate_id=str(current_user.id))
    return MessageResponse(message="Profile deleted successfully.")
