"""Application endpoints - Apply, review and withdraw."""

from datetime import datetime
from typing import List, Optional

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy import case, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.deps import get_current_user, get_db, parse_id, require_candidate, require_employer
from app.models.application import Application, ApplicationStatus
from app.models.job import Job
from app.models.profile import Profile
from app.models.user import User
from app.schemas.application import (
    ApplicationCreate,
    ApplicationDetail,
    ApplicationNoteCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicationWithCandidate,
    ApplicationWithdrawResponse,
    ApplicationWithJob,
)

logger = structlog.get_logger(__name__)

router = APIRouter()

APPLICATION_NOT_FOUND = "Application not found."
ALREADY_APPLIED = "You have already applied for this job."


async def _get_application(db: AsyncSession, application_id: str, *loads) -> Application:
    result = await db.execute(
        select(Application)
        .options(*[selectinload(rel) for rel in loads])
        .where(Application.id == parse_id(application_id, APPLICATION_NOT_FOUND))
        .execution_options(populate_existing=True)
    )
    application = result.scalar_one_or_none()
    if application is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=APPLICATION_NOT_FOUND)
    return application


async def _build_profile_snapshot(db: AsyncSession, candidate: User) -> dict:
    """Candidate data copied onto the application; never re-synced afterwards."""
    profile = (
        await db.execute(select(Profile).where(Profile.candidate_id == candidate.id))
    ).scalar_one_or_none()

    return {
        "name": candidate.name or "N/A",
        "email": candidate.email or "N/A",
        "skills": list(profile.skills or []) if profile else [],
        "headline": (profile.headline or "") if profile else "",
        "resume_url": (profile.resume_url or "") if profile else "",
    }


@router.post(
    "/job/{job_id}",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply_for_job(
    job_id: str,
    application_in: Optional[ApplicationCreate] = Body(None),
    current_user: User = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
):
    """
    Apply for an active job.

    The job's applicationsCount is incremented by a single UPDATE in the same
    transaction as the application insert.
    """
    job_not_found = "Job not found or no longer active."
    job = await db.get(Job, parse_id(job_id, job_not_found))
    if job is None or not job.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=job_not_found)

    existing = await db.execute(
        select(Application.id).where(
            Application.job_id == job.id,
            Application.candidate_id == current_user.id,
        )
    )
    if existing.first() is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_APPLIED)

    application = Application(
        job_id=job.id,
        candidate_id=current_user.id,
        employer_id=job.employer_id,
        status=ApplicationStatus.APPLIED.value,
        cover_letter=application_in.cover_letter if application_in else None,
        profile_snapshot=await _build_profile_snapshot(db, current_user),
        notes=[],
    )
    db.add(application)

    try:
        await db.flush()
    except IntegrityError:
        # Lost a race against a concurrent apply for the same pair
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_APPLIED)

    await db.execute(
        update(Job)
        .where(Job.id == job.id)
        .values(applications_count=Job.applications_count + 1)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    logger.info(
        "application_created",
        application_id=str(application.id),
        job_id=str(job.id),
        candidate_id=str(current_user.id),
    )
    return application


@router.get("/job/{job_id}", response_model=List[ApplicationWithCandidate])
async def list_job_applications(
    job_id: str,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """List applications for a job the caller owns, newest first."""
    job = await db.get(Job, parse_id(job_id, "Job not found."))
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found.")
    if job.employer_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view applications for this job.",
        )

    result = await db.execute(
        select(Application)
        .options(selectinload(Application.job), selectinload(Application.candidate))
        .where(Application.job_id == job.id)
        .order_by(Application.application_date.desc(), Application.id.desc())
    )
    return result.scalars().all()


@router.get("/candidate/me", response_model=List[ApplicationWithJob])
async def list_my_applications(
    current_user: User = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's own applications, newest first."""
    result = await db.execute(
        select(Application)
        .options(selectinload(Application.job))
        .where(Application.candidate_id == current_user.id)
        .order_by(Application.application_date.desc(), Application.id.desc())
    )
    return result.scalars().all()


@router.get("/{application_id}", response_model=ApplicationDetail)
async def get_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Application details, readable by the applicant and the owning employer."""
    application = await _get_application(
        db, application_id, Application.job, Application.candidate, Application.employer
    )
    if current_user.id not in (application.candidate_id, application.employer_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this application.",
        )
    return application


@router.put("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    status_in: ApplicationStatusUpdate,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """
    Set the status of an application to a job the caller owns.

    Employer statuses may follow each other in any order. ``Withdrawn`` belongs
    to the candidate: it cannot be set here and a withdrawn application stays
    withdrawn.
    """
    try:
        new_status = ApplicationStatus(status_in.status)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid application status provided.",
        )

    application = await _get_application(db, application_id)
    if application.employer_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to update this application status.",
        )

    if new_status == ApplicationStatus.WITHDRAWN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only the candidate can withdraw an application.",
        )
    if application.status == ApplicationStatus.WITHDRAWN.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot change the status of a withdrawn application.",
        )

    previous = application.status
    application.status = new_status.value
    await db.commit()
    await db.refresh(application)

    logger.info(
        "application_status_changed",
        application_id=str(application.id),
        from_status=previous,
        to_status=new_status.value,
    )
    return application


@router.post("/{application_id}/notes", response_model=ApplicationResponse)
async def add_application_note(
    application_id: str,
    note_in: ApplicationNoteCreate,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db),
):
    """Append an employer note to an application for a job the caller owns."""
    application = await _get_application(db, application_id)
    if application.employer_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to add notes to this application.",
        )

    note = {
        "by_user": str(current_user.id),
        "note": note_in.note,
        "date": datetime.utcnow().isoformat(),
    }
    # JSON columns only track reassignment
    application.notes = [*(application.notes or []), note]
    await db.commit()
    await db.refresh(application)

    logger.info("application_note_added", application_id=str(application.id))
    return application


@router.delete("/{application_id}/withdraw", response_model=ApplicationWithdrawResponse)
async def withdraw_application(
    application_id: str,
    current_user: User = Depends(require_candidate),
    db: AsyncSession = Depends(get_db),
):
    """
    Withdraw the caller's application.

    Decrements the job's applicationsCount (never below zero) in the same
    transaction as the status change.
    """
    application = await _get_application(db, application_id)
    if application.candidate_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to withdraw this application.",
        )
    if application.status == ApplicationStatus.WITHDRAWN.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Application already withdrawn.",
        )

    application.status = ApplicationStatus.WITHDRAWN.value
    await db.flush()
    await db.execute(
        update(Job)
        .where(Job.id == application.job_id)
        .values(
            applications_count=case(
                (Job.applications_count > 0, Job.applications_count - 1),
                else_=0,
            )
        )
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    await db.refresh(application)

    logger.info(
        "application_withdrawn",
        application_id=str(application.id),
        job_id=str(application.job_id),
    )
    return ApplicationWithdrawResponse(
        message="Application withdrawn successfully.",
        application=application,
    )
