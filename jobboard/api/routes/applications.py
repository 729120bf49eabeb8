"""
Application API Endpoints
Jobseekers apply and track; employers review their applicants; admins see everything
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from jobboard.api.deps import get_current_user, require_admin, require_employer, require_jobseeker
from jobboard.core.config import settings
from jobboard.core.database import get_db
from jobboard.models.application import ApplicationStatus
from jobboard.models.user import User
from jobboard.schemas import (
    ApplicationCreate, ApplicationResponse, ApplicationStatusUpdate, envelope, paginated
)
from jobboard.services.application_service import application_service

router = APIRouter(prefix="/applications", tags=["Applications"])


def serialize_application(application) -> dict:
    return ApplicationResponse.model_validate(application).to_json()


# ============== JOBSEEKER ENDPOINTS ==============

@router.post("", status_code=status.HTTP_201_CREATED)
def apply_for_job(
    application_data: ApplicationCreate,
    current_user: User = Depends(require_jobseeker),
    db: Session = Depends(get_db),
):
    """Apply with the resume currently on the caller's profile"""
    application = application_service.apply(
        db, current_user, application_data.job_id, application_data.cover_letter
    )
    return envelope(serialize_application(application), message="Application submitted successfully")


@router.get("/my-applications")
def list_my_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(require_jobseeker),
    db: Session = Depends(get_db),
):
    result = application_service.list_my_applications(
        db, current_user,
        status=status_filter.value if status_filter else None,
        page=page, limit=limit,
    )
    return paginated(result, serialize_application)


# ============== EMPLOYER / ADMIN ENDPOINTS ==============

@router.get("/stats")
def get_application_stats(
    current_user: User = Depends(require_employer),
    db: Session = Depends(get_db),
):
    return envelope(application_service.application_stats(db, current_user))


@router.get("/job/{job_id}")
def list_job_applications(
    job_id: str,
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(require_employer),
    db: Session = Depends(get_db),
):
    """Applicants for one job; the job's poster or an admin"""
    result = application_service.list_job_applications(
        db, job_id, current_user,
        status=status_filter.value if status_filter else None,
        page=page, limit=limit,
    )
    return paginated(result, serialize_application)


@router.get("")
def list_all_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    job_id: Optional[str] = Query(None, alias="jobId"),
    user_id: Optional[str] = Query(None, alias="userId"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    result = application_service.list_all_applications(
        db, current_user,
        status=status_filter.value if status_filter else None,
        job_id=job_id, user_id=user_id,
        page=page, limit=limit,
    )
    return paginated(result, serialize_application)


@router.put("/{application_id}/status")
def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    current_user: User = Depends(require_employer),
    db: Session = Depends(get_db),
):
    """Set status and, optionally, notes, interview and offer details"""
    application = application_service.update_status(db, application_id, current_user, update)
    return envelope(serialize_application(application), message="Application status updated successfully")


# ============== SHARED ENDPOINTS ==============

@router.get("/{application_id}")
def get_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    application = application_service.get_application(db, application_id, current_user)
    return envelope(serialize_application(application))


@router.delete("/{application_id}")
def delete_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    application_service.delete_application(db, application_id, current_user)
    return envelope(message="Application deleted successfully")
