"""
Job API Endpoints
Public search and detail, plus employer job management
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from jobboard.api.deps import get_optional_user, require_employer
from jobboard.core.config import settings
from jobboard.core.database import get_db
from jobboard.models.job import ExperienceLevel, JobCategory, JobStatus
from jobboard.models.user import User
from jobboard.schemas import (
    JobCreate, JobUpdate, JobResponse, JobWithApplicationState, envelope, paginated
)
from jobboard.services.job_catalog import JobFilters, job_catalog

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def serialize_job(job, states=None) -> dict:
    if states is None:
        return JobResponse.model_validate(job).to_json()
    annotated = JobWithApplicationState.model_validate(job)
    annotated.has_applied = job.id in states
    annotated.application_status = states.get(job.id)
    return annotated.to_json()


# ============== PUBLIC ENDPOINTS ==============

@router.get("")
def list_jobs(
    search: Optional[str] = None,
    location: Optional[str] = None,
    category: Optional[JobCategory] = None,
    experience: Optional[ExperienceLevel] = None,
    remote: Optional[bool] = None,
    min_salary: Optional[float] = Query(None, alias="minSalary", ge=0),
    max_salary: Optional[float] = Query(None, alias="maxSalary", ge=0),
    featured: Optional[bool] = None,
    sort: str = "newest",
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    List active jobs with filters and pagination.
    Jobseekers additionally see hasApplied / applicationStatus per job.
    """
    filters = JobFilters(
        search=search,
        location=location,
        category=category.value if category else None,
        experience=experience.value if experience else None,
        remote=remote,
        min_salary=min_salary,
        max_salary=max_salary,
        featured=featured,
    )
    result, states = job_catalog.list_jobs(db, filters, sort=sort, page=page, limit=limit, viewer=viewer)
    return paginated(result, lambda job: serialize_job(job, states))


# ============== EMPLOYER ENDPOINTS ==============
# Declared before /{job_id} so the literal paths win

@router.get("/my-jobs")
def list_my_jobs(
    status_filter: Optional[JobStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(require_employer),
    db: Session = Depends(get_db),
):
    """Jobs posted by the caller, any status"""
    result = job_catalog.list_my_jobs(
        db, current_user,
        status=status_filter.value if status_filter else None,
        page=page, limit=limit,
    )
    return paginated(result, serialize_job)


@router.get("/stats")
def get_job_stats(
    current_user: User = Depends(require_employer),
    db: Session = Depends(get_db),
):
    """Totals and category breakdown for the caller's jobs"""
    return envelope(job_catalog.job_stats(db, current_user))


@router.get("/{job_id}")
def get_job(
    job_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Job detail; counts one view per call"""
    job, application_status, annotated = job_catalog.get_job(db, job_id, viewer)
    if not annotated:
        return envelope(serialize_job(job))
    states = {job.id: application_status} if application_status else {}
    return envelope(serialize_job(job, states))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_job(
    job_data: JobCreate,
    current_user: User = Depends(require_employer),
    db: Session = Depends(get_db),
):
    job = job_catalog.create_job(db, current_user, job_data)
    return envelope(serialize_job(job), message="Job posted successfully")


@router.put("/{job_id}")
def update_job(
    job_id: str,
    job_data: JobUpdate,
    current_user: User = Depends(require_employer),
    db: Session = Depends(get_db),
):
    job = job_catalog.update_job(db, job_id, current_user, job_data)
    return envelope(serialize_job(job), message="Job updated successfully")


@router.delete("/{job_id}")
def delete_job(
    job_id: str,
    current_user: User = Depends(require_employer),
    db: Session = Depends(get_db),
):
    """Deletes the job and every application to it"""
    removed = job_catalog.delete_job(db, job_id, current_user)
    return envelope(message="Job deleted successfully", applicationsRemoved=removed)
