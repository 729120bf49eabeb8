"""
Job Catalog Service
Public listing and search, job detail, and the employer-side CRUD
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from loguru import logger
from sqlalchemy import func, or_, case
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from jobboard.core.exceptions import (
    AuthorizationException, ResourceNotFoundException, UnexpectedException, ValidationException
)
from jobboard.models.application import Application
from jobboard.models.job import Job, JobStatus
from jobboard.models.user import User
from jobboard.schemas.job import JobCreate, JobUpdate
from jobboard.services import counters, permissions
from jobboard.services.pagination import LIKE_ESCAPE, Page, contains_pattern, paginate

SORT_OPTIONS = {
    "newest": (Job.created_at.desc(),),
    "oldest": (Job.created_at.asc(),),
    "salary-high": (Job.salary_max.desc().nulls_last(),),
    "salary-low": (Job.salary_min.asc().nulls_last(),),
    "most-applications": (Job.application_count.desc(),),
}
SORT_OPTIONS["applications"] = SORT_OPTIONS["most-applications"]

# Keeps pages stable when the primary sort key ties
TIE_BREAKERS = (Job.created_at.desc(), Job.id.asc())

NULLABLE_FIELDS = {"application_deadline"}


@dataclass
class JobFilters:
    search: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    experience: Optional[str] = None
    remote: Optional[bool] = None
    min_salary: Optional[float] = None
    max_salary: Optional[float] = None
    featured: Optional[bool] = None


def _salary_columns(salary) -> dict:
    if salary is None:
        return {}
    return {
        "salary_min": salary.min,
        "salary_max": salary.max,
        "salary_currency": salary.currency.value,
        "salary_period": salary.period.value,
    }


class JobCatalogService:
    """
    Reads are public; writes require the poster or an admin.
    Every authorization failure is raised before anything is written.
    """

    def _get_or_404(self, db: Session, job_id: str) -> Job:
        job = db.query(Job).options(joinedload(Job.owner)).filter(Job.id == job_id).first()
        if not job:
            raise ResourceNotFoundException("Job", job_id)
        return job

    def _apply_filters(self, query, filters: JobFilters):
        if filters.search:
            term = contains_pattern(filters.search)
            query = query.filter(or_(
                Job.title.ilike(term, escape=LIKE_ESCAPE),
                Job.description.ilike(term, escape=LIKE_ESCAPE),
                Job.company.ilike(term, escape=LIKE_ESCAPE),
            ))
        if filters.location:
            query = query.filter(Job.location.ilike(contains_pattern(filters.location), escape=LIKE_ESCAPE))
        if filters.category:
            query = query.filter(Job.category == filters.category)
        if filters.experience:
            query = query.filter(Job.experience == filters.experience)
        if filters.remote is not None:
            query = query.filter(Job.remote == filters.remote)
        if filters.min_salary is not None:
            query = query.filter(Job.salary_min >= filters.min_salary)
        if filters.max_salary is not None:
            query = query.filter(Job.salary_max <= filters.max_salary)
        if filters.featured is not None:
            query = query.filter(Job.featured == filters.featured)
        return query

    def application_states(self, db: Session, viewer: Optional[User], job_ids) -> Optional[Dict[str, str]]:
        """
        Map job id -> the viewer's application status for the given jobs,
        fetched in one query. None when the viewer is not a jobseeker.
        """
        if not permissions.is_jobseeker(viewer):
            return None
        job_ids = list(job_ids)
        if not job_ids:
            return {}
        rows = (
            db.query(Application.job_id, Application.status)
            .filter(Application.user_id == viewer.id, Application.job_id.in_(job_ids))
            .all()
        )
        return {job_id: status for job_id, status in rows}

    def list_jobs(
        self,
        db: Session,
        filters: JobFilters,
        sort: str = "newest",
        page: int = 1,
        limit: int = 10,
        viewer: Optional[User] = None,
    ) -> Tuple[Page, Optional[Dict[str, str]]]:
        """Active jobs only, filtered, sorted and paginated"""
        query = db.query(Job).options(joinedload(Job.owner)).filter(Job.status == JobStatus.ACTIVE.value)
        query = self._apply_filters(query, filters)

        order = SORT_OPTIONS.get(sort or "newest", SORT_OPTIONS["newest"]) + TIE_BREAKERS
        result = paginate(query, page, limit, *order)

        states = self.application_states(db, viewer, (job.id for job in result.items))
        return result, states

    def get_job(self, db: Session, job_id: str, viewer: Optional[User] = None) -> Tuple[Job, Optional[str], bool]:
        """
        Job detail. Every call counts as one view.
        Returns (job, viewer's application status, whether the viewer is annotated).
        """
        if not counters.increment_views(db, job_id):
            db.rollback()
            raise ResourceNotFoundException("Job", job_id)
        db.commit()

        job = self._get_or_404(db, job_id)
        states = self.application_states(db, viewer, [job.id])
        if states is None:
            return job, None, False
        return job, states.get(job.id), True

    def create_job(self, db: Session, owner: User, job_data: JobCreate) -> Job:
        if not permissions.can_post_jobs(owner):
            raise AuthorizationException(f"User role {owner.role} is not authorized to post jobs")

        fields = job_data.model_dump(exclude={"salary"})
        fields["category"] = job_data.category.value
        fields["experience"] = job_data.experience.value
        fields["status"] = job_data.status.value
        fields.update(_salary_columns(job_data.salary))

        job = Job(**fields, posted_by=owner.id, application_count=0, views=0)
        db.add(job)
        db.commit()
        db.refresh(job)

        logger.info(f"Job {job.id} posted by {owner.id}: {job.title}")
        return job

    def update_job(self, db: Session, job_id: str, user: User, job_data: JobUpdate) -> Job:
        if not job_data.model_fields_set:
            raise ValidationException("No fields to update")

        job = self._get_or_404(db, job_id)
        if not permissions.can_manage_job(user, job):
            logger.warning(f"User {user.id} denied update on job {job_id}")
            raise AuthorizationException("Not authorized to update this job")

        update_data = job_data.model_dump(exclude_unset=True, exclude={"salary"})
        nulled = [f for f, v in update_data.items() if v is None and f not in NULLABLE_FIELDS]
        if nulled:
            raise ValidationException(
                "Validation failed", [{"field": f, "message": "cannot be null"} for f in nulled]
            )

        for field, value in update_data.items():
            if hasattr(value, "value"):
                value = value.value
            setattr(job, field, value)

        if "salary" in job_data.model_fields_set:
            if job_data.salary is None:
                job.salary_min = job.salary_max = None
            else:
                for column, value in _salary_columns(job_data.salary).items():
                    setattr(job, column, value)

        db.commit()
        db.refresh(job)

        logger.info(f"Job {job.id} updated by {user.id}: {sorted(job_data.model_fields_set)}")
        return job

    def delete_job(self, db: Session, job_id: str, user: User) -> int:
        """
        Delete the job and every application referencing it, in one
        transaction. Returns the number of applications removed.
        """
        job = self._get_or_404(db, job_id)
        if not permissions.can_manage_job(user, job):
            logger.warning(f"User {user.id} denied delete on job {job_id}")
            raise AuthorizationException("Not authorized to delete this job")

        try:
            removed = (
                db.query(Application)
                .filter(Application.job_id == job_id)
                .delete(synchronize_session=False)
            )
            db.query(Job).filter(Job.id == job_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Cascade delete of job {job_id} failed")
            raise UnexpectedException("Failed to delete job")

        logger.info(f"Job {job_id} deleted by {user.id} with {removed} application(s)")
        return removed

    def list_my_jobs(
        self,
        db: Session,
        owner: User,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page:
        query = db.query(Job).options(joinedload(Job.owner)).filter(Job.posted_by == owner.id)
        if status:
            query = query.filter(Job.status == status)
        return paginate(query, page, limit, *TIE_BREAKERS)

    def job_stats(self, db: Session, owner: User) -> dict:
        """Aggregate figures over the jobs posted by owner"""
        totals = (
            db.query(
                func.count(Job.id),
                func.sum(case((Job.status == JobStatus.ACTIVE.value, 1), else_=0)),
                func.sum(Job.application_count),
                func.sum(Job.views),
            )
            .filter(Job.posted_by == owner.id)
            .one()
        )
        categories = (
            db.query(Job.category, func.count(Job.id))
            .filter(Job.posted_by == owner.id)
            .group_by(Job.category)
            .order_by(Job.category)
            .all()
        )

        total_jobs, active_jobs, total_applications, total_views = totals
        return {
            "overview": {
                "totalJobs": total_jobs or 0,
                "activeJobs": int(active_jobs or 0),
                "totalApplications": int(total_applications or 0),
                "totalViews": int(total_views or 0),
            },
            "categories": [
                {"category": category, "count": count} for category, count in categories
            ],
        }


job_catalog = JobCatalogService()
