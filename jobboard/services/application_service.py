"""
Application Lifecycle Service
Apply, review, status updates and withdrawal, plus the counter bookkeeping
on the parent job that goes with them.
"""
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from jobboard.core.exceptions import (
    AuthorizationException, ConflictException, ResourceNotFoundException, UnexpectedException
)
from jobboard.models.application import (
    UNIQUE_APPLICATION_CONSTRAINT, Application, ApplicationStatus
)
from jobboard.models.job import Job, JobStatus
from jobboard.models.user import User
from jobboard.schemas.application import ApplicationStatusUpdate
from jobboard.services import counters, permissions
from jobboard.services.pagination import Page, paginate

DUPLICATE_APPLICATION = "You have already applied for this job"
JOB_NOT_ACCEPTING = "This job is no longer accepting applications"
RESUME_REQUIRED = "Please upload your resume before applying for jobs"

NEWEST_FIRST = (Application.applied_date.desc(), Application.id.asc())

# camelCase keys of the stats overview, in status order
STATUS_KEYS = {
    ApplicationStatus.APPLIED.value: "applied",
    ApplicationStatus.UNDER_REVIEW.value: "underReview",
    ApplicationStatus.SHORTLISTED.value: "shortlisted",
    ApplicationStatus.INTERVIEW.value: "interview",
    ApplicationStatus.ACCEPTED.value: "accepted",
    ApplicationStatus.REJECTED.value: "rejected",
}

OPTIONAL_STATUS_FIELDS = (
    "notes", "interview_date", "interview_location", "interview_type",
    "feedback", "salary_offered", "start_date",
)

# SQLite reports the columns instead of the constraint name
SQLITE_DUPLICATE_MESSAGE = "UNIQUE constraint failed: applications.user_id, applications.job_id"


def _is_duplicate_application(error: IntegrityError) -> bool:
    message = str(error.orig)
    return UNIQUE_APPLICATION_CONSTRAINT in message or SQLITE_DUPLICATE_MESSAGE in message


class ApplicationService:
    """
    Creation and deletion adjust Job.application_count in the same
    transaction: insert first, then increment, so an interrupted write can
    only ever undercount.
    """

    def _query(self, db: Session):
        return db.query(Application).options(
            joinedload(Application.job),
            joinedload(Application.applicant),
        )

    def _get_or_404(self, db: Session, application_id: str) -> Application:
        application = self._query(db).filter(Application.id == application_id).first()
        if not application:
            raise ResourceNotFoundException("Application", application_id)
        return application

    def _has_applied(self, db: Session, user_id: str, job_id: str) -> bool:
        return (
            db.query(Application.id)
            .filter(Application.user_id == user_id, Application.job_id == job_id)
            .first()
        ) is not None

    def apply(self, db: Session, applicant: User, job_id: str, cover_letter: Optional[str] = None) -> Application:
        """
        Preconditions, first failure wins:
        job exists, job is active, no earlier application, resume on file.
        """
        if not permissions.can_apply(applicant):
            raise AuthorizationException(f"User role {applicant.role} is not authorized to apply for jobs")

        job = db.query(Job).filter(Job.id == job_id).first()
        if not job:
            raise ResourceNotFoundException("Job", job_id)

        if job.status != JobStatus.ACTIVE.value:
            logger.warning(f"Application to inactive job {job_id} by {applicant.id} rejected")
            raise ConflictException(JOB_NOT_ACCEPTING)

        # Fast path only; the unique constraint is the real guard
        if self._has_applied(db, applicant.id, job_id):
            logger.warning(f"Duplicate application by {applicant.id} for job {job_id} rejected")
            raise ConflictException(DUPLICATE_APPLICATION)

        if not applicant.resume:
            logger.warning(f"Application by {applicant.id} for job {job_id} rejected: no resume")
            raise ConflictException(RESUME_REQUIRED)

        application = Application(
            user_id=applicant.id,
            job_id=job_id,
            resume=applicant.resume,
            cover_letter=cover_letter or "",
            status=ApplicationStatus.APPLIED.value,
            applied_date=datetime.utcnow(),
        )
        db.add(application)
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            if not _is_duplicate_application(e):
                logger.exception(f"Application insert by {applicant.id} for job {job_id} failed")
                raise UnexpectedException("Failed to submit application")
            logger.warning(f"Concurrent duplicate application by {applicant.id} for job {job_id}")
            raise ConflictException(DUPLICATE_APPLICATION)

        counters.adjust_application_count(db, job_id, 1)
        db.commit()

        logger.info(f"Application {application.id} submitted by {applicant.id} for job {job_id}")
        return self._get_or_404(db, application.id)

    def list_my_applications(
        self,
        db: Session,
        applicant: User,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page:
        query = self._query(db).filter(Application.user_id == applicant.id)
        if status:
            query = query.filter(Application.status == status)
        return paginate(query, page, limit, *NEWEST_FIRST)

    def list_job_applications(
        self,
        db: Session,
        job_id: str,
        user: User,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page:
        job = db.query(Job).filter(Job.id == job_id).first()
        if not job:
            raise ResourceNotFoundException("Job", job_id)
        if not permissions.can_manage_job(user, job):
            logger.warning(f"User {user.id} denied applicant list for job {job_id}")
            raise AuthorizationException("Not authorized to view applications for this job")

        query = self._query(db).filter(Application.job_id == job_id)
        if status:
            query = query.filter(Application.status == status)
        return paginate(query, page, limit, *NEWEST_FIRST)

    def list_all_applications(
        self,
        db: Session,
        user: User,
        status: Optional[str] = None,
        job_id: Optional[str] = None,
        user_id: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page:
        if not permissions.can_view_all_applications(user):
            raise AuthorizationException(f"User role {user.role} is not authorized to access this route")

        query = self._query(db)
        if status:
            query = query.filter(Application.status == status)
        if job_id:
            query = query.filter(Application.job_id == job_id)
        if user_id:
            query = query.filter(Application.user_id == user_id)
        return paginate(query, page, limit, *NEWEST_FIRST)

    def get_application(self, db: Session, application_id: str, user: User) -> Application:
        application = self._get_or_404(db, application_id)
        if not permissions.can_view_application(user, application, application.job):
            logger.warning(f"User {user.id} denied view of application {application_id}")
            raise AuthorizationException("Not authorized to view this application")
        return application

    def update_status(
        self,
        db: Session,
        application_id: str,
        user: User,
        update: ApplicationStatusUpdate,
    ) -> Application:
        """Any status may follow any other; only the caller's rights are checked"""
        application = self._get_or_404(db, application_id)
        if not permissions.can_update_application(user, application.job):
            logger.warning(f"User {user.id} denied status update on application {application_id}")
            raise AuthorizationException("Not authorized to update this application")

        previous = application.status
        application.status = update.status.value
        for field in OPTIONAL_STATUS_FIELDS:
            if field not in update.model_fields_set:
                continue
            value = getattr(update, field)
            if value is None:
                continue
            if hasattr(value, "value"):
                value = value.value
            setattr(application, field, value)

        db.commit()
        logger.info(f"Application {application_id} status {previous} -> {application.status} by {user.id}")
        return self._get_or_404(db, application_id)

    def delete_application(self, db: Session, application_id: str, user: User) -> None:
        application = self._get_or_404(db, application_id)
        if not permissions.can_delete_application(user, application):
            logger.warning(f"User {user.id} denied delete of application {application_id}")
            raise AuthorizationException("Not authorized to delete this application")

        job_id = application.job_id
        deleted = (
            db.query(Application)
            .filter(Application.id == application_id)
            .delete(synchronize_session=False)
        )
        if deleted:
            counters.adjust_application_count(db, job_id, -1)
        db.commit()

        logger.info(f"Application {application_id} deleted by {user.id}")

    def application_stats(self, db: Session, employer: User) -> dict:
        """Status breakdown over applications to jobs posted by employer"""
        rows = (
            db.query(Application.status, func.count(Application.id))
            .join(Job, Job.id == Application.job_id)
            .filter(Job.posted_by == employer.id)
            .group_by(Application.status)
            .order_by(Application.status)
            .all()
        )
        counts = {status: count for status, count in rows}

        overview = {"totalApplications": sum(counts.values())}
        for status, key in STATUS_KEYS.items():
            overview[key] = counts.get(status, 0)

        return {
            "overview": overview,
            "statusBreakdown": [{"status": status, "count": count} for status, count in rows],
        }


application_service = ApplicationService()
