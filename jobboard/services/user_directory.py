"""
User Directory Service
Account administration: listing, editing, activation and hard deletion
"""
from typing import Optional

from loguru import logger
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.core.exceptions import (
    AuthorizationException, ConflictException, ResourceNotFoundException,
    UnexpectedException, ValidationException
)
from jobboard.models.application import Application
from jobboard.models.job import Job
from jobboard.models.user import User
from jobboard.schemas.user import UserUpdate
from jobboard.services import counters, permissions
from jobboard.services.account_service import merge_profile
from jobboard.services.pagination import LIKE_ESCAPE, Page, contains_pattern, paginate

NEWEST_FIRST = (User.created_at.desc(), User.id.asc())

ADMIN_ONLY_FIELDS = ("role", "is_verified", "is_active")

EMAIL_TAKEN = "User already exists with this email"


class UserDirectoryService:
    """
    Admins see and manage every account; everyone else only their own.
    Hard deletion removes the account's applications and, for employers,
    the jobs they posted along with those jobs' applications.
    """

    def _get_or_404(self, db: Session, user_id: str) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundException("User", user_id)
        return user

    def list_users(
        self,
        db: Session,
        actor: User,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page:
        if not permissions.can_list_users(actor):
            raise AuthorizationException(f"User role {actor.role} is not authorized to access this route")

        query = db.query(User)
        if role:
            query = query.filter(User.role == role)
        if is_active is not None:
            query = query.filter(User.is_active == is_active)
        if search:
            term = contains_pattern(search)
            query = query.filter(or_(
                User.name.ilike(term, escape=LIKE_ESCAPE),
                User.email.ilike(term, escape=LIKE_ESCAPE),
            ))
        return paginate(query, page, limit, *NEWEST_FIRST)

    def get_user(self, db: Session, user_id: str, actor: User) -> User:
        user = self._get_or_404(db, user_id)
        if not permissions.can_manage_user(actor, user):
            raise AuthorizationException("Not authorized to view this user")
        return user

    def update_user(self, db: Session, user_id: str, actor: User, data: UserUpdate) -> User:
        if not data.model_fields_set:
            raise ValidationException("No fields to update")

        user = self._get_or_404(db, user_id)
        if not permissions.can_manage_user(actor, user):
            logger.warning(f"User {actor.id} denied update of user {user_id}")
            raise AuthorizationException("Not authorized to update this user")

        flags = [field for field in ADMIN_ONLY_FIELDS if field in data.model_fields_set]
        if flags and not permissions.can_change_account_flags(actor):
            logger.warning(f"User {actor.id} denied change of {flags} on user {user_id}")
            raise AuthorizationException("Only an admin can change role, verification or activation")

        if data.email is not None and data.email != user.email:
            taken = db.query(User.id).filter(User.email == data.email, User.id != user.id).first()
            if taken:
                raise ConflictException(EMAIL_TAKEN)
            user.email = data.email
        if data.name is not None:
            user.name = data.name
        if data.profile is not None:
            merge_profile(user, data.profile)
        if data.role is not None:
            user.role = data.role.value
        if data.is_verified is not None:
            user.is_verified = data.is_verified
        if data.is_active is not None:
            user.is_active = data.is_active

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictException(EMAIL_TAKEN)
        db.refresh(user)

        logger.info(f"User {user_id} updated by {actor.id}: {sorted(data.model_fields_set)}")
        return user

    def toggle_status(self, db: Session, user_id: str, actor: User) -> User:
        if not permissions.can_change_account_flags(actor):
            raise AuthorizationException(f"User role {actor.role} is not authorized to access this route")

        user = self._get_or_404(db, user_id)
        if user.id == actor.id:
            raise ValidationException("You cannot change the status of your own account")

        user.is_active = not user.is_active
        db.commit()
        db.refresh(user)

        logger.info(f"User {user_id} {'activated' if user.is_active else 'deactivated'} by {actor.id}")
        return user

    def delete_user(self, db: Session, user_id: str, actor: User) -> dict:
        """
        Hard delete in one transaction. Jobs the user applied to lose one
        application each from their counter. Returns what was removed.
        """
        user = self._get_or_404(db, user_id)
        if not permissions.can_manage_user(actor, user):
            logger.warning(f"User {actor.id} denied delete of user {user_id}")
            raise AuthorizationException("Not authorized to delete this user")

        try:
            owned_job_ids = [job_id for (job_id,) in db.query(Job.id).filter(Job.posted_by == user_id)]
            applied_counts = (
                db.query(Application.job_id, func.count(Application.id))
                .filter(Application.user_id == user_id)
                .group_by(Application.job_id)
                .all()
            )

            applications_removed = (
                db.query(Application)
                .filter(Application.user_id == user_id)
                .delete(synchronize_session=False)
            )
            for job_id, count in applied_counts:
                if job_id not in owned_job_ids:
                    counters.adjust_application_count(db, job_id, -count)

            if owned_job_ids:
                applications_removed += (
                    db.query(Application)
                    .filter(Application.job_id.in_(owned_job_ids))
                    .delete(synchronize_session=False)
                )
                db.query(Job).filter(Job.id.in_(owned_job_ids)).delete(synchronize_session=False)

            db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Delete of user {user_id} failed")
            raise UnexpectedException("Failed to delete user")

        logger.info(
            f"User {user_id} deleted by {actor.id} with {len(owned_job_ids)} job(s) "
            f"and {applications_removed} application(s)"
        )
        return {"applicationsRemoved": applications_removed, "jobsRemoved": len(owned_job_ids)}


user_directory = UserDirectoryService()
