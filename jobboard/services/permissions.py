"""
Capability checks
Every role or ownership decision in the service layer goes through here.
"""
from jobboard.models.application import Application
from jobboard.models.job import Job
from jobboard.models.user import User, UserRole


def is_admin(user: User) -> bool:
    return user is not None and user.role == UserRole.ADMIN.value


def is_jobseeker(user: User) -> bool:
    return user is not None and user.role == UserRole.JOBSEEKER.value


def owns_job(user: User, job: Job) -> bool:
    return user is not None and job is not None and job.posted_by == user.id


def can_post_jobs(user: User) -> bool:
    return user is not None and user.role in (UserRole.EMPLOYER.value, UserRole.ADMIN.value)


def can_manage_job(user: User, job: Job) -> bool:
    """Update, delete, and review applicants of a job"""
    return owns_job(user, job) or is_admin(user)


def can_apply(user: User) -> bool:
    return is_jobseeker(user)


def can_view_application(user: User, application: Application, job: Job) -> bool:
    """The applicant, the employer who owns the job, or an admin"""
    if user is None:
        return False
    return application.user_id == user.id or owns_job(user, job) or is_admin(user)


def can_update_application(user: User, job: Job) -> bool:
    return can_manage_job(user, job)


def can_delete_application(user: User, application: Application) -> bool:
    """Withdrawal is for the applicant or an admin; the employer cannot delete"""
    if user is None:
        return False
    return application.user_id == user.id or is_admin(user)


def can_view_all_applications(user: User) -> bool:
    return is_admin(user)


def can_list_users(user: User) -> bool:
    return is_admin(user)


def can_manage_user(user: User, target: User) -> bool:
    """View, edit or delete an account: the account holder or an admin"""
    if user is None or target is None:
        return False
    return user.id == target.id or is_admin(user)


def can_change_account_flags(user: User) -> bool:
    """Role, verification and activation"""
    return is_admin(user)
