"""
Job counters: applicationCount and views

Both are changed only through single UPDATE statements (col = col + n) so
concurrent requests cannot lose increments. applicationCount is maintained
incrementally by the application service; reconcile_application_counts
repairs drift out of band.
"""
from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy import func
from sqlalchemy.orm import Session

from jobboard.models.application import Application
from jobboard.models.job import Job


def adjust_application_count(db: Session, job_id: str, delta: int) -> int:
    """Returns the number of job rows touched (0 if the job is gone)"""
    return (
        db.query(Job)
        .filter(Job.id == job_id)
        .update({Job.application_count: Job.application_count + delta}, synchronize_session=False)
    )


def increment_views(db: Session, job_id: str) -> int:
    return (
        db.query(Job)
        .filter(Job.id == job_id)
        .update({Job.views: Job.views + 1}, synchronize_session=False)
    )


def reconcile_application_counts(db: Session, job_id: Optional[str] = None) -> List[Tuple[str, int, int]]:
    """
    Recount applications per job and overwrite drifted counters.

    Idempotent: a second run finds nothing to fix. Returns
    (job_id, stored_count, actual_count) for every job it corrected.
    """
    actual_counts = (
        db.query(Application.job_id, func.count(Application.id).label("actual"))
        .group_by(Application.job_id)
        .subquery()
    )
    actual = func.coalesce(actual_counts.c.actual, 0)

    query = (
        db.query(Job.id, Job.application_count, actual)
        .outerjoin(actual_counts, actual_counts.c.job_id == Job.id)
        .filter(Job.application_count != actual)
    )
    if job_id:
        query = query.filter(Job.id == job_id)

    corrections = [(row[0], row[1], row[2]) for row in query.all()]

    for drifted_job_id, stored, real in corrections:
        db.query(Job).filter(Job.id == drifted_job_id).update(
            {Job.application_count: real}, synchronize_session=False
        )
        logger.warning(f"applicationCount drift on job {drifted_job_id}: stored={stored} actual={real}")

    db.commit()
    logger.info(f"Counter reconciliation finished: {len(corrections)} job(s) corrected")
    return corrections
