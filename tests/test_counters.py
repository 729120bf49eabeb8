"""
Atomic counters and out-of-band reconciliation
"""
from jobboard.models.application import Application
from jobboard.models.job import Job
from jobboard.services import counters

from tests.conftest import make_job, reload


def _seed_application(db, user, job):
    db.add(Application(user_id=user.id, job_id=job.id, resume=user.resume))
    db.commit()


def test_adjust_application_count(db, job):
    assert counters.adjust_application_count(db, job.id, 1) == 1
    assert counters.adjust_application_count(db, job.id, 1) == 1
    assert counters.adjust_application_count(db, job.id, -1) == 1
    db.commit()

    assert reload(db, Job, job.id).application_count == 1


def test_adjust_missing_job_touches_nothing(db):
    assert counters.adjust_application_count(db, "ghost", 1) == 0


def test_increment_views(db, job):
    counters.increment_views(db, job.id)
    counters.increment_views(db, job.id)
    db.commit()

    assert reload(db, Job, job.id).views == 2


def test_reconcile_repairs_drift(db, employer, job, jobseeker, other_jobseeker):
    _seed_application(db, jobseeker, job)
    _seed_application(db, other_jobseeker, job)
    # Overcounted job with no applications at all
    ghost_counted = make_job(db, employer, application_count=5)

    corrections = counters.reconcile_application_counts(db)

    assert sorted(corrections) == sorted([(job.id, 0, 2), (ghost_counted.id, 5, 0)])
    assert reload(db, Job, job.id).application_count == 2
    assert reload(db, Job, ghost_counted.id).application_count == 0


def test_reconcile_is_idempotent(db, job, jobseeker):
    _seed_application(db, jobseeker, job)

    assert len(counters.reconcile_application_counts(db)) == 1
    assert counters.reconcile_application_counts(db) == []


def test_reconcile_single_job(db, employer, job, jobseeker):
    other = make_job(db, employer, application_count=3)
    _seed_application(db, jobseeker, job)

    corrections = counters.reconcile_application_counts(db, job.id)

    assert corrections == [(job.id, 0, 1)]
    assert reload(db, Job, other.id).application_count == 3
