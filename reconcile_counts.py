"""
Recount applications per job and repair drifted applicationCount values.
Safe to run repeatedly, e.g. from a nightly cron:

    python reconcile_counts.py            # every job
    python reconcile_counts.py <job_id>   # a single job
"""
import sys

from jobboard.core.database import SessionLocal
from jobboard.core.logging_config import configure_logging
from jobboard.services.counters import reconcile_application_counts

configure_logging()

job_id = sys.argv[1] if len(sys.argv) > 1 else None
db = SessionLocal()
try:
    corrections = reconcile_application_counts(db, job_id)
finally:
    db.close()

for drifted_job_id, stored, actual in corrections:
    print(f"  {drifted_job_id}: {stored} -> {actual}")
print(f"Corrected {len(corrections)} job(s)")
