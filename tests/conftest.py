"""
Shared fixtures: in-memory database, users of each role, job factory
"""
import os

# Must be set before jobboard.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from jobboard.core.database import SessionLocal, drop_db, init_db
from jobboard.core.security import create_access_token, hash_password
from jobboard.main import app
from jobboard.models.job import Job
from jobboard.models.user import User

PASSWORD = "secret123"
RESUME = "/uploads/resumes/resume.pdf"

JOB_PAYLOAD = {
    "title": "Backend Engineer",
    "company": "Acme Corp",
    "description": "Build and operate the services behind our hiring platform, end to end.",
    "requirements": "Three years of Python and SQL experience.",
    "location": "Berlin, Germany",
    "category": "full-time",
    "experience": "mid",
    "salary": {"min": 50000, "max": 80000, "currency": "EUR", "period": "yearly"},
    "skills": ["python", "sql"],
    "remote": True,
}


@pytest.fixture
def db():
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_db()


@pytest.fixture
def client(db):
    return TestClient(app)


def make_user(db, role, email, name=None, profile=None, is_active=True):
    user = User(
        name=name or email.split("@")[0].title(),
        email=email,
        password_hash=hash_password(PASSWORD),
        role=role,
        profile=profile or {},
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


_job_clock = [datetime(2024, 1, 1)]


def make_job(db, owner, **overrides):
    """Insert a job directly; each call is one minute newer than the last"""
    _job_clock[0] += timedelta(minutes=1)
    fields = {
        "title": "Software Engineer",
        "company": "Acme Corp",
        "description": "x" * 60,
        "requirements": "y" * 30,
        "location": "Berlin",
        "category": "full-time",
        "experience": "mid",
        "posted_by": owner.id,
        "created_at": _job_clock[0],
    }
    fields.update(overrides)
    job = Job(**fields)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def auth(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


def reload(db, model, pk):
    """Fresh read that ignores what this session cached"""
    db.expire_all()
    return db.query(model).filter(model.id == pk).first()


@pytest.fixture
def employer(db):
    return make_user(db, "employer", "employer@example.com", name="Erin Employer",
                     profile={"company": "Acme Corp", "website": "https://acme.example.com"})


@pytest.fixture
def other_employer(db):
    return make_user(db, "employer", "rival@example.com", profile={"company": "Rival Inc"})


@pytest.fixture
def jobseeker(db):
    return make_user(db, "jobseeker", "seeker@example.com", name="Sam Seeker",
                     profile={"resume": RESUME, "skills": ["python"]})


@pytest.fixture
def other_jobseeker(db):
    return make_user(db, "jobseeker", "other.seeker@example.com",
                     profile={"resume": "/uploads/resumes/other.pdf"})


@pytest.fixture
def admin(db):
    return make_user(db, "admin", "admin@example.com")


@pytest.fixture
def job(db, employer):
    return make_job(db, employer, salary_min=50000, salary_max=80000)
