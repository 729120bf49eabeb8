"""
Pydantic schemas for Application API
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from jobboard.models.application import ApplicationStatus, InterviewType
from jobboard.schemas.common import CamelModel, InputModel
from jobboard.schemas.job import JobSummary
from jobboard.schemas.user import ApplicantSummary


class ApplicationCreate(InputModel):
    job_id: str = Field(min_length=1)
    cover_letter: Optional[str] = Field(default=None, max_length=1000)


class ApplicationStatusUpdate(InputModel):
    """Employer-side update; status may move to any value"""
    status: ApplicationStatus
    notes: Optional[str] = Field(default=None, max_length=500)
    interview_date: Optional[datetime] = None
    interview_location: Optional[str] = None
    interview_type: Optional[InterviewType] = None
    feedback: Optional[str] = Field(default=None, max_length=1000)
    salary_offered: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[datetime] = None


class ApplicationResponse(CamelModel):
    id: str
    user_id: str
    job_id: str
    resume: str
    cover_letter: Optional[str] = None
    status: str
    applied_date: Optional[datetime] = None
    application_age: str = ""
    notes: Optional[str] = None
    interview_date: Optional[datetime] = None
    interview_location: Optional[str] = None
    interview_type: Optional[str] = None
    feedback: Optional[str] = None
    salary_offered: Optional[float] = None
    start_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Joined views
    job: Optional[JobSummary] = None
    applicant: Optional[ApplicantSummary] = None
