"""
Pydantic schemas for Job API
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from jobboard.models.job import Currency, ExperienceLevel, JobCategory, JobStatus, SalaryPeriod
from jobboard.schemas.common import CamelModel, InputModel
from jobboard.schemas.user import OwnerSummary


class SalaryRange(InputModel):
    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)
    currency: Currency = Currency.USD
    period: SalaryPeriod = SalaryPeriod.YEARLY


class JobCreate(InputModel):
    """Schema for posting a new job"""
    title: str = Field(min_length=5, max_length=100)
    company: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=50, max_length=2000)
    requirements: str = Field(min_length=20, max_length=1000)
    location: str = Field(min_length=1)
    category: JobCategory
    experience: ExperienceLevel
    salary: Optional[SalaryRange] = None
    skills: List[str] = []
    benefits: List[str] = []
    tags: List[str] = []
    status: JobStatus = JobStatus.ACTIVE
    application_deadline: Optional[datetime] = None
    remote: bool = False
    featured: bool = False


class JobUpdate(InputModel):
    """Partial update; only fields present in the body are written"""
    title: Optional[str] = Field(default=None, min_length=5, max_length=100)
    company: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, min_length=50, max_length=2000)
    requirements: Optional[str] = Field(default=None, max_length=1000)
    location: Optional[str] = Field(default=None, min_length=1)
    category: Optional[JobCategory] = None
    experience: Optional[ExperienceLevel] = None
    salary: Optional[SalaryRange] = None
    skills: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    status: Optional[JobStatus] = None
    application_deadline: Optional[datetime] = None
    remote: Optional[bool] = None
    featured: Optional[bool] = None


class SalaryView(CamelModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: Optional[str] = None
    period: Optional[str] = None


class JobResponse(CamelModel):
    id: str
    title: str
    company: str
    description: str
    requirements: str
    location: str
    category: str
    experience: str
    salary: SalaryView
    formatted_salary: str
    skills: List[str] = []
    benefits: List[str] = []
    tags: List[str] = []
    posted_by: str
    owner: Optional[OwnerSummary] = None
    status: str
    application_deadline: Optional[datetime] = None
    remote: bool = False
    featured: bool = False
    application_count: int = 0
    views: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobWithApplicationState(JobResponse):
    """Job as seen by a jobseeker, with their own application state"""
    has_applied: bool = False
    application_status: Optional[str] = None


class JobSummary(CamelModel):
    """Job fields embedded in application views"""
    id: str
    title: str
    company: str
    location: str
    category: str
    experience: str
    salary: SalaryView
    posted_by: str
