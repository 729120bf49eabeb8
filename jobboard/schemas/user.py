"""
Pydantic schemas for accounts and profiles
"""
import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from jobboard.models.job import ExperienceLevel
from jobboard.models.user import CompanySize, UserRole
from jobboard.schemas.common import CamelModel, InputModel

EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")


def normalize_email(v: str) -> str:
    v = v.lower()
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Please provide a valid email")
    return v


class UserProfile(InputModel):
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    skills: Optional[List[str]] = None
    experience: Optional[ExperienceLevel] = None
    education: Optional[str] = None
    resume: Optional[str] = None
    profile_picture: Optional[str] = None
    website: Optional[str] = None
    company: Optional[str] = None
    company_size: Optional[CompanySize] = None
    industry: Optional[str] = None


class UserRegister(InputModel):
    name: str = Field(min_length=1, max_length=50)
    email: str
    password: str = Field(min_length=6)
    # Admin accounts are provisioned out of band
    role: Literal["jobseeker", "employer"] = "jobseeker"
    profile: Optional[UserProfile] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)


class UserLogin(InputModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()


class ProfileUpdate(InputModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    profile: Optional[UserProfile] = None


class PasswordChange(InputModel):
    current_password: str
    new_password: str = Field(min_length=6)


class UserUpdate(InputModel):
    """Account edit through /users; role and the two flags are admin-only"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: Optional[str] = None
    profile: Optional[UserProfile] = None
    role: Optional[UserRole] = None
    is_verified: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if v is None:
            return v
        return normalize_email(v)


class UserResponse(CamelModel):
    """Account view; the password hash has no field here and never leaves the service"""
    id: str
    name: str
    email: str
    role: str
    profile: dict = {}
    is_verified: bool = False
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ApplicantSummary(CamelModel):
    id: str
    name: str
    email: str
    profile: dict = {}


class OwnerSummary(CamelModel):
    """Public subset of a job poster"""
    id: str
    name: str
    email: str
    company: Optional[str] = None
    website: Optional[str] = None
