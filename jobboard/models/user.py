"""
User account database model
"""
import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime, Boolean, JSON
from sqlalchemy.orm import relationship

from jobboard.core.database import Base


class UserRole(str, enum.Enum):
    JOBSEEKER = "jobseeker"
    EMPLOYER = "employer"
    ADMIN = "admin"


class CompanySize(str, enum.Enum):
    TINY = "1-10"
    SMALL = "11-50"
    MEDIUM = "51-200"
    LARGE = "201-500"
    ENTERPRISE = "500+"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(50), nullable=False)
    email = Column(String(254), unique=True, nullable=False, index=True)
    password_hash = Column(String(128), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.JOBSEEKER.value, index=True)

    # phone, location, bio, skills, experience, education, resume,
    # profilePicture, website, company, companySize, industry
    profile = Column(JSON, nullable=False, default=dict)

    is_verified = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    jobs = relationship("Job", back_populates="owner")
    applications = relationship("Application", back_populates="applicant")

    @property
    def resume(self):
        return (self.profile or {}).get("resume")

    @property
    def company(self):
        return (self.profile or {}).get("company")

    @property
    def website(self):
        return (self.profile or {}).get("website")

    @property
    def user_role(self) -> UserRole:
        return UserRole(self.role)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
