"""
Job application database model
One row per (applicant, job) pair, enforced by a unique constraint
"""
import enum
import math
import uuid
from datetime import datetime

from sqlalchemy import Column, String, Text, DateTime, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from jobboard.core.database import Base


class ApplicationStatus(str, enum.Enum):
    APPLIED = "applied"
    UNDER_REVIEW = "under-review"
    SHORTLISTED = "shortlisted"
    INTERVIEW = "interview"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class InterviewType(str, enum.Enum):
    PHONE = "phone"
    VIDEO = "video"
    IN_PERSON = "in-person"
    TECHNICAL = "technical"


UNIQUE_APPLICATION_CONSTRAINT = "uq_applications_user_job"


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("user_id", "job_id", name=UNIQUE_APPLICATION_CONSTRAINT),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)

    resume = Column(Text, nullable=False)  # Copied from the applicant profile at apply time
    cover_letter = Column(Text, default="")
    status = Column(String(20), nullable=False, default=ApplicationStatus.APPLIED.value, index=True)
    applied_date = Column(DateTime, default=datetime.utcnow, index=True)

    # Employer side
    notes = Column(Text, nullable=True)
    interview_date = Column(DateTime, nullable=True)
    interview_location = Column(String(200), nullable=True)
    interview_type = Column(String(20), default=InterviewType.IN_PERSON.value)
    feedback = Column(Text, nullable=True)
    salary_offered = Column(Float, nullable=True)
    start_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    applicant = relationship("User", back_populates="applications")
    job = relationship("Job", back_populates="applications")

    @property
    def application_age(self) -> str:
        if not self.applied_date:
            return ""
        seconds = abs((datetime.utcnow() - self.applied_date).total_seconds())
        days = math.ceil(seconds / 86400)

        if days == 1:
            return "1 day ago"
        if days < 7:
            return f"{days} days ago"
        if days < 30:
            return f"{math.ceil(days / 7)} weeks ago"
        if days < 365:
            return f"{math.ceil(days / 30)} months ago"
        return f"{math.ceil(days / 365)} years ago"

    def __repr__(self):
        return f"<Application {self.user_id} for Job #{self.job_id}>"
