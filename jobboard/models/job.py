"""
Job posting database model
"""
import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship

from jobboard.core.database import Base


class JobCategory(str, enum.Enum):
    INTERNSHIP = "internship"
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    FREELANCE = "freelance"


class ExperienceLevel(str, enum.Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    EXECUTIVE = "executive"


class JobStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"


class Currency(str, enum.Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    CAD = "CAD"
    AUD = "AUD"


class SalaryPeriod(str, enum.Enum):
    HOURLY = "hourly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


def _short_amount(num: float) -> str:
    if num >= 1000000:
        return f"{num / 1000000:.1f}M"
    if num >= 1000:
        return f"{num / 1000:.1f}K"
    return f"{num:g}"


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(100), nullable=False)
    company = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)
    location = Column(String(200), nullable=False, index=True)
    category = Column(String(20), nullable=False, index=True)
    experience = Column(String(20), nullable=False, index=True)

    # Salary sub-record, flattened
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    salary_currency = Column(String(3), default=Currency.USD.value)
    salary_period = Column(String(10), default=SalaryPeriod.YEARLY.value)

    skills = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)

    posted_by = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(10), nullable=False, default=JobStatus.ACTIVE.value, index=True)
    application_deadline = Column(DateTime, nullable=True)
    remote = Column(Boolean, default=False)
    featured = Column(Boolean, default=False)

    # Counters are only ever changed with UPDATE ... SET col = col + n
    application_count = Column(Integer, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="jobs")
    applications = relationship("Application", back_populates="job")

    @property
    def salary(self) -> dict:
        return {
            "min": self.salary_min,
            "max": self.salary_max,
            "currency": self.salary_currency,
            "period": self.salary_period,
        }

    @property
    def formatted_salary(self) -> str:
        if not self.salary_min and not self.salary_max:
            return "Not specified"

        low = _short_amount(self.salary_min) if self.salary_min else ""
        high = _short_amount(self.salary_max) if self.salary_max else ""
        currency = self.salary_currency or Currency.USD.value
        period = self.salary_period or SalaryPeriod.YEARLY.value

        if low and high:
            return f"{currency} {low} - {high} / {period}"
        if low:
            return f"{currency} {low}+ / {period}"
        return f"Up to {currency} {high} / {period}"

    def __repr__(self):
        return f"<Job {self.title}>"
