from jobboard.schemas.common import CamelModel, InputModel, envelope, paginated
from jobboard.schemas.user import (
    UserProfile, UserRegister, UserLogin, ProfileUpdate, PasswordChange, UserUpdate,
    UserResponse, ApplicantSummary, OwnerSummary
)
from jobboard.schemas.job import (
    SalaryRange, JobCreate, JobUpdate, JobResponse, JobWithApplicationState, JobSummary
)
from jobboard.schemas.application import (
    ApplicationCreate, ApplicationStatusUpdate, ApplicationResponse
)
