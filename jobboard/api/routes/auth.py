"""
Account API Endpoints
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobboard.api.deps import get_current_user
from jobboard.core.database import get_db
from jobboard.core.security import create_access_token
from jobboard.models.user import User
from jobboard.schemas import (
    PasswordChange, ProfileUpdate, UserLogin, UserRegister, UserResponse, envelope
)
from jobboard.services.account_service import account_service

router = APIRouter(prefix="/auth", tags=["Auth"])


def _with_token(user: User) -> dict:
    return {
        "token": create_access_token(user.id, user.role),
        "user": UserResponse.model_validate(user).to_json(),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: UserRegister, db: Session = Depends(get_db)):
    user = account_service.register(db, data)
    return envelope(_with_token(user), message="User registered successfully")


@router.post("/login")
def login(data: UserLogin, db: Session = Depends(get_db)):
    user = account_service.authenticate(db, data.email, data.password)
    return envelope(_with_token(user), message="Login successful")


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    return envelope(UserResponse.model_validate(current_user).to_json())


@router.put("/profile")
def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Resume and picture fields take the reference returned by the upload store"""
    user = account_service.update_profile(db, current_user, data)
    return envelope(UserResponse.model_validate(user).to_json(), message="Profile updated successfully")


@router.put("/password")
def change_password(
    data: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    account_service.change_password(db, current_user, data)
    return envelope(message="Password updated successfully")


@router.delete("/me")
def deactivate_account(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    account_service.deactivate(db, current_user)
    return envelope(message="Account deactivated")
