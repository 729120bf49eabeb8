"""
User API Endpoints
Admin account management, plus self-service edit and delete by id
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jobboard.api.deps import get_current_user, require_admin
from jobboard.core.config import settings
from jobboard.core.database import get_db
from jobboard.models.user import User, UserRole
from jobboard.schemas import UserResponse, UserUpdate, envelope, paginated
from jobboard.services.user_directory import user_directory

router = APIRouter(prefix="/users", tags=["Users"])


def serialize_user(user) -> dict:
    return UserResponse.model_validate(user).to_json()


# ============== ADMIN ENDPOINTS ==============

@router.get("")
def list_users(
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All accounts, newest first; search matches name or email"""
    result = user_directory.list_users(
        db, current_user,
        role=role.value if role else None,
        is_active=is_active, search=search,
        page=page, limit=limit,
    )
    return paginated(result, serialize_user)


@router.put("/{user_id}/toggle-status")
def toggle_user_status(
    user_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = user_directory.toggle_status(db, user_id, current_user)
    message = "User activated successfully" if user.is_active else "User deactivated successfully"
    return envelope(serialize_user(user), message=message)


# ============== ACCOUNT ENDPOINTS ==============
# The account holder or an admin

@router.get("/{user_id}")
def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = user_directory.get_user(db, user_id, current_user)
    return envelope(serialize_user(user))


@router.put("/{user_id}")
def update_user(
    user_id: str,
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = user_directory.update_user(db, user_id, current_user, data)
    return envelope(serialize_user(user), message="User updated successfully")


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Hard delete; takes the user's applications and posted jobs with it"""
    removed = user_directory.delete_user(db, user_id, current_user)
    return envelope(message="User deleted successfully", **removed)
