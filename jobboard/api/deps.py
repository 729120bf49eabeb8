"""
Request-scoped dependencies: who is calling, and may they use this route
"""
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from jobboard.core.database import get_db
from jobboard.core.exceptions import AuthenticationException, AuthorizationException
from jobboard.core.security import decode_access_token
from jobboard.models.user import User, UserRole


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract <token> from "Bearer <token>"; anything else counts as no token"""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def _resolve_user(db: Session, token: str) -> User:
    payload = decode_access_token(token)
    user = db.query(User).filter(User.id == payload.get("sub")).first()
    if not user:
        raise AuthenticationException("User not found")
    if not user.is_active:
        raise AuthenticationException("Account is deactivated")
    return user


def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    """
    Usage:
        @router.get("/endpoint")
        def protected(current_user: User = Depends(get_current_user)): ...
    """
    token = _bearer_token(authorization)
    if token is None:
        raise AuthenticationException("Not authorized, no token")
    return _resolve_user(db, token)


def get_optional_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Anonymous callers get None; a bad token is still an error"""
    token = _bearer_token(authorization)
    if token is None:
        return None
    return _resolve_user(db, token)


def require_roles(*roles: UserRole):
    allowed = {role.value for role in roles}

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise AuthorizationException(
                f"User role {current_user.role} is not authorized to access this route"
            )
        return current_user

    return checker


require_employer = require_roles(UserRole.EMPLOYER, UserRole.ADMIN)
require_jobseeker = require_roles(UserRole.JOBSEEKER)
require_admin = require_roles(UserRole.ADMIN)
