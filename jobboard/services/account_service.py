"""
Account Service
Registration, login and profile maintenance
"""
from datetime import datetime

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.exceptions import AuthenticationException, ConflictException
from jobboard.core.security import hash_password, verify_password
from jobboard.models.user import User
from jobboard.schemas.user import PasswordChange, ProfileUpdate, UserProfile, UserRegister


def merge_profile(user: User, profile: UserProfile) -> None:
    """Overlay the fields the caller sent onto the stored profile"""
    changes = profile.model_dump(by_alias=True, mode="json", exclude_unset=True)
    # Reassign so the JSON column is flagged dirty
    user.profile = {**(user.profile or {}), **changes}


class AccountService:

    def register(self, db: Session, data: UserRegister) -> User:
        if db.query(User.id).filter(User.email == data.email).first():
            raise ConflictException("User already exists with this email")

        profile = data.profile.model_dump(by_alias=True, mode="json", exclude_none=True) if data.profile else {}
        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
            profile=profile,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictException("User already exists with this email")
        db.refresh(user)

        logger.info(f"Registered {user.role} {user.id}")
        return user

    def authenticate(self, db: Session, email: str, password: str) -> User:
        user = db.query(User).filter(User.email == email.lower()).first()
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login for {email}")
            raise AuthenticationException("Invalid credentials")
        if not user.is_active:
            raise AuthenticationException("Account is deactivated")

        user.last_login = datetime.utcnow()
        db.commit()
        db.refresh(user)
        return user

    def update_profile(self, db: Session, user: User, data: ProfileUpdate) -> User:
        if data.name is not None:
            user.name = data.name
        if data.profile is not None:
            merge_profile(user, data.profile)

        db.commit()
        db.refresh(user)
        logger.info(f"Profile updated for {user.id}")
        return user

    def change_password(self, db: Session, user: User, data: PasswordChange) -> None:
        if not verify_password(data.current_password, user.password_hash):
            raise AuthenticationException("Current password is incorrect")
        user.password_hash = hash_password(data.new_password)
        db.commit()
        logger.info(f"Password changed for {user.id}")

    def deactivate(self, db: Session, user: User) -> None:
        user.is_active = False
        db.commit()
        logger.info(f"Account {user.id} deactivated")


account_service = AccountService()
