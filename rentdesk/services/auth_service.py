"""
Authentication Service
Handles user creation, authentication, and token generation
"""
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from datetime import timedelta
from typing import Optional
import logging

from rentdesk.models.user import User, UserRole
from rentdesk.core.security import get_password_hash, verify_password, create_access_token
from rentdesk.core.config import settings

logger = logging.getLogger(__name__)


def create_user(
    db: Session,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    phone: str,
    role: UserRole = UserRole.TENANT,
    address: Optional[dict] = None,
) -> User:
    """
    Create a new user

    Args:
        db: Database session
        email: User email (stored lowercase)
        password: Plain text password (will be hashed)
        first_name / last_name / phone: Profile fields
        role: User role (default: tenant)
        address: Optional address block

    Returns:
        Created user object

    Raises:
        HTTPException 409 when the email is already taken
    """
    db_user = User(
        email=email.strip().lower(),
        hashed_password=get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        role=role,
        address=address,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same address
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )
    db.refresh(db_user)
    logger.info(f"[AUTH] Created {role.value} account {db_user.email}")
    return db_user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Authenticate user with email and password

    Returns:
        User object if the credentials match, None otherwise.
        Inactive users are returned; the caller decides how to reject them.
    """
    user = get_user_by_email(db, email)

    if not user or not verify_password(password, user.hashed_password):
        return None

    return user


def generate_token(user: User) -> str:
    """
    Generate access token for user

    The subject is the user id; the role is informational only, the
    current role is always re-read from the database on each request.
    """
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": str(user.id), "role": user.role.value},
        expires_delta=access_token_expires
    )
    return access_token


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Case-insensitive lookup by email"""
    return db.query(User).filter(User.email == email.strip().lower()).first()
