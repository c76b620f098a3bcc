"""
Authentication Endpoints
User signup, signin, and profile management
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from rentdesk.core.config import settings
from rentdesk.core.deps import get_current_user
from rentdesk.core.security import get_password_hash, verify_password
from rentdesk.database import get_db
from rentdesk.db.base import utcnow
from rentdesk.models.user import User, UserRole
from rentdesk.schemas.auth import AuthResponse, RefreshResponse
from rentdesk.schemas.user import PasswordChange, ProfileUpdate, UserCreate, UserLogin, UserResponse
from rentdesk.services import auth_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def signup(user_in: UserCreate, db: Session = Depends(get_db)):
    """Register a new user and return an access token"""
    if user_in.role == UserRole.ADMIN and not settings.ALLOW_ADMIN_SIGNUP:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin accounts cannot be created through signup",
        )

    if auth_service.get_user_by_email(db, user_in.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = auth_service.create_user(
        db,
        email=user_in.email,
        password=user_in.password,
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        phone=user_in.phone,
        role=user_in.role,
        address=user_in.address.model_dump() if user_in.address else None,
    )

    return AuthResponse(
        message="Account created successfully",
        user=UserResponse.model_validate(user),
        access_token=auth_service.generate_token(user),
    )


@router.post("/signin", response_model=AuthResponse)
def signin(credentials: UserLogin, db: Session = Depends(get_db)):
    """Sign in with email and password"""
    user = auth_service.authenticate_user(db, credentials.email, credentials.password)

    if not user:
        logger.info(f"[AUTH] Failed signin for {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    user.last_login = utcnow()
    db.commit()
    db.refresh(user)

    return AuthResponse(
        message="Signed in successfully",
        user=UserResponse.model_validate(user),
        access_token=auth_service.generate_token(user),
    )


@router.get("/me")
@router.get("/current-user")
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return {"success": True, "user": UserResponse.model_validate(current_user)}


@router.put("/me")
def update_profile(
    profile_in: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update the caller's own profile"""
    changes = profile_in.changes()
    for field, value in changes.items():
        setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)

    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": UserResponse.model_validate(current_user),
    }


@router.put("/change-password")
def change_password(
    password_in: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change password after re-checking the current one"""
    if not verify_password(password_in.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect",
        )

    current_user.hashed_password = get_password_hash(password_in.new_password)
    db.commit()
    logger.info(f"[AUTH] Password changed for {current_user.email}")

    return {"success": True, "message": "Password changed successfully"}


@router.post("/signout")
def signout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy"""
    return {"success": True, "message": "Signed out successfully"}


@router.post("/refresh-token", response_model=RefreshResponse)
def refresh_token(current_user: User = Depends(get_current_user)):
    """Issue a fresh token for a still-valid session"""
    return RefreshResponse(access_token=auth_service.generate_token(current_user))
