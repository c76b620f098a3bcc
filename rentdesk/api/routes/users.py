"""
User administration
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
import logging

from rentdesk.core.config import settings
from rentdesk.core.deps import require_role
from rentdesk.database import get_db
from rentdesk.models.user import User, UserRole
from rentdesk.schemas.user import UserResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/")
def list_users(
    role: Optional[UserRole] = None,
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN, UserRole.MANAGER)),
):
    """List accounts, optionally by role or a name/email search"""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if search:
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(or_(
            User.email.like(pattern),
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
        ))

    users = query.order_by(User.created_at.desc()).offset(skip).limit(limit).all()
    return {
        "success": True,
        "count": len(users),
        "users": [UserResponse.model_validate(u) for u in users],
    }


def _get_user_or_404(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/{user_id}/deactivate")
def deactivate_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    """Deactivate an account; accounts are never deleted"""
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot deactivate your own account",
        )

    user = _get_user_or_404(db, user_id)
    user.is_active = False
    db.commit()
    db.refresh(user)
    logger.info(f"[AUTH] {current_user.email} deactivated {user.email}")

    return {"success": True, "message": "User deactivated", "user": UserResponse.model_validate(user)}


@router.put("/{user_id}/activate")
def activate_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    user = _get_user_or_404(db, user_id)
    user.is_active = True
    db.commit()
    db.refresh(user)

    return {"success": True, "message": "User activated", "user": UserResponse.model_validate(user)}
