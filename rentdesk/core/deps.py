from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from typing import Optional
import logging
import uuid

from rentdesk.core.security import InvalidTokenError, TokenExpiredError, decode_access_token
from rentdesk.database import get_db
from rentdesk.models.user import User, UserRole

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401, not FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Get current authenticated user from the bearer token.
    Returns 401 if the token is missing, expired or invalid, or if the
    user no longer exists or has been deactivated.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenExpiredError:
        raise _unauthorized("Token expired")
    except InvalidTokenError as e:
        logger.warning(f"[AUTH] JWT decode error: {e}")
        raise _unauthorized("Invalid token")

    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise _unauthorized("Invalid token")

    user = db.get(User, user_id)
    if user is None:
        logger.warning(f"[AUTH] User not found in database: {user_id}")
        raise _unauthorized("User not found")

    if not user.is_active:
        raise _unauthorized("Account is deactivated")

    return user


def require_role(*roles: UserRole):
    """
    Dependency factory restricting an endpoint to the given roles.

    Usage:
        current_user: User = Depends(require_role(UserRole.ADMIN, UserRole.MANAGER))
    """
    allowed = set(roles)

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{current_user.role.value}' is not authorized to access this resource",
            )
        return current_user

    return role_checker


# Common role groups
STAFF_ROLES = (UserRole.ADMIN, UserRole.MANAGER, UserRole.OWNER)
