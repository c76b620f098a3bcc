"""
Password hashing (bcrypt through passlib) and signed access tokens (python-jose)
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from rentdesk.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


class TokenExpiredError(Exception):
    """Signature checks out but `exp` is in the past."""


class InvalidTokenError(Exception):
    """Undecodable, forged, or missing a `sub` claim."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("[AUTH] Stored password hash could not be parsed")
        return False


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign `data` with an `exp` claim; lifetime defaults to ACCESS_TOKEN_EXPIRE_MINUTES"""
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Verify a token and return its claims

    Raises:
        TokenExpiredError: the token was valid but has expired
        InvalidTokenError: anything else wrong with it
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError("Token expired")
    except JWTError as e:
        raise InvalidTokenError(str(e))

    if not claims.get("sub"):
        raise InvalidTokenError("Token missing subject")
    return claims
