"""
Auth response envelopes
"""
from pydantic import BaseModel

from rentdesk.schemas.user import UserResponse


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    user: UserResponse
    access_token: str
    token_type: str = "bearer"


class RefreshResponse(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
