from pydantic import BaseModel, EmailStr, Field, field_validator
from uuid import UUID
from datetime import datetime
from typing import List, Optional

from rentdesk.models.user import UserRole
from rentdesk.schemas.common import AddressBlock, UpdateSchema


class UserBase(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=30)


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)
    role: UserRole = UserRole.TENANT
    address: Optional[AddressBlock] = None

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("first_name", "last_name", "phone")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class ProfileUpdate(UpdateSchema):
    """Self-service profile edit. Email, role and password are not accepted here."""
    not_nullable = ("first_name", "last_name", "phone")

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    avatar_url: Optional[str] = None
    address: Optional[AddressBlock] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8)


class UserSummary(BaseModel):
    """Embedded user reference (owner, manager, reporter...)"""
    id: UUID
    email: str
    first_name: str
    last_name: str
    phone: str
    role: UserRole

    class Config:
        from_attributes = True


class UserResponse(UserSummary):
    avatar_url: Optional[str] = None
    address: Optional[dict] = None
    is_active: bool
    last_login: Optional[datetime] = None
    property_ids: List[UUID] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

