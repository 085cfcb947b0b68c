"""
User schemas.
"""
from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime

from seminar_hall.models.user import UserStatus, UserRole


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("name", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    status: UserStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserDecision(BaseModel):
    """Optional reason sent to the user when an account is rejected"""
    reason: Optional[str] = None


class UserDecisionResponse(BaseModel):
    message: str
    user: UserOut


class PreapprovedUserCreate(BaseModel):
    name: str
    email: EmailStr
    role: UserRole = UserRole.club_leader

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class PreapprovedUserOut(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    is_registered: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DeleteResponse(BaseModel):
    message: str
