"""
Schemas for authentication (login, token).
"""
from pydantic import BaseModel, field_validator
from typing import Optional


class Token(BaseModel):
    access_token: str
    token_type: str
    role: str


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        # Unknown or malformed emails fail as bad credentials, not as 422
        return (v or "").strip().lower()


class SignupResponse(BaseModel):
    message: str
    status: str
    access_token: Optional[str] = None
    token_type: Optional[str] = None
    role: Optional[str] = None
