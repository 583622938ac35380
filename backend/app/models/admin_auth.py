"""
Pydantic models for admin login and session endpoints.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from app.services.validator import is_valid_email


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        """Trim surrounding whitespace and reject malformed addresses."""
        if isinstance(v, str):
            v = v.strip()
            if not is_valid_email(v):
                raise ValueError("Invalid email format")
        return v


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    user_id: str


class SessionInfo(BaseModel):
    user_id: str
    roles: List[str]


class LogoutResponse(BaseModel):
    message: str
    session_revoked: bool
