"""
Pydantic models for registered user profiles (``profiles`` table).
"""

from typing import Optional
from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    full_name: str
    phone: Optional[str] = None
    company: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=20)
    company: Optional[str] = Field(None, max_length=200)
