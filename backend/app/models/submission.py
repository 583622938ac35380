"""
Pydantic models for contact form submissions (``form_submissions`` table).
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    NEGOSIASI = "negosiasi"
    SUCCESS = "success"


class FormSubmission(BaseModel):
    """Full form_submissions record from the database."""
    model_config = {"from_attributes": True}

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    service: Optional[str] = None
    message: Optional[str] = None
    land_size: Optional[str] = None
    status: SubmissionStatus = SubmissionStatus.PENDING
    created_at: str
    updated_at: Optional[str] = None


class SubmissionUpdate(BaseModel):
    """Partial update from the dashboard edit form; unset fields are left alone."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    company: Optional[str] = Field(None, max_length=200)
    service: Optional[str] = Field(None, max_length=100)
    message: Optional[str] = Field(None, max_length=5000)
    land_size: Optional[str] = Field(None, max_length=100)
    status: Optional[SubmissionStatus] = None


class StatusChangeRequest(BaseModel):
    status: SubmissionStatus
    notify: bool = True  # email the customer when the status actually changes


class StatusChangeResponse(BaseModel):
    submission: FormSubmission
    notification_sent: bool


class SubmissionStats(BaseModel):
    """Per-status counts shown on the dashboard cards."""
    total: int
    pending: int
    negosiasi: int
    success: int
