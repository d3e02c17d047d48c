from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CitizenSummary(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class CreateComplaintBody(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    address: Optional[str] = None
    attachment_id: Optional[str] = None


class UpdateComplaintBody(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = None


class StatusUpdateBody(BaseModel):
    # checked against ComplaintStatus by the authorizer, not here
    status: Optional[str] = None


class ComplaintOut(BaseModel):
    id: str
    title: str
    description: str
    category: str
    address: Optional[str] = None
    status: str
    citizen_id: Optional[str] = None
    citizen: Optional[CitizenSummary] = None
    attachment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
