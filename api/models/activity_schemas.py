from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ActivityCreate(BaseModel):
    """Schema for logging an activity against a candidate, company or job"""
    entity_type: str = Field(..., description="candidate, company or job")
    entity_id: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    activity_type: str = Field("note", description="note, call, email, meeting, interview")
    description: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    status: Optional[str] = None


class ActivityUpdate(BaseModel):
    subject: Optional[str] = Field(None, min_length=1)
    activity_type: Optional[str] = None
    description: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    status: Optional[str] = None


class ActivityResponse(BaseModel):
    id: str
    entity_type: str
    entity_id: str
    activity_type: str
    subject: str
    description: Optional[str] = None
    scheduled_date: datetime
    status: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
