from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text


class InterviewStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Interview(SQLModel, table=True):
    """Client interview booked against an eligible application."""

    __tablename__ = "interviews"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)
    application_id: str = Field(foreign_key="applications.id", ondelete="CASCADE", index=True)

    interview_type: str = Field(default="virtual")  # virtual, phone, onsite
    scheduled_date: datetime = Field(index=True)
    duration_minutes: int = Field(default=60)
    location: Optional[str] = Field(default=None)
    interviewer_name: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))

    status: str = Field(default=InterviewStatus.SCHEDULED.value, index=True)
    feedback: Optional[str] = Field(default=None, sa_column=Column(Text))
    rating: Optional[int] = Field(default=None)

    created_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
