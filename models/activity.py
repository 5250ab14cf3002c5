from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text


class Activity(SQLModel, table=True):
    """Free-form timestamped note attached to any entity."""

    __tablename__ = "activities"
    __table_args__ = (
        sa.Index("ix_activities_entity", "entity_type", "entity_id"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)
    entity_type: str = Field(nullable=False)  # candidate, company, job
    entity_id: str = Field(nullable=False)

    activity_type: str = Field(default="note")  # note, call, email, meeting, interview
    subject: str = Field(nullable=False)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    scheduled_date: datetime = Field(default_factory=datetime.utcnow, index=True)
    status: Optional[str] = Field(default=None)

    created_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
