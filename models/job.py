from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text


class JobStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    FILLED = "filled"
    CANCELLED = "cancelled"


class Job(SQLModel, table=True):
    """Opening at a company; references exactly one company."""

    __tablename__ = "jobs"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)
    company_id: str = Field(foreign_key="companies.id", ondelete="CASCADE", index=True)

    title: str = Field(index=True, nullable=False)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    location: Optional[str] = Field(default=None)
    employment_type: Optional[str] = Field(default=None)  # permanent, contract, ...
    priority: str = Field(default="medium")  # low, medium, high
    salary_min: Optional[int] = Field(default=None)
    salary_max: Optional[int] = Field(default=None)
    status: str = Field(default=JobStatus.DRAFT.value, index=True)

    created_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
