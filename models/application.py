from datetime import date, datetime
from enum import Enum
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text


class ApplicationStatus(str, Enum):
    """Pipeline states, listed in pipeline order (rejected is off-track)."""
    ASSOCIATED = "associated"
    SUBMITTED_TO_CLIENT = "submitted-to-client"
    INTERVIEW = "interview"
    PLACED = "placed"
    REJECTED = "rejected"


PIPELINE_ORDER = [
    ApplicationStatus.ASSOCIATED,
    ApplicationStatus.SUBMITTED_TO_CLIENT,
    ApplicationStatus.INTERVIEW,
    ApplicationStatus.PLACED,
]

TERMINAL_STATUSES = {ApplicationStatus.PLACED, ApplicationStatus.REJECTED}


class Application(SQLModel, table=True):
    """
    A candidate's application to a job.

    `submitted_to_client_date` doubles as the interview-eligibility gate:
    interviews can only be scheduled once it is set.
    """

    __tablename__ = "applications"
    __table_args__ = (
        sa.UniqueConstraint("candidate_id", "job_id", name="uq_applications_candidate_job"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)
    candidate_id: str = Field(foreign_key="candidates.id", ondelete="CASCADE", index=True)
    job_id: str = Field(foreign_key="jobs.id", ondelete="CASCADE", index=True)

    status: str = Field(default=ApplicationStatus.ASSOCIATED.value, index=True)
    applied_date: date = Field(default_factory=date.today)
    submitted_to_client_date: Optional[date] = Field(default=None)
    interview_date: Optional[date] = Field(default=None)
    placed_date: Optional[date] = Field(default=None)
    offered_salary: Optional[int] = Field(default=None)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))

    created_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
