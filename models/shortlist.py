from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text


class Shortlist(SQLModel, table=True):
    """Named, organization-scoped set of candidates."""

    __tablename__ = "shortlists"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)
    name: str = Field(index=True, nullable=False)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    created_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ShortlistCandidate(SQLModel, table=True):
    """Membership of a candidate in a shortlist, with per-member notes."""

    __tablename__ = "shortlist_candidates"
    __table_args__ = (
        sa.UniqueConstraint("shortlist_id", "candidate_id", name="uq_shortlist_candidates_pair"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    shortlist_id: str = Field(foreign_key="shortlists.id", ondelete="CASCADE", index=True)
    candidate_id: str = Field(foreign_key="candidates.id", ondelete="CASCADE", index=True)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))
    added_by: Optional[str] = Field(default=None)
    added_at: datetime = Field(default_factory=datetime.utcnow)
