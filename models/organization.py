from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import SQLModel, Field


class Organization(SQLModel, table=True):
    """Organizations table for multi-tenant data isolation.

    Every tenant-owned row carries an `organization_id` pointing here and
    cannot be read or written from another organization.
    """

    __tablename__ = "organizations"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, nullable=False)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)


class OrganizationMember(SQLModel, table=True):
    """Membership of a user in an organization (one row per pair)."""

    __tablename__ = "organization_members"
    __table_args__ = (
        sa.UniqueConstraint("organization_id", "user_id", name="uq_organization_members_org_user"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)
    user_id: str = Field(index=True, nullable=False)
    joined_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
