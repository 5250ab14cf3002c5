from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text


class Company(SQLModel, table=True):
    """Client company that jobs are recruited for."""

    __tablename__ = "companies"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)
    name: str = Field(index=True, nullable=False)
    industry: Optional[str] = Field(default=None)
    website: Optional[str] = Field(default=None)
    city: Optional[str] = Field(default=None)
    state: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class CompanyContact(SQLModel, table=True):
    """Person at a company; at most one primary contact per company."""

    __tablename__ = "company_contacts"
    __table_args__ = (
        sa.Index(
            "uq_company_contacts_primary",
            "company_id",
            unique=True,
            sqlite_where=sa.text("is_primary"),
            postgresql_where=sa.text("is_primary"),
        ),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)
    company_id: str = Field(foreign_key="companies.id", ondelete="CASCADE", index=True)
    name: str = Field(nullable=False)
    email: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    title: Optional[str] = Field(default=None)
    is_primary: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
