from datetime import datetime
from typing import List, Optional
import uuid

from sqlmodel import SQLModel, Field, Column, JSON
from sqlalchemy import Text


class Candidate(SQLModel, table=True):
    """Candidate owned by an organization."""

    __tablename__ = "candidates"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)

    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)
    email: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = Field(default=None)
    current_title: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    skills: List[str] = Field(default_factory=list, sa_column=Column(JSON))  # order is preserved
    rating: Optional[int] = Field(default=None)  # 0-5
    status: str = Field(default="active", index=True)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))

    created_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
