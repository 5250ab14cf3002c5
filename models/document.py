from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import SQLModel, Field


class EntityType(str, Enum):
    CANDIDATE = "candidate"
    COMPANY = "company"


# Document types each entity type accepts.
DOCUMENT_TYPES = {
    EntityType.CANDIDATE.value: ("resume", "portfolio", "certification", "other"),
    EntityType.COMPANY.value: ("contract", "agreement", "other"),
}


class Document(SQLModel, table=True):
    """
    Uploaded file attached to a candidate or company.

    For a fixed (entity_type, entity_id, document_type) at most one row has
    `is_primary` set; the partial unique index enforces it in storage.
    """

    __tablename__ = "documents"
    __table_args__ = (
        sa.Index(
            "uq_documents_primary_per_type",
            "entity_type",
            "entity_id",
            "document_type",
            unique=True,
            sqlite_where=sa.text("is_primary"),
            postgresql_where=sa.text("is_primary"),
        ),
        sa.Index("ix_documents_entity", "entity_type", "entity_id"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)

    entity_type: str = Field(nullable=False)
    entity_id: str = Field(nullable=False)
    document_type: str = Field(nullable=False)

    file_name: str = Field(nullable=False)
    file_path: str = Field(nullable=False)  # file transport reference
    file_size_bytes: int = Field(default=0)
    mime_type: Optional[str] = Field(default=None)
    is_primary: bool = Field(default=False, nullable=False)

    uploaded_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
